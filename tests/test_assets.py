import base64
import logging

import pytest

from cutquote.core.errors import AssetUnavailable, TemplateUnavailable
from cutquote.services.assets import load_assets, load_logo_data_uri, load_template


def test_load_template(template_file):
    assert "{{items}}" in load_template(template_file)


def test_missing_template_is_fatal(tmp_path):
    with pytest.raises(TemplateUnavailable) as exc:
        load_template(tmp_path / "nope.html")
    assert isinstance(exc.value, AssetUnavailable)
    assert "nope.html" in exc.value.detail


def test_logo_as_data_uri(logo_file):
    uri = load_logo_data_uri(logo_file, "fallback")
    assert uri.startswith("data:image/png;base64,")
    assert base64.b64decode(uri.split(",", 1)[1]) == logo_file.read_bytes()


def test_missing_logo_falls_back(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="cutquote.services.assets"):
        uri = load_logo_data_uri(tmp_path / "missing.png", "https://example.invalid/p.png")
    assert uri == "https://example.invalid/p.png"
    assert "using placeholder" in caplog.text


def test_load_assets_template_first(settings, tmp_path):
    broken = settings.model_copy(update={
        "template_path": tmp_path / "missing.html",
        "logo_path": tmp_path / "missing.png",
    })
    with pytest.raises(TemplateUnavailable):
        load_assets(broken)


def test_load_assets(settings):
    assets = load_assets(settings)
    assert "{{customerName}}" in assets.template
    assert assets.logo_data_uri.startswith("data:image/png;base64,")
