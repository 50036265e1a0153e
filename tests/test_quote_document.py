import asyncio
from datetime import datetime

import pytest

from cutquote.core.errors import RenderEngineUnavailable, RenderFailed, TemplateUnavailable
from cutquote.services.assets import load_assets
from cutquote.services.pricing import compute_quote
from cutquote.services.quote_document import (
    build_quote_html,
    generate_quote_html,
    generate_quote_pdf,
    render_quote_document,
)
from cutquote.services.render_engine import RenderEnginePool
from conftest import FAKE_PDF, FakeProvider

NOW = datetime(2026, 3, 1, 10, 30, 0)


def test_generate_pdf(sample_request, pool, provider, settings):
    pdf = asyncio.run(generate_quote_pdf(sample_request, pool, settings=settings, now=NOW))

    assert pdf == FAKE_PDF
    assert provider.launched == 1 and provider.closed == 1
    html, options = provider.rendered[0]
    assert "Customer: Acme Cutting" in html
    assert "Total: ₹300.00" in html
    assert "<td>1</td><td>Laser cut MS plate</td><td>3</td><td>₹100.00</td><td>₹300.00</td>" in html
    assert "Date: 01/03/2026 Due: 31/03/2026" in html
    assert "{{" not in html
    assert options.timeout_s == settings.render_timeout_s


def test_empty_items_still_render(pool, provider, settings):
    request = {"customerName": "Nobody", "description": "", "rate": 10, "items": []}
    pdf = asyncio.run(generate_quote_pdf(request, pool, settings=settings, now=NOW))

    assert pdf == FAKE_PDF
    html, _ = provider.rendered[0]
    assert "<tr>" not in html
    assert "Total: ₹0.00" in html


def test_missing_template_fails_before_engine(sample_request, pool, provider, settings, tmp_path):
    broken = settings.model_copy(update={"template_path": tmp_path / "gone.html"})

    with pytest.raises(TemplateUnavailable):
        asyncio.run(generate_quote_pdf(sample_request, pool, settings=broken))
    assert provider.launched == 0


def test_missing_logo_uses_placeholder(sample_request, pool, provider, settings, tmp_path):
    no_logo = settings.model_copy(update={"logo_path": tmp_path / "gone.png"})

    pdf = asyncio.run(generate_quote_pdf(sample_request, pool, settings=no_logo, now=NOW))

    assert pdf == FAKE_PDF
    html, _ = provider.rendered[0]
    assert '<img src="https://example.invalid/placeholder.png">' in html


def test_render_failure_returns_nothing_and_releases_once(sample_request, settings):
    provider = FakeProvider(fail_render=True)
    pool = RenderEnginePool(provider)

    with pytest.raises(RenderFailed) as exc:
        asyncio.run(generate_quote_pdf(sample_request, pool, settings=settings))
    assert "page crashed" in exc.value.detail
    assert provider.launched == 1
    assert provider.closed == 1


def test_render_timeout_is_render_failed(sample_request, settings):
    provider = FakeProvider(delay=1.0)
    pool = RenderEnginePool(provider)
    fast = settings.model_copy(update={"render_timeout_s": 0.05})

    with pytest.raises(RenderFailed) as exc:
        asyncio.run(generate_quote_pdf(sample_request, pool, settings=fast))
    assert "timed out" in exc.value.detail
    assert provider.closed == 1


def test_engine_unavailable(sample_request, settings):
    pool = RenderEnginePool(FakeProvider(fail_launch=True))

    with pytest.raises(RenderEngineUnavailable):
        asyncio.run(generate_quote_pdf(sample_request, pool, settings=settings))


def test_render_quote_document_uses_given_priced(sample_request, pool, provider, settings):
    priced = compute_quote(sample_request)
    assets = load_assets(settings)

    asyncio.run(render_quote_document(priced, sample_request, assets, pool, settings=settings, now=NOW))
    html, _ = provider.rendered[0]
    assert "Total: ₹300.00" in html


def test_html_pipeline_matches_pdf_input(sample_request, pool, provider, settings):
    html = generate_quote_html(sample_request, settings=settings, now=NOW)
    asyncio.run(generate_quote_pdf(sample_request, pool, settings=settings, now=NOW))
    assert provider.rendered[0][0] == html


def test_currency_symbol_from_settings(sample_request, settings):
    priced = compute_quote(sample_request)
    assets = load_assets(settings)
    dollars = settings.model_copy(update={"currency_symbol": "$"})

    html = build_quote_html(priced, sample_request, assets, settings=dollars, now=NOW)
    assert "Total: $300.00" in html
