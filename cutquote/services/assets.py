from __future__ import annotations

import base64
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from cutquote.core.errors import TemplateUnavailable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuoteAssets:
    template: str
    logo_data_uri: str


def load_template(path: Union[str, Path]) -> str:
    """
    Read the HTML template. Without it there is no document, so any
    failure here is fatal (TemplateUnavailable).
    """
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateUnavailable(f"Could not read HTML template {p}: {e}") from e


def load_logo_data_uri(path: Union[str, Path], fallback: str) -> str:
    """
    Logo as an embeddable data URI. If the file cannot be read the
    fallback reference is returned instead and rendering carries on.
    """
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as e:
        log.warning("Could not read logo %s, using placeholder: %s", p, e)
        return fallback

    mime = mimetypes.guess_type(p.name)[0] or "image/png"
    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def load_assets(settings) -> QuoteAssets:
    """Template first: if it is missing we stop before touching the logo or the browser."""
    template = load_template(settings.template_path)
    logo = load_logo_data_uri(settings.logo_path, settings.logo_fallback_url)
    return QuoteAssets(template=template, logo_data_uri=logo)
