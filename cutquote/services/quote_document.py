from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

from cutquote.core.errors import RenderFailed
from cutquote.core.render import build_token_table, substitute_tokens
from cutquote.services.assets import QuoteAssets, load_assets
from cutquote.services.pricing import PricedQuote, _obj_to_dict, compute_quote
from cutquote.services.render_engine import PdfOptions, RenderEnginePool

log = logging.getLogger(__name__)


def build_quote_html(
    priced: PricedQuote,
    request: Any,
    assets: QuoteAssets,
    *,
    settings,
    now: Optional[datetime] = None,
) -> str:
    """
    Fill the template with the priced quote.

    customerName and description are read from the request itself;
    everything with a number in it comes from priced.
    """
    req = _obj_to_dict(request)
    table = build_token_table(
        priced,
        customer_name=str(req.get("customerName") or req.get("customer_name") or ""),
        description=str(req.get("description") or ""),
        logo_data_uri=assets.logo_data_uri,
        now=now or datetime.now(),
        symbol=settings.currency_symbol,
        due_days=settings.due_days,
        date_format=settings.date_format,
    )
    return substitute_tokens(assets.template, table)


def pdf_options(settings) -> PdfOptions:
    return PdfOptions(timeout_s=settings.render_timeout_s)


async def render_quote_document(
    priced: PricedQuote,
    request: Any,
    assets: QuoteAssets,
    pool: RenderEnginePool,
    *,
    settings,
    now: Optional[datetime] = None,
) -> bytes:
    """
    Template substitution + print to PDF.

    Raises RenderEngineUnavailable if no browser could be started and
    RenderFailed if it broke or ran past settings.render_timeout_s.
    Returns the complete PDF or nothing.
    """
    html = build_quote_html(priced, request, assets, settings=settings, now=now)
    options = pdf_options(settings)

    async with pool.session() as session:
        try:
            pdf = await asyncio.wait_for(
                session.print_pdf(html, options),
                timeout=options.timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise RenderFailed(
                f"PDF rendering timed out after {options.timeout_s:g}s"
            ) from e
        except Exception as e:
            raise RenderFailed(f"PDF rendering failed: {e!r}") from e

    if not pdf:
        raise RenderFailed("Render engine returned an empty document")
    return bytes(pdf)


async def generate_quote_pdf(
    request: Any,
    pool: RenderEnginePool,
    *,
    settings,
    now: Optional[datetime] = None,
) -> bytes:
    """Full pipeline: price -> load assets -> render."""
    priced = compute_quote(request)
    assets = load_assets(settings)
    pdf = await render_quote_document(
        priced, request, assets, pool, settings=settings, now=now
    )
    log.info(
        "Quote PDF generated",
        extra={
            "items": len(priced.priced_items),
            "total": round(priced.final_total, 2),
        },
    )
    return pdf


def generate_quote_html(request: Any, *, settings, now: Optional[datetime] = None) -> str:
    """Same pipeline as generate_quote_pdf, but stops before the browser."""
    priced = compute_quote(request)
    assets = load_assets(settings)
    return build_quote_html(priced, request, assets, settings=settings, now=now)
