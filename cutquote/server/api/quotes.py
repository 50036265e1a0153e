import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse, Response

from cutquote.core.errors import QuoteError
from cutquote.server.deps import get_render_pool
from cutquote.server.schemas.quote import (
    EstimateOut,
    PricedLineOut,
    QuotePreviewOut,
    QuoteRequest,
)
from cutquote.server.settings.config import Settings, get_settings
from cutquote.services.pricing import compute_quote, estimate_quote
from cutquote.services.quote_document import generate_quote_html, generate_quote_pdf
from cutquote.services.render_engine import RenderEnginePool

log = logging.getLogger(__name__)

PDF_ERROR = "Failed to generate quote PDF"
HTML_ERROR = "Failed to generate quote HTML"

router = APIRouter(prefix="/api", tags=["quotes"])


# ==============================
# PDF
# ==============================

@router.post(
    "/generate-quote",
    summary="Price the items and return the quote as a PDF",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def generate_quote(
    payload: QuoteRequest,
    settings: Settings = Depends(get_settings),
    pool: RenderEnginePool = Depends(get_render_pool),
):
    try:
        pdf = await generate_quote_pdf(payload, pool, settings=settings)
    except QuoteError as e:
        log.error("%s: %s", type(e).__name__, e.detail, exc_info=True)
        return JSONResponse(status_code=500, content={"error": PDF_ERROR})
    except Exception:
        log.exception("Unexpected error while generating quote PDF")
        return JSONResponse(status_code=500, content={"error": PDF_ERROR})

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=quote.pdf"},
    )


@router.post(
    "/generate-quote/html",
    summary="Filled-in quote template as HTML (no PDF rendering)",
    response_class=HTMLResponse,
)
def generate_quote_html_endpoint(
    payload: QuoteRequest,
    settings: Settings = Depends(get_settings),
):
    try:
        html = generate_quote_html(payload, settings=settings)
    except QuoteError as e:
        log.error("%s: %s", type(e).__name__, e.detail, exc_info=True)
        return JSONResponse(status_code=500, content={"error": HTML_ERROR})
    except Exception:
        log.exception("Unexpected error while generating quote HTML")
        return JSONResponse(status_code=500, content={"error": HTML_ERROR})

    return HTMLResponse(content=html)


# ==============================
# PREVIEW
# ==============================

@router.post(
    "/quote-preview",
    summary="Priced rows and total as JSON, plus the thickness/factor estimate",
    response_model=QuotePreviewOut,
)
def quote_preview(
    payload: QuoteRequest,
    settings: Settings = Depends(get_settings),
):
    priced = compute_quote(payload)
    factor = payload.factor if payload.factor is not None else settings.estimate_factor
    estimate = estimate_quote(payload, factor=factor)

    return QuotePreviewOut(
        customer_name=payload.customer_name,
        items=[
            PricedLineOut(
                index=p.index,
                description=payload.description,
                quantity=p.quantity,
                unit_total=p.unit_total,
                item_total=p.item_total,
            )
            for p in priced.priced_items
        ],
        final_total=priced.final_total,
        estimate=EstimateOut(
            factor=estimate.factor,
            total_units=estimate.total_units,
            estimated_cost=estimate.estimated_cost,
        ),
    )
