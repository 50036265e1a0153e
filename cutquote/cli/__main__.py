# cutquote/cli/__main__.py
import asyncio
import json
import sys
from pathlib import Path

from cutquote.core.errors import QuoteError
from cutquote.logging_config import setup_logging
from cutquote.server.settings.config import settings
from cutquote.services.pricing import compute_quote, estimate_quote
from cutquote.services.quote_document import generate_quote_html, generate_quote_pdf
from cutquote.services.render_engine import RenderEnginePool, provider_from_settings

USAGE = """Usage:
  python -m cutquote.cli render <quote.json> [--out=quote.pdf] [--html]
  python -m cutquote.cli preview <quote.json>

Examples:
  python -m cutquote.cli render examples/quote.json --out=quote.pdf
  python -m cutquote.cli render examples/quote.json --html --out=quote.html
  python -m cutquote.cli preview examples/quote.json
"""


def _load_json(p: str):
    try:
        return json.loads(Path(p).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error reading JSON '{p}': {e}", file=sys.stderr)
        sys.exit(2)


def _preview(quote) -> dict:
    priced = compute_quote(quote)
    factor = quote.get("factor")
    if factor is None:
        factor = settings.estimate_factor
    estimate = estimate_quote(quote, factor=factor)
    return {
        "items": [
            {
                "index": p.index,
                "quantity": p.quantity,
                "unitTotal": p.unit_total,
                "itemTotal": p.item_total,
            }
            for p in priced.priced_items
        ],
        "finalTotal": priced.final_total,
        "estimate": {
            "factor": estimate.factor,
            "totalUnits": estimate.total_units,
            "estimatedCost": estimate.estimated_cost,
        },
    }


def _render_pdf(quote) -> bytes:
    pool = RenderEnginePool(
        provider_from_settings(settings),
        max_concurrency=settings.max_concurrent_renders,
    )
    return asyncio.run(generate_quote_pdf(quote, pool, settings=settings))


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    if len(argv) < 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    cmd = argv[0].lower()
    quote_path = argv[1]

    out_path = None
    as_html = False
    for arg in argv[2:]:
        if arg.startswith("--out="):
            out_path = arg.split("=", 1)[1]
        elif arg == "--html":
            as_html = True

    setup_logging()
    quote = _load_json(quote_path)
    if not isinstance(quote, dict):
        print(f"Error: '{quote_path}' must contain a JSON object", file=sys.stderr)
        sys.exit(2)

    if cmd == "preview":
        print(json.dumps(_preview(quote), indent=2, ensure_ascii=False))
        return

    if cmd == "render":
        try:
            if as_html:
                html = generate_quote_html(quote, settings=settings)
            else:
                pdf = _render_pdf(quote)
        except QuoteError as e:
            print(f"{type(e).__name__}: {e.detail}", file=sys.stderr)
            sys.exit(1)

        if as_html:
            if out_path:
                Path(out_path).write_text(html, encoding="utf-8")
            else:
                sys.stdout.write(html)
            return

        Path(out_path or "quote.pdf").write_bytes(pdf)
        return

    print(USAGE, file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
