# cutquote/core/render.py
"""
Render: priced quote + templates/quote_template.html -> HTML

- Builds the <tr> rows for the items table
- Formats money with the currency symbol and two decimals
- Replaces the {{...}} markers from a token table:
    {{logoBase64}} {{quoteNumber}} {{date}} {{dueDate}}
    {{customerName}} {{items}} {{finalTotal}}

Substitution is a single pass over the template. Values are inserted as-is
and never scanned again, so a customer called "{{items}}" stays literal.
Markers with no entry in the table are removed.
"""

import html
import re
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, Mapping

from cutquote.core.numbers import format_money, format_quantity

TOKEN_RE = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")

TOKENS = (
    "logoBase64",
    "quoteNumber",
    "date",
    "dueDate",
    "customerName",
    "items",
    "finalTotal",
)

TokenTable = Dict[str, Callable[[], str]]


# ---------- Rows ----------

def build_rows_html(priced_items: Iterable, description: str, symbol: str = "₹") -> str:
    """One row per priced item: #, description, qty, unit total, item total."""
    desc = html.escape(description or "")
    rows = []
    for item in priced_items:
        rows.append(
            "<tr>"
            "<td>{index}</td>"
            "<td>{description}</td>"
            "<td>{qty}</td>"
            "<td>{unit_total}</td>"
            "<td>{item_total}</td>"
            "</tr>".format(
                index=item.index,
                description=desc,
                qty=format_quantity(item.quantity),
                unit_total=format_money(item.unit_total, symbol),
                item_total=format_money(item.item_total, symbol),
            )
        )
    return "\n        ".join(rows)


# ---------- Header fields ----------

def make_quote_number(now: datetime) -> str:
    """Q- plus the last 4 digits of the ms timestamp. A display label, not an id."""
    millis = str(int(now.timestamp() * 1000))
    return "Q-" + millis[-4:]


def format_date(d: datetime, date_format: str) -> str:
    return d.strftime(date_format)


# ---------- Token table ----------

def build_token_table(
    priced,
    *,
    customer_name: str,
    description: str,
    logo_data_uri: str,
    now: datetime,
    symbol: str = "₹",
    due_days: int = 30,
    date_format: str = "%d/%m/%Y",
) -> TokenTable:
    """
    Map every template token to a zero-argument value provider.

    priced is a PricedQuote from services.pricing.
    """
    return {
        "logoBase64": lambda: logo_data_uri,
        "quoteNumber": lambda: make_quote_number(now),
        "date": lambda: format_date(now, date_format),
        "dueDate": lambda: format_date(now + timedelta(days=due_days), date_format),
        "customerName": lambda: html.escape(customer_name or ""),
        "items": lambda: build_rows_html(priced.priced_items, description, symbol),
        "finalTotal": lambda: format_money(priced.final_total, symbol),
    }


def substitute_tokens(template: str, table: Mapping[str, Callable[[], str]]) -> str:
    """
    Replace each {{token}} in template with table[token]().

    Each provider is called at most once, however many times its marker
    appears. Unknown markers are dropped so none end up in the PDF.
    """
    cache: Dict[str, str] = {}

    def _sub(m: "re.Match[str]") -> str:
        name = m.group(1)
        if name not in table:
            return ""
        if name not in cache:
            value = table[name]()
            cache[name] = "" if value is None else str(value)
        return cache[name]

    return TOKEN_RE.sub(_sub, template)
