from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, Dict, Iterable, List, Optional

from cutquote.core.numbers import parse_lenient_number


@dataclass(frozen=True)
class PricedLineItem:
    index: int
    path_length_area: float
    passes: float
    quantity: float
    unit_total: float
    item_total: float


@dataclass(frozen=True)
class PricedQuote:
    rate: float
    priced_items: List[PricedLineItem] = field(default_factory=list)
    final_total: float = 0.0


@dataclass(frozen=True)
class QuoteEstimate:
    factor: float
    total_units: float
    estimated_cost: float


def _obj_to_dict(obj: Any) -> Dict[str, Any]:
    """
    Make a plain dict out of a request or item, whether it is a pydantic
    model, a dataclass or already a dict (raw JSON from the CLI).
    Keys come out in the camelCase wire form.
    """
    if obj is None:
        return {}

    if isinstance(obj, dict):
        return dict(obj)

    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)

    dump = getattr(obj, "model_dump", None)
    if callable(dump):
        return dump(by_alias=True)

    attrs = getattr(obj, "__dict__", None)
    if not isinstance(attrs, dict):
        # 5, "abc", [1, 2]: nothing to read, priced as a zero row
        return {}
    return {
        k: v
        for k, v in attrs.items()
        if not k.startswith("_")
    }


def _finite(value: float) -> float:
    """Overflowed products (1e300 * 1e300) count as 0, like any other bad number."""
    return value if math.isfinite(value) else 0.0


def _pick(d: Dict[str, Any], *names: str) -> Any:
    for name in names:
        if name in d:
            return d[name]
    return None


def _items(request: Dict[str, Any]) -> Iterable[Dict[str, Any]]:
    items = request.get("items") or []
    if not isinstance(items, (list, tuple)):
        return []
    return [_obj_to_dict(it) for it in items]


def compute_quote(request: Any) -> PricedQuote:
    """
    Price every line item of a quote request.

      unit_total = pathLengthArea * passes * rate
      item_total = unit_total * quantity
      final_total = sum(item_total)

    No rounding here, that happens only when the numbers are displayed.
    Missing or non-numeric values count as 0, so this never raises.
    A product or sum that overflows to inf is also 0.
    """
    req = _obj_to_dict(request)
    rate = parse_lenient_number(req.get("rate"))

    priced: List[PricedLineItem] = []
    final_total = 0.0
    for index, item in enumerate(_items(req), start=1):
        path_length_area = parse_lenient_number(
            _pick(item, "pathLengthArea", "path_length_area")
        )
        passes = parse_lenient_number(item.get("passes"))
        quantity = parse_lenient_number(item.get("quantity"))

        unit_total = _finite(path_length_area * passes * rate)
        item_total = _finite(unit_total * quantity)
        final_total = _finite(final_total + item_total)

        priced.append(
            PricedLineItem(
                index=index,
                path_length_area=path_length_area,
                passes=passes,
                quantity=quantity,
                unit_total=unit_total,
                item_total=item_total,
            )
        )

    return PricedQuote(rate=rate, priced_items=priced, final_total=final_total)


def estimate_quote(request: Any, factor: Optional[Any] = None) -> QuoteEstimate:
    """
    Preview figures as shown next to the quote form.

    This formula also uses thickness and a divisor factor:

        units = pathLengthArea * thickness / factor * passes
        cost  = units * rate * quantity

    It does NOT match compute_quote, which has neither term. The PDF is
    always priced with compute_quote; this is informational only.

    factor falls back to the request's own "factor", then to 1 (also
    when it is 0 or not a number).
    """
    req = _obj_to_dict(request)
    if factor is None:
        factor = req.get("factor")
    factor_f = parse_lenient_number(factor) or 1.0
    rate = parse_lenient_number(req.get("rate"))

    total_units = 0.0
    estimated_cost = 0.0
    for item in _items(req):
        path_length_area = parse_lenient_number(
            _pick(item, "pathLengthArea", "path_length_area")
        )
        thickness = parse_lenient_number(item.get("thickness"))
        passes = parse_lenient_number(item.get("passes"))
        quantity = parse_lenient_number(item.get("quantity"))

        units = _finite((path_length_area * thickness / factor_f) * passes)
        total_units = _finite(total_units + units)
        estimated_cost = _finite(estimated_cost + _finite(units * rate * quantity))

    return QuoteEstimate(
        factor=factor_f,
        total_units=total_units,
        estimated_cost=estimated_cost,
    )
