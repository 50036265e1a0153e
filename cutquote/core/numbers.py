# cutquote/core/numbers.py
"""
Numbers: lenient parsing of form input + display formatting.

All numeric fields of a quote request go through parse_lenient_number.
Anything that is not a finite number (missing, null, text, bool, NaN)
counts as 0. A bad field gives a zero row, the request is never rejected.
"""

import math
import re
from typing import Any

# Plain ASCII decimal with optional exponent: "12", "-0.5", ".5", "1e3".
# No "1_000", no "inf"/"nan", no non-ASCII digits.
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_lenient_number(value: Any) -> float:
    """
    Return value as float, or 0.0 if it is not a finite number.

      None / "" / "  "     -> 0.0
      "12.5" / " 3 "       -> 12.5 / 3.0
      "12abc" / "abc"      -> 0.0   (whole string must be a number)
      "1_000" / "inf"      -> 0.0
      True / False         -> 0.0
      nan / inf            -> 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            num = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        s = value.strip()
        if not NUMBER_RE.fullmatch(s):
            return 0.0
        num = float(s)
    else:
        return 0.0

    if not math.isfinite(num):
        return 0.0
    return num


def format_money(value: float, symbol: str = "₹") -> str:
    """300 -> '₹300.00', -12.5 -> '-₹12.50'."""
    v = float(value or 0.0)
    sign = "-" if v < 0 else ""
    cents = "{:.2f}".format(abs(v))
    if cents == "0.00":
        sign = ""
    return "{}{}{}".format(sign, symbol, cents)


def format_quantity(value: float) -> str:
    """Quantity as typed: 3.0 -> '3', 2.5 -> '2.5'."""
    v = float(value or 0.0)
    if v.is_integer():
        return str(int(v))
    return repr(v)
