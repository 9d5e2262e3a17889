"""
Number and date helpers shared by the calculator form and history view.

Money rounds half-up at 2 decimals, percentages half-up to whole numbers.
Decimal is used for the rounding step so that values like 1.005 round the
way a person expects rather than the way their binary float does.
"""

import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

CURRENCY_SYMBOL = "₹"

Number = Union[int, float, Decimal]


def D(x) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))


def _quantize(x: Number, exp: Decimal) -> Decimal:
    d = D(x)
    if not d.is_finite():
        # overflowed arithmetic is treated like unparseable input
        return Decimal(0)
    with localcontext() as ctx:
        # quantize raises once the result needs more digits than prec allows
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        return d.quantize(exp, rounding=ROUND_HALF_UP)


def round_money(x: Number) -> float:
    return float(_quantize(x, Decimal("0.01")))


def round_percent(x: Number) -> int:
    return int(_quantize(x, Decimal("1")))


def parse_number(text) -> float:
    """Parse a form field; empty, unparseable or non-finite input is 0."""
    if text is None:
        return 0.0
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        try:
            value = float(str(text).strip())
        except ValueError:
            return 0.0
    return value if math.isfinite(value) else 0.0


def format_money(x: Number) -> str:
    """Exactly two decimal places: 36 -> '36.00'."""
    return f"{_quantize(x, Decimal('0.01')):.2f}"


def format_currency(x: Number) -> str:
    return f"{CURRENCY_SYMBOL}{format_money(x)}"


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        # fromisoformat only accepts a trailing Z from Python 3.11 on
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(value: Union[str, datetime]) -> str:
    """'2025-03-05T10:00:00Z' -> 'March 5, 2025'."""
    dt = parse_timestamp(value)
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"
