from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_MONEY_RE = re.compile(r"^\s*\$?\s*([-+]?[0-9][0-9,]*)(?:\.([0-9]{1,2}))?\s*$")
_CENT = Decimal("0.01")


def parse_money_to_cents(value: str) -> int:
    """Parse a typed dollar amount such as ``"$1,012.5"`` into integer cents."""
    match = _MONEY_RE.match(value)
    if not match:
        raise ValueError(f"Invalid money amount: {value!r}")
    dollars = int(match.group(1).replace(",", ""))
    cents = int((match.group(2) or "0").ljust(2, "0"))
    sign = -1 if match.group(1).lstrip().startswith("-") else 1
    return dollars * 100 + sign * cents


def dollars_to_cents(value: str | int | float | Decimal) -> int:
    """Convert a dollar amount to cents, rounding half-cents away from zero."""
    if isinstance(value, str):
        return parse_money_to_cents(value)
    if isinstance(value, bool):
        raise ValueError(f"Invalid money amount: {value!r}")
    try:
        # str() first so 0.1 becomes Decimal("0.1"), not its binary expansion
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid money amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid money amount: {value!r}")
    try:
        cents = amount.quantize(_CENT, rounding=ROUND_HALF_UP) * 100
    except InvalidOperation as exc:
        # quantize fails once the value needs more digits than the context precision
        raise ValueError(f"Invalid money amount: {value!r}") from exc
    return int(cents.to_integral_value())


def cents_to_money(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    dollars, rem = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{rem:02d}"
