from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_HALF_UP,
    Decimal,
    InvalidOperation,
    getcontext,
    localcontext,
)
from typing import Any, Optional

CENTS = Decimal("0.01")


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a finite Decimal from int/float/str/Decimal input, else None.

    Strings must be plain numbers: "0,125" is not numeric and yields None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            parsed = Decimal(s)
        except InvalidOperation:
            return None
    else:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def to_decimal(value: Any, default: Decimal) -> Decimal:
    parsed = parse_decimal(value)
    return default if parsed is None else parsed


def exact_context(*values: Decimal):
    """Local decimal context wide enough to add, subtract, quantize or take
    the remainder of `values` without running out of digits.

    Only finite values are expected.
    """
    ctx = getcontext().copy()
    ctx.Emax = MAX_EMAX
    ctx.Emin = MIN_EMIN
    if values:
        top = max(v.adjusted() for v in values)
        bottom = min(v.as_tuple().exponent for v in values)
        ctx.prec = max(ctx.prec, top - bottom + 2)
    return localcontext(ctx)


def round_half_up(value: Decimal, quantum: Decimal = Decimal("1")) -> Decimal:
    with exact_context(value, quantum):
        return value.quantize(quantum, rounding=ROUND_HALF_UP)
