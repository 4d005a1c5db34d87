from __future__ import annotations

from decimal import Decimal
from typing import Any

from .numbers import exact_context, parse_decimal

DEFAULT_INCREMENT = Decimal("500")


def round_to_increment(amount: Any, increment: Any = DEFAULT_INCREMENT) -> Decimal:
    """
    Round a monetary amount to the nearest increment.

    Ties go up: with an increment of 500, 16250 -> 16500 and 16249 -> 16000.
    Non-finite, non-numeric and negative amounts are clamped to 0 first.
    """
    step = parse_decimal(increment)
    if step is None or step <= 0:
        step = DEFAULT_INCREMENT

    value = parse_decimal(amount)
    if value is None or value < 0:
        value = Decimal("0")

    with exact_context(value, step):
        remainder = value % step
        down = value - remainder
        up = down + step
        return up if remainder >= step / 2 else down
