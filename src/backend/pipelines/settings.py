from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

from common.billing_engine.numbers import parse_decimal


load_dotenv()


@dataclass(frozen=True)
class EngineSettings:
    rounding_increment: Decimal = Decimal("500")
    manual_min_periods_threshold: int = 3
    manual_min_periods: int = 2


def get_engine_settings() -> EngineSettings:
    """
    Load engine settings from environment variables.

    Env:
      BILLING_ROUNDING_INCREMENT           (default: 500)
      BILLING_MANUAL_MIN_PERIODS_THRESHOLD (default: 3)
      BILLING_MANUAL_MIN_PERIODS           (default: 2)
    """
    return EngineSettings(
        rounding_increment=_positive_decimal_env("BILLING_ROUNDING_INCREMENT", Decimal("500")),
        manual_min_periods_threshold=_non_negative_int_env("BILLING_MANUAL_MIN_PERIODS_THRESHOLD", 3),
        manual_min_periods=_non_negative_int_env("BILLING_MANUAL_MIN_PERIODS", 2),
    )


def _positive_decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    value = parse_decimal(raw)
    if value is None or value <= 0:
        raise ValueError(f"{name} must be a positive number, got {raw!r}")
    return value


def _non_negative_int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {raw!r}")
    return value
