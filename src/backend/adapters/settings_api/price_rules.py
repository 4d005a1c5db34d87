from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from common.billing_engine.config import PriceRuleConfig, validate_price_rules

logger = logging.getLogger(__name__)


def price_rules_from_payload(payload: Any) -> PriceRuleConfig:
    """
    Build a PriceRuleConfig from a GET /settings/price-rules response body.

    Accepted shapes:
      {"priceRules": {...}}
      {"data": {"priceRules": {...}}}
      {"data": {...}}
      {...}

    Notes:
    - Missing or malformed fields fall back to their defaults; this never raises.
    - Incomplete rule sets are logged, not rejected. Use `validate_price_rules`
      to surface the problems to an administrator.
    """
    config = PriceRuleConfig.coerce(_unwrap(payload))
    problems = validate_price_rules(config)
    if problems:
        logger.debug("Price rules incomplete: %s", ", ".join(problems))
    return config


def price_rules_to_payload(config: PriceRuleConfig) -> dict[str, Any]:
    """Body for PUT /settings/price-rules, with camelCase keys and plain numbers."""
    return {
        "priceRules": {
            "base": _number(config.base),
            "cremationCoef": _number(config.cremation_coef),
            "group": {
                "neutralAt": _number(config.group.neutral_at),
                "step": _number(config.group.step),
                "minMap": {str(size): _number(f) for size, f in sorted(config.group.min_map.items())},
            },
            "age": [{"min": _number(t.min), "coef": _number(t.coef)} for t in config.age],
        }
    }


def _unwrap(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return payload
    if isinstance(payload.get("priceRules"), dict):
        return payload["priceRules"]
    data = payload.get("data")
    if isinstance(data, dict):
        if isinstance(data.get("priceRules"), dict):
            return data["priceRules"]
        return data
    return payload


def _number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)
