"""Price rule payload adapters for the settings REST resource (no I/O)."""

from .price_rules import price_rules_from_payload, price_rules_to_payload

__all__ = [
    "price_rules_from_payload",
    "price_rules_to_payload",
]
