from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .numbers import parse_decimal, to_decimal

DEFAULT_NEUTRAL_AT = Decimal("4")
DEFAULT_STEP = Decimal("0.25")


class AgeTier(BaseModel):
    min: Decimal = Decimal("0")
    coef: Decimal = Decimal("1")

    @field_validator("min", mode="before")
    @classmethod
    def parse_min(cls, value: Any) -> Decimal:
        return to_decimal(value, Decimal("0"))

    @field_validator("coef", mode="before")
    @classmethod
    def parse_coef(cls, value: Any) -> Decimal:
        return to_decimal(value, Decimal("1"))


class GroupRules(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    neutral_at: Decimal = Field(default=DEFAULT_NEUTRAL_AT, alias="neutralAt")
    step: Decimal = DEFAULT_STEP
    # Exact household size -> factor. Takes precedence over the linear formula.
    min_map: Dict[int, Decimal] = Field(default_factory=dict, alias="minMap")

    @field_validator("neutral_at", mode="before")
    @classmethod
    def parse_neutral_at(cls, value: Any) -> Decimal:
        return to_decimal(value, DEFAULT_NEUTRAL_AT)

    @field_validator("step", mode="before")
    @classmethod
    def parse_step(cls, value: Any) -> Decimal:
        return to_decimal(value, DEFAULT_STEP)

    @field_validator("min_map", mode="before")
    @classmethod
    def parse_min_map(cls, value: Any) -> Dict[int, Decimal]:
        if not isinstance(value, Mapping):
            return {}
        out: Dict[int, Decimal] = {}
        for raw_key, raw_factor in value.items():
            key = parse_decimal(raw_key)
            if key is None or key != key.to_integral_value():
                continue
            out[int(key)] = to_decimal(raw_factor, Decimal("1"))
        return out


class PriceRuleConfig(BaseModel):
    """Pricing rules used to compute a household's ideal installment.

    Every numeric field degrades to its documented default when missing,
    non-numeric or non-finite, so building a config from a mapping never
    raises. `base` defaults to 0: callers are expected to check
    `validate_price_rules` before trusting the result.
    """

    model_config = ConfigDict(populate_by_name=True)

    base: Decimal = Decimal("0")
    cremation_coef: Decimal = Field(default=Decimal("0"), alias="cremationCoef")
    group: GroupRules = Field(default_factory=GroupRules)
    # Sorted by `min` descending, unique `min` values.
    age: List[AgeTier] = Field(default_factory=list)

    @field_validator("base", "cremation_coef", mode="before")
    @classmethod
    def parse_amounts(cls, value: Any) -> Decimal:
        return to_decimal(value, Decimal("0"))

    @field_validator("group", mode="before")
    @classmethod
    def parse_group(cls, value: Any) -> Any:
        if isinstance(value, (GroupRules, Mapping)):
            return value
        return {}

    @field_validator("age", mode="before")
    @classmethod
    def parse_age(cls, value: Any) -> List[AgeTier]:
        if not isinstance(value, (list, tuple)):
            return []
        tiers: List[AgeTier] = []
        for raw in value:
            if isinstance(raw, AgeTier):
                tiers.append(raw)
            elif isinstance(raw, Mapping):
                tiers.append(AgeTier.model_validate(dict(raw)))
        tiers.sort(key=lambda t: t.min, reverse=True)

        seen: set[Decimal] = set()
        unique: List[AgeTier] = []
        for tier in tiers:
            if tier.min in seen:
                continue
            seen.add(tier.min)
            unique.append(tier)
        return unique

    @classmethod
    def coerce(cls, value: Any) -> "PriceRuleConfig":
        if isinstance(value, PriceRuleConfig):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls()

    @classmethod
    def template(cls) -> "PriceRuleConfig":
        """Seed rules offered when an administrator resets the pricing settings."""
        return cls.model_validate(
            {
                "base": 16000,
                "cremationCoef": "0.125",
                "group": {
                    "neutralAt": 4,
                    "step": "0.25",
                    "minMap": {1: "0.5", 2: "0.75", 3: "1.0"},
                },
                "age": [
                    {"min": 66, "coef": "1.375"},
                    {"min": 61, "coef": "1.25"},
                    {"min": 51, "coef": "1.125"},
                ],
            }
        )


def validate_price_rules(config: PriceRuleConfig) -> list[str]:
    """Return non-fatal problems that make a rule set incomplete.

    An empty list means the configuration can be used for pricing as-is.
    """
    problems: list[str] = []
    if config.base <= 0:
        problems.append("base must be greater than 0")
    if config.group.neutral_at < 1:
        problems.append("group.neutralAt must be at least 1")
    if not config.age:
        problems.append("age must define at least one tier")
    return problems
