"""
Ideal installment computation.

    subtotal    = base * group_factor * age_factor + cremation_cost
    installment = round_to_increment(subtotal)

The configuration is normalized once at the boundary; the factor helpers
below assume an already-normalized `PriceRuleConfig`.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Union

from .config import AgeTier, GroupRules, PriceRuleConfig
from .models import GroupComposition, PriceBreakdown
from .rounding import DEFAULT_INCREMENT, round_to_increment

ConfigInput = Union[PriceRuleConfig, Mapping[str, Any], None]
GroupInput = Union[GroupComposition, Mapping[str, Any]]


def normalize_member_count(member_count: Decimal) -> int:
    return max(1, int(member_count.to_integral_value(rounding=ROUND_HALF_UP)))


def group_factor(member_count: int, group: GroupRules) -> Decimal:
    """Exact-size override from `min_map`, else linear around `neutral_at`.

    Not clamped: small households may be priced below the neutral factor.
    """
    if member_count in group.min_map:
        return group.min_map[member_count]
    return 1 + (member_count - group.neutral_at) * group.step


def age_factor(max_age: Decimal, tiers: Iterable[AgeTier]) -> Decimal:
    ordered = sorted(tiers, key=lambda t: t.min, reverse=True)
    for tier in ordered:
        if tier.min <= max_age:
            return tier.coef
    return Decimal("1")


def _coerce_group(group: GroupInput) -> GroupComposition:
    if isinstance(group, GroupComposition):
        return group
    if isinstance(group, Mapping):
        return GroupComposition.model_validate(dict(group))
    return GroupComposition()


def compute_price_breakdown(
    config: ConfigInput,
    group: GroupInput,
    *,
    increment: Any = DEFAULT_INCREMENT,
) -> PriceBreakdown:
    cfg = PriceRuleConfig.coerce(config)
    composition = _coerce_group(group)

    n = normalize_member_count(composition.member_count)
    g_factor = group_factor(n, cfg.group)
    a_factor = age_factor(composition.max_age, cfg.age)
    cremations = max(Decimal("0"), composition.cremation_count)
    cremation_cost = cfg.base * cfg.cremation_coef * cremations

    subtotal = cfg.base * g_factor * a_factor + cremation_cost
    return PriceBreakdown(
        member_count=n,
        group_factor=g_factor,
        age_factor=a_factor,
        cremation_cost=cremation_cost,
        subtotal=subtotal,
        installment=round_to_increment(subtotal, increment),
    )


def compute_ideal_installment(
    config: ConfigInput,
    group: GroupInput,
    *,
    increment: Any = DEFAULT_INCREMENT,
) -> Decimal:
    return compute_price_breakdown(config, group, increment=increment).installment
