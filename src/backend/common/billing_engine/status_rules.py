"""
Ordered period status rules.

Each rule looks at the accumulated totals of one period and either fixes its
status or defers to the next rule. Rules are evaluated by ascending
`precedence`; the first rule that returns a status wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, Optional, Type

from .models import PeriodStatus


@dataclass(frozen=True)
class PeriodTotals:
    period: str
    charge: Decimal
    paid: Decimal
    balance: Decimal
    # Lower-cased explicit statuses carried by the contributing raw entries.
    source_statuses: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class StatusContext:
    period_number: int
    now_number: int

    @property
    def is_future_by_date(self) -> bool:
        return self.period_number > self.now_number


class StatusRule(ABC):
    rule_id: str
    precedence: int

    def __init__(self):
        if not getattr(self, "rule_id", None):
            raise ValueError("Status rule must define rule_id")

    @abstractmethod
    def evaluate(self, totals: PeriodTotals, ctx: StatusContext) -> Optional[PeriodStatus]:  # pragma: no cover
        raise NotImplementedError


class StatusRuleRegistry:
    def __init__(self):
        self._rules: Dict[str, Type[StatusRule]] = {}

    def register(self, rule_cls: Type[StatusRule]) -> None:
        rule_id = getattr(rule_cls, "rule_id", None)
        if not rule_id:
            raise ValueError("Status rule class missing rule_id")
        if rule_id in self._rules:
            raise ValueError(f"Duplicate status rule_id registered: {rule_id}")
        precedence = getattr(rule_cls, "precedence", None)
        if precedence is None:
            raise ValueError(f"Status rule {rule_id} missing precedence")
        for other in self._rules.values():
            if other.precedence == precedence:
                raise ValueError(
                    f"Status rules {other.rule_id} and {rule_id} share precedence {precedence}"
                )
        self._rules[rule_id] = rule_cls

    def create_all(self) -> list[StatusRule]:
        ordered = sorted(self._rules.values(), key=lambda cls: cls.precedence)
        return [cls() for cls in ordered]

    def get(self, rule_id: str) -> Type[StatusRule]:
        return self._rules[rule_id]

    def ids(self) -> Iterable[str]:
        return [cls.rule_id for cls in sorted(self._rules.values(), key=lambda c: c.precedence)]


registry = StatusRuleRegistry()


def register_status_rule(rule_cls: Type[StatusRule]) -> Type[StatusRule]:
    registry.register(rule_cls)
    return rule_cls


@register_status_rule
class StickyFutureRule(StatusRule):
    """An explicit `future` marker holds unless the combined balance is a credit."""

    rule_id = "sticky-future"
    precedence = 10

    def evaluate(self, totals: PeriodTotals, ctx: StatusContext) -> Optional[PeriodStatus]:
        if PeriodStatus.FUTURE.value in totals.source_statuses and totals.balance >= 0:
            return PeriodStatus.FUTURE
        return None


@register_status_rule
class CreditRule(StatusRule):
    rule_id = "credit"
    precedence = 20

    def evaluate(self, totals: PeriodTotals, ctx: StatusContext) -> Optional[PeriodStatus]:
        if totals.balance < 0:
            return PeriodStatus.CREDIT
        return None


@register_status_rule
class PartialRule(StatusRule):
    rule_id = "partial"
    precedence = 30

    def evaluate(self, totals: PeriodTotals, ctx: StatusContext) -> Optional[PeriodStatus]:
        if totals.balance > 0 and totals.paid > 0:
            return PeriodStatus.PARTIAL
        return None


@register_status_rule
class UnpaidRule(StatusRule):
    rule_id = "unpaid"
    precedence = 40

    def evaluate(self, totals: PeriodTotals, ctx: StatusContext) -> Optional[PeriodStatus]:
        if totals.balance > 0:
            return PeriodStatus.FUTURE if ctx.is_future_by_date else PeriodStatus.DUE
        return None


@register_status_rule
class SettledRule(StatusRule):
    """A zero balance only means `paid` once the period is no longer ahead of now."""

    rule_id = "settled"
    precedence = 50

    def evaluate(self, totals: PeriodTotals, ctx: StatusContext) -> Optional[PeriodStatus]:
        if totals.balance == 0:
            return PeriodStatus.FUTURE if ctx.is_future_by_date else PeriodStatus.PAID
        return None


def resolve_status(
    totals: PeriodTotals,
    ctx: StatusContext,
    rules: Optional[Iterable[StatusRule]] = None,
) -> PeriodStatus:
    for rule in rules if rules is not None else registry.create_all():
        status = rule.evaluate(totals, ctx)
        if status is not None:
            return status
    return PeriodStatus.OPEN
