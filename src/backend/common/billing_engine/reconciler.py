from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .models import (
    PERIOD_PATTERN,
    LedgerSummary,
    PeriodLedgerEntry,
    PeriodStatus,
    RawPeriodEntry,
    ReconciledLedger,
)
from .numbers import CENTS, round_half_up
from .status_rules import PeriodTotals, StatusContext, StatusRule, registry, resolve_status


def period_to_number(period: str) -> int:
    """Map "2025-12" to 202512. Unparseable periods map to 0."""
    match = PERIOD_PATTERN.match(str(period or "").strip())
    if not match:
        return 0
    return int(match.group(1)) * 100 + int(match.group(2))


def period_of(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


@dataclass
class _Accumulator:
    period: str
    charge: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    statuses: set = field(default_factory=set)

    def add(self, entry: RawPeriodEntry) -> None:
        self.charge += entry.charge
        self.paid += entry.paid
        if entry.balance is not None:
            self.balance += entry.balance
        else:
            self.balance += round_half_up(entry.charge - entry.paid, CENTS)
        if entry.status:
            self.statuses.add(entry.status)

    def totals(self) -> PeriodTotals:
        return PeriodTotals(
            period=self.period,
            charge=self.charge,
            paid=self.paid,
            balance=self.balance,
            source_statuses=frozenset(self.statuses),
        )


def reconcile(
    raw_entries: Iterable[RawPeriodEntry],
    reference_period: str,
    *,
    rules: Optional[List[StatusRule]] = None,
) -> List[PeriodLedgerEntry]:
    """
    Merge raw postings into one ledger entry per period, ascending by period.

    Status is resolved on the combined totals of each period using the ordered
    status rules; `reference_period` ("YYYY-MM") decides which periods are
    still ahead of now.
    """
    now_number = period_to_number(reference_period)
    active_rules = rules if rules is not None else registry.create_all()

    by_period: Dict[str, _Accumulator] = {}
    for entry in raw_entries:
        acc = by_period.get(entry.period)
        if acc is None:
            acc = _Accumulator(period=entry.period)
            by_period[entry.period] = acc
        acc.add(entry)

    ledger: List[PeriodLedgerEntry] = []
    for period in sorted(by_period):
        totals = by_period[period].totals()
        ctx = StatusContext(period_number=period_to_number(period), now_number=now_number)
        ledger.append(
            PeriodLedgerEntry(
                period=period,
                charge=totals.charge,
                paid=totals.paid,
                balance=totals.balance,
                status=resolve_status(totals, ctx, active_rules),
            )
        )
    return ledger


def summarize(entries: Iterable[PeriodLedgerEntry]) -> LedgerSummary:
    total_due = Decimal("0")
    credit_total = Decimal("0")
    due_count = 0
    for entry in entries:
        if entry.balance > 0 and entry.status != PeriodStatus.FUTURE:
            total_due += entry.balance
            due_count += 1
        elif entry.balance < 0:
            credit_total += abs(entry.balance)
    return LedgerSummary(total_due=total_due, credit_total=credit_total, due_count=due_count)


def reconcile_ledger(
    raw_entries: Iterable[RawPeriodEntry],
    reference_period: str,
) -> ReconciledLedger:
    entries = reconcile(raw_entries, reference_period)
    return ReconciledLedger(
        reference_period=reference_period,
        entries=entries,
        summary=summarize(entries),
    )
