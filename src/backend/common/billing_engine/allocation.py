"""
Inputs for the external payment allocation step.

Nothing here applies or validates a payment: the backend performs FIFO and
manual allocation. These helpers only describe what a collector can select
and the totals shown next to each option.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Sequence

from .models import (
    AllocationPreview,
    ManualBreakdownLine,
    ManualCandidate,
    PeriodLedgerEntry,
    PeriodStatus,
)

DEFAULT_MIN_PERIODS_THRESHOLD = 3
DEFAULT_MIN_PERIODS_WHEN_OVERDUE = 2

_SELECTABLE_STATUSES = (PeriodStatus.DUE, PeriodStatus.PARTIAL)


def manual_candidates(entries: Iterable[PeriodLedgerEntry]) -> List[ManualCandidate]:
    return [
        ManualCandidate(period=entry.period, due=entry.balance)
        for entry in entries
        if entry.balance > 0 or entry.status in _SELECTABLE_STATUSES
    ]


def months_due(entries: Iterable[PeriodLedgerEntry]) -> int:
    return sum(1 for e in entries if e.balance > 0 and e.status != PeriodStatus.FUTURE)


def min_periods_to_charge(
    overdue_months: int,
    *,
    threshold: int = DEFAULT_MIN_PERIODS_THRESHOLD,
    minimum: int = DEFAULT_MIN_PERIODS_WHEN_OVERDUE,
) -> int:
    return minimum if overdue_months >= threshold else 0


def build_allocation_preview(
    entries: Sequence[PeriodLedgerEntry],
    *,
    min_periods_threshold: int = DEFAULT_MIN_PERIODS_THRESHOLD,
    min_periods_when_overdue: int = DEFAULT_MIN_PERIODS_WHEN_OVERDUE,
) -> AllocationPreview:
    overdue = months_due(entries)
    return AllocationPreview(
        candidates=manual_candidates(entries),
        # FIFO runs over every open period, future ones included.
        auto_total=sum((e.balance for e in entries if e.balance > 0), Decimal("0")),
        months_due=overdue,
        min_periods_to_charge=min_periods_to_charge(
            overdue,
            threshold=min_periods_threshold,
            minimum=min_periods_when_overdue,
        ),
    )


def manual_breakdown(
    preview: AllocationPreview,
    periods: Iterable[str],
) -> List[ManualBreakdownLine]:
    selected = set(periods)
    return [
        ManualBreakdownLine(period=c.period, amount=c.due)
        for c in preview.candidates
        if c.period in selected and c.due > 0
    ]


def meets_minimum(preview: AllocationPreview, periods: Iterable[str]) -> bool:
    """Whether a manual selection can be submitted.

    At least one selected period must carry a positive due, and an overdue
    account needs `min_periods_to_charge` selected candidates.
    """
    selected = set(periods)
    if not manual_breakdown(preview, selected):
        return False
    count = sum(1 for c in preview.candidates if c.period in selected)
    return count >= preview.min_periods_to_charge
