from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from adapters.ledger_api import raw_entries_from_payload
from common.billing_engine.allocation import build_allocation_preview
from common.billing_engine.models import AllocationPreview, ReconciledLedger
from common.billing_engine.reconciler import reconcile_ledger

from .settings import EngineSettings, get_engine_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountStatus:
    ledger: ReconciledLedger
    allocation: AllocationPreview


def build_account_status(
    payload: Any,
    *,
    reference_period: str,
    settings: Optional[EngineSettings] = None,
) -> AccountStatus:
    """Raw debt payload -> reconciled ledger + payment selection preview."""
    settings = settings or get_engine_settings()
    raw_entries = raw_entries_from_payload(payload)
    ledger = reconcile_ledger(raw_entries, reference_period)
    logger.debug(
        "Reconciled %d raw entries into %d periods as of %s",
        len(raw_entries),
        len(ledger.entries),
        reference_period,
    )
    allocation = build_allocation_preview(
        ledger.entries,
        min_periods_threshold=settings.manual_min_periods_threshold,
        min_periods_when_overdue=settings.manual_min_periods,
    )
    return AccountStatus(ledger=ledger, allocation=allocation)
