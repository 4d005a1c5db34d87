"""Pure billing rules for memorial plan accounts.

This package intentionally contains only domain logic:
- Pricing inputs are a price rule configuration + a household composition.
- Ledger inputs are raw period postings + the caller's reference period.
- No HTTP, persistence, clock reads or payment execution live here.
"""

from .allocation import build_allocation_preview, manual_breakdown, meets_minimum
from .config import AgeTier, GroupRules, PriceRuleConfig, validate_price_rules
from .household import Household, HouseholdMember, derive_group_composition
from .models import (
    AllocationPreview,
    GroupComposition,
    LedgerSummary,
    PeriodLedgerEntry,
    PeriodStatus,
    PriceBreakdown,
    RawPeriodEntry,
    ReconciledLedger,
)
from .pricing import compute_ideal_installment, compute_price_breakdown
from .reconciler import period_of, period_to_number, reconcile, reconcile_ledger, summarize
from .rounding import round_to_increment
