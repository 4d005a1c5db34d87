from __future__ import annotations

import re
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .numbers import to_decimal

PERIOD_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


class PeriodStatus(str, Enum):
    OPEN = "open"
    DUE = "due"
    PARTIAL = "partial"
    FUTURE = "future"
    CREDIT = "credit"
    PAID = "paid"


class GroupComposition(BaseModel):
    member_count: Decimal = Decimal("1")
    cremation_count: Decimal = Decimal("0")
    max_age: Decimal = Decimal("0")

    @field_validator("member_count", mode="before")
    @classmethod
    def parse_member_count(cls, value: Any) -> Decimal:
        return to_decimal(value, Decimal("1"))

    @field_validator("cremation_count", "max_age", mode="before")
    @classmethod
    def parse_counts(cls, value: Any) -> Decimal:
        return to_decimal(value, Decimal("0"))


class PriceBreakdown(BaseModel):
    member_count: int
    group_factor: Decimal
    age_factor: Decimal
    cremation_cost: Decimal
    subtotal: Decimal
    installment: Decimal


class RawPeriodEntry(BaseModel):
    """One posting for a billing period, as returned by the ledger source.

    The same period may appear several times (separate charge and payment
    postings); entries are not assumed to be sorted.
    """

    period: str
    charge: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    # Explicit balance override; when unset, the balance is charge - paid.
    balance: Optional[Decimal] = None
    status: Optional[str] = None

    @field_validator("period", mode="before")
    @classmethod
    def parse_period(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not PERIOD_PATTERN.match(text):
            raise ValueError(f"period must be formatted as YYYY-MM, got {value!r}")
        return text

    @field_validator("charge", "paid", mode="before")
    @classmethod
    def parse_amount(cls, value: Any) -> Decimal:
        return to_decimal(value, Decimal("0"))

    @field_validator("balance", mode="before")
    @classmethod
    def parse_balance(cls, value: Any) -> Optional[Decimal]:
        if value is None:
            return None
        return to_decimal(value, Decimal("0"))

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip().lower()
        return text or None


class PeriodLedgerEntry(BaseModel):
    period: str
    charge: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    status: PeriodStatus = PeriodStatus.OPEN


class LedgerSummary(BaseModel):
    total_due: Decimal = Decimal("0")
    credit_total: Decimal = Decimal("0")
    due_count: int = 0


class ReconciledLedger(BaseModel):
    reference_period: str
    entries: List[PeriodLedgerEntry] = Field(default_factory=list)
    summary: LedgerSummary = Field(default_factory=LedgerSummary)

    def get(self, period: str) -> Optional[PeriodLedgerEntry]:
        for entry in self.entries:
            if entry.period == period:
                return entry
        return None


class ManualCandidate(BaseModel):
    period: str
    due: Decimal


class ManualBreakdownLine(BaseModel):
    period: str
    amount: Decimal


class AllocationPreview(BaseModel):
    candidates: List[ManualCandidate] = Field(default_factory=list)
    auto_total: Decimal = Decimal("0")
    months_due: int = 0
    min_periods_to_charge: int = 0
