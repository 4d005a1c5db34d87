from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .models import GroupComposition
from .numbers import parse_decimal


class _Person(BaseModel):
    age: Optional[Decimal] = None
    birth_date: Optional[date] = None
    cremation: bool = False

    @field_validator("age", mode="before")
    @classmethod
    def parse_age(cls, value: Any) -> Optional[Decimal]:
        return parse_decimal(value)

    @field_validator("birth_date", mode="before")
    @classmethod
    def parse_birth_date(cls, value: Any) -> Optional[date]:
        if value in (None, ""):
            return None
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            return None

    @field_validator("cremation", mode="before")
    @classmethod
    def parse_cremation(cls, value: Any) -> bool:
        return bool(value)

    def age_as_of(self, as_of: date) -> Decimal:
        if self.age is not None:
            return max(self.age, Decimal("0"))
        if self.birth_date is not None:
            return Decimal(age_on(self.birth_date, as_of))
        return Decimal("0")


class HouseholdMember(_Person):
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def parse_name(cls, value: Any) -> str:
        return str(value or "").strip()

    @property
    def is_placeholder(self) -> bool:
        """Blank form rows: no name, no age and no birth date."""
        return not self.name and self.age is None and self.birth_date is None


class Household(_Person):
    """The plan holder plus the members covered by the plan."""

    members: List[HouseholdMember] = Field(default_factory=list)


def age_on(birth_date: date, as_of: date) -> int:
    years = as_of.year - birth_date.year
    if (as_of.month, as_of.day) < (birth_date.month, birth_date.day):
        years -= 1
    return max(years, 0)


def derive_group_composition(household: Household, *, as_of: date) -> GroupComposition:
    members = [m for m in household.members if not m.is_placeholder]
    ages = [household.age_as_of(as_of)]
    ages.extend(m.age_as_of(as_of) for m in members)
    cremations = int(household.cremation) + sum(1 for m in members if m.cremation)
    return GroupComposition(
        member_count=1 + len(members),
        cremation_count=cremations,
        max_age=max(ages),
    )
