from datetime import date
from decimal import Decimal

from common.billing_engine.household import Household, age_on, derive_group_composition


AS_OF = date(2025, 6, 15)


def test_age_on_counts_full_years():
    assert age_on(date(1960, 6, 15), AS_OF) == 65
    assert age_on(date(1960, 6, 16), AS_OF) == 64
    assert age_on(date(2030, 1, 1), AS_OF) == 0


def test_composition_counts_holder_and_real_members():
    household = Household.model_validate(
        {
            "age": 48,
            "cremation": True,
            "members": [
                {"name": "Ana", "age": 45, "cremation": True},
                {"name": "Luis", "birth_date": "1958-09-01"},
                {"name": "", "age": "", "birth_date": ""},
                {"name": "Sofi", "birth_date": "2010-01-20T00:00:00.000Z"},
            ],
        }
    )
    comp = derive_group_composition(household, as_of=AS_OF)
    assert comp.member_count == 4
    assert comp.cremation_count == 2
    assert comp.max_age == Decimal("66")


def test_placeholder_rows_do_not_count_cremation():
    household = Household.model_validate({"age": 30, "members": [{"cremation": True}]})
    comp = derive_group_composition(household, as_of=AS_OF)
    assert comp.member_count == 1
    assert comp.cremation_count == 0


def test_unknown_ages_count_as_zero():
    household = Household.model_validate(
        {"birth_date": "not-a-date", "members": [{"name": "Juan", "age": "n/a"}]}
    )
    comp = derive_group_composition(household, as_of=AS_OF)
    assert comp.member_count == 2
    assert comp.max_age == Decimal("0")


def test_explicit_age_wins_over_birth_date():
    household = Household.model_validate({"age": 70, "birth_date": "2000-01-01"})
    assert derive_group_composition(household, as_of=AS_OF).max_age == Decimal("70")
