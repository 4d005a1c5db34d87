from datetime import date
from decimal import Decimal

import pytest

from pipelines.price_preview import build_price_preview
from pipelines.settings import EngineSettings


RULES = {
    "priceRules": {
        "base": 16000,
        "cremationCoef": 0.125,
        "group": {"neutralAt": 4, "step": 0.25, "minMap": {"1": 0.5, "2": 0.75, "3": 1}},
        "age": [{"min": 66, "coef": 1.375}, {"min": 61, "coef": 1.25}, {"min": 51, "coef": 1.125}],
    }
}


def test_preview_from_known_composition():
    preview = build_price_preview(
        RULES,
        group={"member_count": 5, "max_age": 52, "cremation_count": 1},
        settings=EngineSettings(),
    )
    assert preview.breakdown.installment == Decimal("24500")
    assert preview.problems == ()


def test_preview_from_household():
    preview = build_price_preview(
        RULES,
        household={
            "birth_date": "1970-03-10",
            "cremation": True,
            "members": [{"name": "Ana", "age": 50}, {"name": ""}],
        },
        as_of=date(2025, 6, 1),
        settings=EngineSettings(),
    )
    # 2 members -> 0.75; oldest 55 -> 1.125; 16000 * 0.75 * 1.125 + 2000 = 15500
    assert preview.composition.member_count == 2
    assert preview.breakdown.subtotal == Decimal("15500")
    assert preview.breakdown.installment == Decimal("15500")


def test_preview_uses_configured_increment():
    preview = build_price_preview(
        RULES,
        group={"member_count": 5, "max_age": 52, "cremation_count": 1},
        settings=EngineSettings(rounding_increment=Decimal("1000")),
    )
    assert preview.breakdown.installment == Decimal("25000")


def test_preview_reports_incomplete_rules():
    preview = build_price_preview({}, group={"member_count": 4}, settings=EngineSettings())
    assert preview.breakdown.installment == Decimal("0")
    assert "base must be greater than 0" in preview.problems


def test_preview_requires_a_group_source():
    with pytest.raises(ValueError):
        build_price_preview(RULES, settings=EngineSettings())
    with pytest.raises(ValueError, match="as_of"):
        build_price_preview(RULES, household={"age": 40}, settings=EngineSettings())
