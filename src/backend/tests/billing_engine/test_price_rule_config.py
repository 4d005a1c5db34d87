from decimal import Decimal

from common.billing_engine.config import AgeTier, PriceRuleConfig, validate_price_rules


def test_defaults_when_payload_is_empty():
    cfg = PriceRuleConfig.coerce({})
    assert cfg.base == Decimal("0")
    assert cfg.cremation_coef == Decimal("0")
    assert cfg.group.neutral_at == Decimal("4")
    assert cfg.group.step == Decimal("0.25")
    assert cfg.group.min_map == {}
    assert cfg.age == []


def test_accepts_camel_case_and_snake_case_keys():
    camel = PriceRuleConfig.coerce({"cremationCoef": 0.125, "group": {"neutralAt": 3, "minMap": {"1": 0.5}}})
    snake = PriceRuleConfig.coerce({"cremation_coef": 0.125, "group": {"neutral_at": 3, "min_map": {1: 0.5}}})
    assert camel == snake
    assert camel.cremation_coef == Decimal("0.125")
    assert camel.group.min_map == {1: Decimal("0.5")}


def test_min_map_drops_non_integer_keys_and_defaults_bad_factors():
    cfg = PriceRuleConfig.coerce({"group": {"minMap": {"1": 0.5, "two": 0.75, "2.5": 0.9, "3": "x"}}})
    assert cfg.group.min_map == {1: Decimal("0.5"), 3: Decimal("1")}


def test_min_map_that_is_not_a_mapping_is_empty():
    assert PriceRuleConfig.coerce({"group": {"minMap": [0.5, 0.75]}}).group.min_map == {}


def test_group_that_is_not_a_mapping_uses_defaults():
    cfg = PriceRuleConfig.coerce({"group": "oops"})
    assert cfg.group.neutral_at == Decimal("4")


def test_age_tiers_sorted_descending_and_unique_by_min():
    cfg = PriceRuleConfig.coerce(
        {
            "age": [
                {"min": 51, "coef": 1.125},
                {"min": 66, "coef": 1.375},
                "garbage",
                {"min": 51, "coef": 9},
                {"coef": 1.05},
            ]
        }
    )
    assert [(t.min, t.coef) for t in cfg.age] == [
        (Decimal("66"), Decimal("1.375")),
        (Decimal("51"), Decimal("1.125")),
        (Decimal("0"), Decimal("1.05")),
    ]


def test_age_tier_missing_coef_defaults_to_one():
    assert AgeTier.model_validate({"min": 70}).coef == Decimal("1")


def test_non_finite_numbers_fall_back_to_defaults():
    cfg = PriceRuleConfig.coerce({"base": float("inf"), "group": {"step": "NaN"}})
    assert cfg.base == Decimal("0")
    assert cfg.group.step == Decimal("0.25")


def test_coerce_returns_same_instance_for_config():
    cfg = PriceRuleConfig.template()
    assert PriceRuleConfig.coerce(cfg) is cfg


def test_template_is_complete():
    cfg = PriceRuleConfig.template()
    assert cfg.base == Decimal("16000")
    assert cfg.group.min_map[2] == Decimal("0.75")
    assert [t.min for t in cfg.age] == [Decimal("66"), Decimal("61"), Decimal("51")]
    assert validate_price_rules(cfg) == []


def test_validate_reports_incomplete_rules():
    problems = validate_price_rules(PriceRuleConfig.coerce({"group": {"neutralAt": 0}}))
    assert problems == [
        "base must be greater than 0",
        "group.neutralAt must be at least 1",
        "age must define at least one tier",
    ]


def test_comma_decimal_strings_are_not_numeric():
    cfg = PriceRuleConfig.coerce({"base": "16.000,50", "cremationCoef": "0,125"})
    assert cfg.base == Decimal("0")
    assert cfg.cremation_coef == Decimal("0")
