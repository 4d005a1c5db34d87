from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union

from adapters.settings_api import price_rules_from_payload
from common.billing_engine.config import validate_price_rules
from common.billing_engine.household import Household, derive_group_composition
from common.billing_engine.models import GroupComposition, PriceBreakdown
from common.billing_engine.pricing import compute_price_breakdown

from .settings import EngineSettings, get_engine_settings


@dataclass(frozen=True)
class PricePreview:
    breakdown: PriceBreakdown
    composition: GroupComposition
    # Non-fatal rule configuration problems; the breakdown is still computed.
    problems: tuple[str, ...] = field(default_factory=tuple)


def build_price_preview(
    rules_payload: Any,
    *,
    group: Optional[Union[GroupComposition, Mapping[str, Any]]] = None,
    household: Optional[Union[Household, Mapping[str, Any]]] = None,
    as_of: Optional[date] = None,
    settings: Optional[EngineSettings] = None,
) -> PricePreview:
    """
    Price a household from a rules payload.

    Supply either an already-known `group` composition (edit screens, where
    the backend reports member counts) or a `household` to derive it from;
    deriving ages from birth dates requires `as_of`.
    """
    settings = settings or get_engine_settings()
    config = price_rules_from_payload(rules_payload)

    if group is not None:
        composition = (
            group if isinstance(group, GroupComposition) else GroupComposition.model_validate(dict(group))
        )
    elif household is not None:
        if as_of is None:
            raise ValueError("as_of is required to derive a composition from a household")
        hh = household if isinstance(household, Household) else Household.model_validate(dict(household))
        composition = derive_group_composition(hh, as_of=as_of)
    else:
        raise ValueError("Either group or household is required")

    breakdown = compute_price_breakdown(config, composition, increment=settings.rounding_increment)
    return PricePreview(
        breakdown=breakdown,
        composition=composition,
        problems=tuple(validate_price_rules(config)),
    )
