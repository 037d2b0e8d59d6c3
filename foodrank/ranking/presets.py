from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .models import DishOverride, PriceUnit, PriorityVector, RankingPreferences

logger = logging.getLogger(__name__)


class PresetSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    priorities: PriorityVector
    price_unit: PriceUnit = Field(
        default=PriceUnit.per1000kcal, validation_alias=AliasChoices("price_unit", "priceUnit")
    )
    is_optimized: bool = Field(default=True, validation_alias=AliasChoices("is_optimized", "isOptimized"))
    selected_zone: str | None = Field(
        default=None, validation_alias=AliasChoices("selected_zone", "selectedZone")
    )


class Preset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    settings: PresetSettings


PRESETS: list[Preset] = [
    Preset(
        id="best-food-ever",
        name="Best Food Ever",
        description="Personal Food Leaderboard.",
        settings=PresetSettings(
            priorities=PriorityVector(taste=10, health=10, cheapness=10, speed=10),
            price_unit=PriceUnit.per1000kcal,
            is_optimized=True,
        ),
    ),
    Preset(
        id="worst-food-ever",
        name="Worst Food Ever",
        description="Evil Food Leaderboard with worst possible traits",
        settings=PresetSettings(
            priorities=PriorityVector(taste=-10, health=-10, cheapness=-10, speed=-10),
            price_unit=PriceUnit.per1000kcal,
            is_optimized=True,
        ),
    ),
]


def get_preset(preset_id: str) -> Preset | None:
    return next((p for p in PRESETS if p.id == preset_id), None)


def invert_priorities(priorities: PriorityVector, worst: bool = True) -> PriorityVector:
    """Point every active weight at the worst (or back at the best) end of its metric."""
    updated = {}
    for metric, weight in priorities.active().items():
        updated[metric.value] = -abs(weight) if worst else abs(weight)
    return priorities.model_copy(update=updated)


def parse_preset(raw: Any) -> Preset | None:
    """Tolerant parsing of a stored user preset; malformed entries give None."""
    if not isinstance(raw, Mapping):
        return None
    if not raw.get("id") or not raw.get("name") or not isinstance(raw.get("settings"), Mapping):
        return None
    try:
        return Preset.model_validate({**raw, "id": str(raw["id"]), "name": str(raw["name"])})
    except ValidationError:
        logger.debug("Ignoring malformed preset %r", raw.get("id"))
        return None


def preferences_from_preset(
    preset: Preset,
    overrides: Mapping[str, DishOverride] | None = None,
) -> RankingPreferences:
    settings = preset.settings
    return RankingPreferences(
        zone=settings.selected_zone,
        overrides=dict(overrides or {}),
        priorities=settings.priorities,
        is_optimized=settings.is_optimized,
        price_unit=settings.price_unit,
    )
