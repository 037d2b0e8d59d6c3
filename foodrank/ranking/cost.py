from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..catalog.models import Dish, Ingredient
from ..catalog.zones import ECONOMIC_ZONES
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .index import normalize_ingredient_name
from .models import CostLine, DishCost, UnavailableIngredient

logger = logging.getLogger(__name__)


def calculate_dish_cost(
    dish: Dish,
    zone_id: str | None,
    index: Mapping[str, Ingredient],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> DishCost:
    """
    Price one serving of *dish* in *zone_id*.

    - Ingredients absent from the index are reported in ``missing_ingredients``.
    - Ingredients with no price in the zone are reported in
      ``unavailable_ingredients``; the dish cannot be prepared there.
    - With no zone selected the ingredient's reference price is used and an
      ingredient without one lands in ``missing_prices``.

    None of these are priced, so ``total_cost`` only covers the rest.
    """
    breakdown: list[CostLine] = []
    unavailable: list[UnavailableIngredient] = []
    missing_ingredients: list[str] = []
    missing_prices: list[str] = []

    for item in dish.ingredients:
        ingredient = index.get(normalize_ingredient_name(item.name))
        if ingredient is None:
            missing_ingredients.append(item.name)
            continue

        unit_price = ingredient.price_in_zone(zone_id)
        if unit_price is None:
            if zone_id is None:
                missing_prices.append(item.name)
            else:
                unavailable.append(UnavailableIngredient(name=item.name, grams=item.grams))
            continue

        cost = unit_price * item.grams / config.reference_unit_grams
        breakdown.append(CostLine(name=item.name, cost=cost, grams=item.grams))

    if missing_ingredients:
        logger.debug("Dish %r references unknown ingredients: %s", dish.name, missing_ingredients)
    if unavailable:
        logger.debug(
            "Dish %r not preparable in zone %r: %s",
            dish.name,
            zone_id,
            [u.name for u in unavailable],
        )

    return DishCost(
        zone_id=zone_id,
        total_cost=sum(line.cost for line in breakdown),
        breakdown=breakdown,
        unavailable_ingredients=unavailable,
        missing_ingredients=missing_ingredients,
        missing_prices=missing_prices,
    )


def zone_price_table(
    dish: Dish,
    index: Mapping[str, Ingredient],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> dict[str, float | None]:
    """Per-serving cost of *dish* in every zone; None where it cannot be prepared."""
    table: dict[str, float | None] = {}
    for zone_id in ECONOMIC_ZONES:
        result = calculate_dish_cost(dish, zone_id, index, config)
        table[zone_id] = result.total_cost if result.is_available else None
    return table


def summarize_zone_prices(table: Mapping[str, float | None]) -> dict[str, Any]:
    """Min / max / mean over the zones where the dish is priced, plus the spread in %."""
    available = [p for p in table.values() if p is not None and p > 0]
    if not available:
        return {"min": 0.0, "max": 0.0, "mean": 0.0, "spread_pct": 0, "zones_priced": 0}

    low, high = min(available), max(available)
    return {
        "min": low,
        "max": high,
        "mean": sum(available) / len(available),
        "spread_pct": round((high - low) / low * 100),
        "zones_priced": len(available),
    }
