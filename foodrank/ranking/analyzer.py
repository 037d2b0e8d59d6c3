from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from ..catalog.models import Dish, Ingredient
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .cost import calculate_dish_cost
from .index import normalize_ingredient_name
from .models import OVERRIDE_METRICS, CookingMode, DishCost, DishOverride, EthicsLine, HealthLine
from .overrides import apply_override

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DishAnalysis:
    """Zone- and override-aware raw metrics of one dish, shared by all six variants."""

    dish: Dish
    position: int
    cost: DishCost

    base_taste: float
    base_health: float
    base_ethics: float
    base_cost: float
    base_time_normal: float
    base_time_optimized: float
    base_calories: float

    taste: float
    health: float
    ethics: float
    price: float
    time_normal: float
    time_optimized: float
    calories: float

    weight: float
    passive_penalty: float
    missing_ingredients: tuple[str, ...]
    health_breakdown: tuple[HealthLine, ...]
    ethics_breakdown: tuple[EthicsLine, ...]
    overridden_metrics: dict[str, bool]

    @property
    def has_overrides(self) -> bool:
        return any(self.overridden_metrics.values())

    @property
    def is_priceable(self) -> bool:
        """True when the price is real data, even if it is 0 (a free dish).

        A dish with an unavailable ingredient, or with nothing priced and no
        price override, has no price to compare.
        """
        if not self.cost.is_available:
            return False
        return bool(self.cost.breakdown) or self.overridden_metrics.get("price", False)

    def base_time(self, mode: CookingMode) -> float:
        return self.base_time_optimized if mode is CookingMode.optimized else self.base_time_normal

    def time(self, mode: CookingMode) -> float:
        return self.time_optimized if mode is CookingMode.optimized else self.time_normal

    @property
    def base_calorie_density(self) -> float:
        return calorie_density(self.base_calories, self.weight)

    @property
    def calorie_density(self) -> float:
        return calorie_density(self.calories, self.weight)


def get_cooking_coef(state: str | None, config: RankingConfig = DEFAULT_RANKING_CONFIG) -> float:
    """Health multiplier for a cooking state; unknown or missing states are neutral."""
    key = normalize_ingredient_name(state)
    if not key:
        return 1.0
    return config.cooking_coefficients.get(key, 1.0)


def get_passive_time_penalty(
    hours: float | None, config: RankingConfig = DEFAULT_RANKING_CONFIG
) -> float:
    """Speed points lost to unattended time (marinating, rising, ...). Monotonic and capped."""
    if not hours or hours <= 0:
        return 0.0
    for upper_hours, penalty in config.passive_penalty_steps:
        if hours <= upper_hours:
            return penalty
    return config.passive_penalty_cap


def calorie_density(calories: float, weight: float) -> float:
    """Calories per gram scaled by 1000 / 100, the density the catalog displays. 0 without weight."""
    if weight <= 0 or calories <= 0:
        return 0.0
    return calories / weight * 1000 / 100


def _clamp(value: float, config: RankingConfig) -> float:
    return max(config.min_score, min(config.max_score, value))


def _weighted_health(
    dish: Dish, index: Mapping[str, Ingredient], config: RankingConfig
) -> tuple[float, list[HealthLine]]:
    lines: list[HealthLine] = []
    total = 0.0
    grams = 0.0
    for item in dish.ingredients:
        ingredient = index.get(normalize_ingredient_name(item.name))
        if ingredient is None or ingredient.health_index is None or item.grams <= 0:
            continue
        coefficient = get_cooking_coef(item.cooking_state, config)
        adjusted = _clamp(ingredient.health_index * coefficient, config)
        lines.append(HealthLine(
            name=item.name,
            grams=item.grams,
            cooking_state=item.cooking_state,
            health_index=ingredient.health_index,
            coefficient=coefficient,
            adjusted=adjusted,
        ))
        total += adjusted * item.grams
        grams += item.grams
    if grams <= 0:
        return 0.0, lines
    return _clamp(total / grams, config), lines


def _weighted_ethics(
    dish: Dish, index: Mapping[str, Ingredient], config: RankingConfig
) -> tuple[float, list[EthicsLine]]:
    # Ingredients without ethics data are left out, not counted as zero
    lines: list[EthicsLine] = []
    total = 0.0
    grams = 0.0
    for item in dish.ingredients:
        ingredient = index.get(normalize_ingredient_name(item.name))
        if ingredient is None or ingredient.ethics_index is None or item.grams <= 0:
            continue
        lines.append(EthicsLine(
            name=item.name,
            grams=item.grams,
            ethics_index=ingredient.ethics_index,
            reason=ingredient.ethics_reason,
        ))
        total += ingredient.ethics_index * item.grams
        grams += item.grams
    if grams <= 0:
        return 0.0, lines
    return _clamp(total / grams, config), lines


def _effective_time(base: float, override: DishOverride | None, config: RankingConfig) -> float:
    if override is None or (override.time is None and override.time_mul is None):
        return base
    return apply_override(base, override, "time", lower=config.min_time_minutes)


def analyze_dish(
    dish: Dish,
    index: Mapping[str, Ingredient],
    zone_id: str | None = None,
    override: DishOverride | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
    position: int = 0,
) -> DishAnalysis:
    """Run the expensive per-dish pass: zone cost plus raw metric values.

    Values here are not comparable across dishes yet; see
    :mod:`foodrank.ranking.normalizer`.
    """
    cost = calculate_dish_cost(dish, zone_id, index, config)

    base_taste = _clamp(dish.taste, config)
    base_health, health_breakdown = _weighted_health(dish, index, config)
    base_ethics, ethics_breakdown = _weighted_ethics(dish, index, config)
    base_time_normal = dish.total_time(optimized=False)
    base_time_optimized = dish.total_time(optimized=True)

    if override is not None and override.is_empty():
        override = None
    overridden_metrics = {
        metric: override is not None and override.touches(metric) for metric in OVERRIDE_METRICS
    }

    return DishAnalysis(
        dish=dish,
        position=position,
        cost=cost,
        base_taste=base_taste,
        base_health=base_health,
        base_ethics=base_ethics,
        base_cost=cost.total_cost,
        base_time_normal=base_time_normal,
        base_time_optimized=base_time_optimized,
        base_calories=dish.calories,
        taste=apply_override(base_taste, override, "taste", config.min_score, config.max_score),
        health=apply_override(base_health, override, "health", config.min_score, config.max_score),
        ethics=apply_override(base_ethics, override, "ethics", config.min_score, config.max_score),
        price=apply_override(cost.total_cost, override, "price", lower=0.0),
        time_normal=_effective_time(base_time_normal, override, config),
        time_optimized=_effective_time(base_time_optimized, override, config),
        calories=apply_override(dish.calories, override, "calories", lower=0.0),
        weight=dish.weight,
        passive_penalty=get_passive_time_penalty(dish.passive_time_hours, config),
        missing_ingredients=tuple(cost.missing_ingredients),
        health_breakdown=tuple(health_breakdown),
        ethics_breakdown=tuple(ethics_breakdown),
        overridden_metrics=overridden_metrics,
    )
