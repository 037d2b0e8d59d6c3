from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..catalog.models import Dish, Ingredient
from .analyzer import DishAnalysis, analyze_dish
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import AnalyzedDish, CookingMode, DishOverride, Metric, NormalizedMetrics, PriceUnit
from .normalizer import DatasetStats, clamp_score, compute_dataset_stats, normalize_metric

logger = logging.getLogger(__name__)


def convert_price_to_unit(
    per_serving: float,
    weight: float,
    calories: float,
    unit: PriceUnit | str,
) -> float:
    """Express a per-serving price per kg or per 1000 kcal.

    A non-positive weight or calorie count converts to 0 instead of inf/nan.
    """
    unit = PriceUnit(unit)
    if unit is PriceUnit.serving:
        return per_serving
    if unit is PriceUnit.per1kg:
        return per_serving * 1000 / weight if weight > 0 else 0.0
    return per_serving * 1000 / calories if calories > 0 else 0.0


def variant_key(mode: CookingMode | str, unit: PriceUnit | str) -> str:
    return f"{CookingMode(mode).value}:{PriceUnit(unit).value}"


@dataclass(frozen=True, eq=False)
class Variant:
    mode: CookingMode
    price_unit: PriceUnit
    analyzed: tuple[AnalyzedDish, ...]
    dataset_stats: DatasetStats
    by_name: dict[str, AnalyzedDish]

    @property
    def key(self) -> str:
        return variant_key(self.mode, self.price_unit)


@dataclass(frozen=True, eq=False)
class VariantSet:
    """All six (mode x price unit) views for one (zone, overrides) pair."""

    zone_id: str | None
    analyses: tuple[DishAnalysis, ...]
    variants: dict[str, Variant]

    def get(self, mode: CookingMode | str, unit: PriceUnit | str) -> Variant:
        return self.variants[variant_key(mode, unit)]


def _positive_or_none(value: float) -> float | None:
    return value if value > 0 else None


def _unit_price_or_none(
    per_serving: float, weight: float, calories: float, unit: PriceUnit | str
) -> float | None:
    unit = PriceUnit(unit)
    # A per-kg or per-kcal price without its denominator is missing data, not free
    if unit is PriceUnit.per1kg and weight <= 0:
        return None
    if unit is PriceUnit.per1000kcal and calories <= 0:
        return None
    return convert_price_to_unit(per_serving, weight, calories, unit)


def _time_or_none(minutes: float) -> float | None:
    # 0 minutes is the fastest possible dish; only an invalid time is missing
    if math.isnan(minutes) or minutes < 0:
        return None
    return minutes


def _raw_rows(
    analysis: DishAnalysis, mode: CookingMode, unit: PriceUnit
) -> tuple[dict[Metric, float | None], dict[Metric, float | None]]:
    """(base, effective) raw metric values of one dish in one variant."""
    cost = analysis.cost
    base_priceable = cost.is_available and bool(cost.breakdown)
    base_price = _unit_price_or_none(analysis.base_cost, analysis.weight, analysis.base_calories, unit)
    price = _unit_price_or_none(analysis.price, analysis.weight, analysis.calories, unit)
    satiety = _positive_or_none(analysis.weight)

    base = {
        Metric.taste: analysis.base_taste,
        Metric.health: analysis.base_health,
        Metric.ethics: analysis.base_ethics,
        Metric.cheapness: base_price if base_priceable else None,
        Metric.speed: _time_or_none(analysis.base_time(mode)),
        Metric.low_calorie: _positive_or_none(analysis.base_calorie_density),
        Metric.satiety: satiety,
    }
    effective = {
        Metric.taste: analysis.taste,
        Metric.health: analysis.health,
        Metric.ethics: analysis.ethics,
        Metric.cheapness: price if analysis.is_priceable else None,
        Metric.speed: _time_or_none(analysis.time(mode)),
        Metric.low_calorie: _positive_or_none(analysis.calorie_density),
        Metric.satiety: satiety,
    }
    return base, effective


def _normalize_row(
    stats: DatasetStats,
    row: Mapping[Metric, float | None],
    own: Mapping[Metric, float | None],
    passive_penalty: float,
    config: RankingConfig,
) -> tuple[NormalizedMetrics, float, float]:
    """Normalized metrics plus (speed percentile, speed score before penalty)."""
    scores = {
        m.value: normalize_metric(stats, m, row[m], own[m], config)
        for m in Metric
        if m is not Metric.speed
    }

    percentile = stats.get(Metric.speed).percentile(
        row[Metric.speed], own[Metric.speed], config.neutral_percentile
    )
    before_penalty = clamp_score(percentile / 10, config) if percentile is not None else config.min_score
    scores[Metric.speed.value] = clamp_score(before_penalty - passive_penalty, config)

    return NormalizedMetrics(**scores), percentile or 0.0, before_penalty


def materialize_variant(
    analyses: Iterable[DishAnalysis],
    mode: CookingMode,
    unit: PriceUnit,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> Variant:
    """
    Build one variant from the shared per-dish pass.

    Only unit- and mode-dependent fields are derived here. Distributions
    come from the catalog-derived (base) values, and each dish's effective
    value is ranked against the others' base values, so an override moves
    only the dish it belongs to.
    """
    analyses = tuple(analyses)
    raw = [_raw_rows(a, mode, unit) for a in analyses]
    stats = compute_dataset_stats([base for base, _ in raw])

    analyzed: list[AnalyzedDish] = []
    for analysis, (base, effective) in zip(analyses, raw):
        normalized, speed_percentile, before_penalty = _normalize_row(
            stats, effective, base, analysis.passive_penalty, config
        )
        normalized_base, _, _ = _normalize_row(stats, base, base, analysis.passive_penalty, config)

        prices = {
            u: convert_price_to_unit(analysis.price, analysis.weight, analysis.calories, u)
            for u in PriceUnit
        }
        cost = analysis.cost
        analyzed.append(AnalyzedDish(
            dish=analysis.dish,
            name=analysis.dish.name,
            position=analysis.position,
            mode=mode,
            price_unit=unit,
            taste=analysis.taste,
            health=analysis.health,
            ethics=analysis.ethics,
            cost=analysis.price,
            price=prices[unit],
            prices=prices,
            time=analysis.time(mode),
            calories=analysis.calories,
            weight=analysis.weight,
            calorie_density=analysis.calorie_density,
            passive_time_hours=analysis.dish.passive_time_hours,
            passive_penalty=analysis.passive_penalty,
            base_cost=analysis.base_cost,
            base_time=analysis.base_time(mode),
            speed_percentile=speed_percentile,
            speed_score_before_penalty=before_penalty,
            normalized_metrics=normalized,
            normalized_base=normalized_base,
            cost_breakdown=cost.breakdown,
            missing_ingredients=cost.missing_ingredients,
            missing_prices=cost.missing_prices,
            unavailable_ingredients=cost.unavailable_ingredients,
            health_breakdown=list(analysis.health_breakdown),
            ethics_breakdown=list(analysis.ethics_breakdown),
            is_available=cost.is_available,
            has_overrides=analysis.has_overrides,
            overridden_metrics=analysis.overridden_metrics,
        ))

    return Variant(
        mode=mode,
        price_unit=unit,
        analyzed=tuple(analyzed),
        dataset_stats=stats,
        by_name={d.name: d for d in analyzed},
    )


def _coerce_dishes(dishes: Iterable[Dish | Mapping[str, Any]]) -> list[Dish]:
    return [d if isinstance(d, Dish) else Dish.model_validate(d) for d in dishes]


def _coerce_overrides(
    overrides: Mapping[str, DishOverride | Mapping[str, Any]] | None,
) -> dict[str, DishOverride]:
    return {
        name: o if isinstance(o, DishOverride) else DishOverride.model_validate(o)
        for name, o in (overrides or {}).items()
    }


def analyze_all_dishes_variants(
    dishes: Iterable[Dish | Mapping[str, Any]],
    index: Mapping[str, Ingredient],
    zone_id: str | None = None,
    overrides: Mapping[str, DishOverride | Mapping[str, Any]] | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> VariantSet:
    """
    Analyze every dish once for (zone, overrides), then materialize all six variants.

    Raw dish records and override sets are validated on entry; a malformed
    one raises ``pydantic.ValidationError``.
    """
    dish_list = _coerce_dishes(dishes)
    override_map = _coerce_overrides(overrides)

    analyses = tuple(
        analyze_dish(dish, index, zone_id, override_map.get(dish.name), config, position=i)
        for i, dish in enumerate(dish_list)
    )

    variants: dict[str, Variant] = {}
    for mode in CookingMode:
        for unit in PriceUnit:
            variants[variant_key(mode, unit)] = materialize_variant(analyses, mode, unit, config)

    logger.debug(
        "Analyzed %d dishes for zone %r (%d overridden)",
        len(analyses),
        zone_id,
        sum(1 for a in analyses if a.has_overrides),
    )
    return VariantSet(zone_id=zone_id, analyses=analyses, variants=variants)
