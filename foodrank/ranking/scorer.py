from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..catalog.models import Dish, Ingredient
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import AnalyzedDish, NormalizedMetrics, PriorityVector, RankedDish, RankingPreferences
from .normalizer import DatasetStats
from .variants import analyze_all_dishes_variants


def _coerce_priorities(priorities: PriorityVector | Mapping[str, Any]) -> PriorityVector:
    if isinstance(priorities, PriorityVector):
        return priorities
    return PriorityVector.model_validate(priorities)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_dish(
    normalized: NormalizedMetrics,
    priorities: PriorityVector | Mapping[str, Any],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> int:
    """Weighted mean of normalized metrics on a 0-100 scale.

    A negative weight prefers the inverse of the metric (``10 - value``).
    With every weight at zero the dish gets the neutral score.
    """
    active = _coerce_priorities(priorities).active()
    if not active:
        return config.neutral_score

    total = 0.0
    total_weight = 0.0
    for metric, weight in active.items():
        value = normalized.get(metric)
        if weight < 0:
            value = config.max_score - value
        total += value * abs(weight)
        total_weight += abs(weight)

    score = _round_half_up(total / total_weight * 100 / config.max_score)
    return max(0, min(100, score))


def score_and_sort_dishes(
    analyzed: Sequence[AnalyzedDish],
    dataset_stats: DatasetStats | None,
    priorities: PriorityVector | Mapping[str, Any],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[RankedDish]:
    """
    Score one variant's dishes and sort them best first.

    ``dataset_stats`` is accepted for symmetry with the variant it came
    from; the normalized metrics on each dish already encode it. Ties keep
    catalog order, so equal scores never reshuffle between calls.
    """
    vector = _coerce_priorities(priorities)

    scored = [(score_dish(d.normalized_metrics, vector, config), d) for d in analyzed]
    scored.sort(key=lambda pair: (-pair[0], pair[1].position))

    return [
        RankedDish(**dict(dish), score=score, rank=i)
        for i, (score, dish) in enumerate(scored, start=1)
    ]


def rank_dishes(
    dishes: Iterable[Dish | Mapping[str, Any]],
    index: Mapping[str, Ingredient],
    preferences: RankingPreferences,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[RankedDish]:
    """Full pipeline: analyze for the preferences' zone and overrides, then rank."""
    variant_set = analyze_all_dishes_variants(
        dishes, index, preferences.zone, preferences.overrides, config
    )
    variant = variant_set.get(preferences.mode, preferences.price_unit)
    return score_and_sort_dishes(variant.analyzed, variant.dataset_stats, preferences.priorities, config)
