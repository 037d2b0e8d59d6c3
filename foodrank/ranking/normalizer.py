from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import Metric

# Dataset-relative metrics -> True when a lower raw value is better
RELATIVE_METRICS: dict[Metric, bool] = {
    Metric.cheapness: True,
    Metric.speed: True,
    Metric.low_calorie: True,
    Metric.satiety: False,
}

# Already on a 0-10 scale; only clamped
PASSTHROUGH_METRICS: tuple[Metric, ...] = (Metric.taste, Metric.health, Metric.ethics)


@dataclass(frozen=True, eq=False)
class MetricStats:
    metric: Metric
    lower_is_better: bool
    values: np.ndarray = field(repr=False)
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    median: float = 0.0

    @property
    def count(self) -> int:
        return int(self.values.size)

    def percentile(
        self,
        value: float | None,
        own_value: float | None = None,
        neutral: float = DEFAULT_RANKING_CONFIG.neutral_percentile,
    ) -> float | None:
        """
        Percentile rank of *value* among the dataset, 0 = worst, 100 = best.

        *own_value* is the dish's own entry in the distribution; it is left out
        so a dish is only compared with the others. Ties share the average
        rank. Returns None for missing data and *neutral* when there is
        nothing to compare against.
        """
        if value is None or math.isnan(value):
            return None

        less = int(np.searchsorted(self.values, value, side="left"))
        less_equal = int(np.searchsorted(self.values, value, side="right"))
        equal = less_equal - less
        greater = self.count - less_equal
        others = self.count

        if own_value is not None and not math.isnan(own_value):
            others -= 1
            if own_value < value:
                less -= 1
            elif own_value == value:
                equal -= 1
            else:
                greater -= 1

        if others <= 0:
            return neutral

        worse = greater if self.lower_is_better else less
        return 100.0 * (worse + 0.5 * equal) / others

    def summary(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "median": self.median,
            "lower_is_better": self.lower_is_better,
        }


@dataclass(frozen=True, eq=False)
class DatasetStats:
    size: int
    metrics: dict[Metric, MetricStats]

    def get(self, metric: Metric) -> MetricStats:
        return self.metrics[metric]

    def summary(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "metrics": {m.value: s.summary() for m, s in self.metrics.items()},
        }


def compute_dataset_stats(rows: Sequence[Mapping[Metric, float | None]]) -> DatasetStats:
    """
    Build distribution tables from one variant's raw metric rows.

    Each row maps metric -> raw value, None marking missing data (an
    unpriceable dish, zero weight, ...). Missing values are left out of the
    distribution.
    """
    columns = [m.value for m in Metric]
    frame = pd.DataFrame(
        [{m.value: row.get(m) for m in Metric} for row in rows],
        columns=columns,
        dtype=float,
    )

    metrics: dict[Metric, MetricStats] = {}
    for metric in Metric:
        series = frame[metric.value].dropna()
        values = np.sort(series.to_numpy(dtype=float))
        if values.size:
            described = dict(min=float(values[0]), max=float(values[-1]),
                             mean=float(series.mean()), median=float(series.median()))
        else:
            described = {}
        metrics[metric] = MetricStats(
            metric=metric,
            lower_is_better=RELATIVE_METRICS.get(metric, False),
            values=values,
            **described,
        )
    return DatasetStats(size=len(frame), metrics=metrics)


def clamp_score(value: float, config: RankingConfig = DEFAULT_RANKING_CONFIG) -> float:
    return max(config.min_score, min(config.max_score, value))


def normalize_metric(
    stats: DatasetStats,
    metric: Metric,
    value: float | None,
    own_value: float | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> float:
    """Turn one raw value into a 0-10 score; missing data scores 0."""
    if value is None:
        return config.min_score
    if metric not in RELATIVE_METRICS:
        return clamp_score(value, config)

    percentile = stats.get(metric).percentile(value, own_value, config.neutral_percentile)
    if percentile is None:
        return config.min_score
    return clamp_score(percentile / 10, config)
