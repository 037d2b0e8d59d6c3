from __future__ import annotations

from collections.abc import Mapping

from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import OVERRIDE_METRICS, DishOverride


def apply_override(
    base: float,
    override: DishOverride | None,
    metric: str,
    lower: float | None = None,
    upper: float | None = None,
) -> float:
    """Effective value of *metric*: absolute override, else base x multiplier, clamped."""
    value = base
    if override is not None:
        absolute = override.absolute(metric)
        multiplier = override.multiplier(metric)
        if absolute is not None:
            value = absolute
        elif multiplier is not None:
            value = base * multiplier
    if lower is not None:
        value = max(lower, value)
    if upper is not None:
        value = min(upper, value)
    return value


def set_override(
    overrides: Mapping[str, DishOverride],
    dish_name: str,
    metric: str,
    value: float | None = None,
    multiplier: float | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> dict[str, DishOverride]:
    """
    Return a new override mapping with *metric* of *dish_name* replaced.

    Setting one form clears the other. A multiplier within
    ``config.override_epsilon`` of 1.0 is the same as no override, and a dish
    left without any override is dropped from the mapping.
    """
    if metric not in OVERRIDE_METRICS:
        raise ValueError(f"Unknown override metric: {metric!r}")
    if value is not None and multiplier is not None:
        raise ValueError("Pass either an absolute value or a multiplier, not both")

    if multiplier is not None and abs(multiplier - 1.0) <= config.override_epsilon:
        multiplier = None

    current = overrides.get(dish_name)
    fields = current.model_dump() if current is not None else {}
    fields[metric] = value
    fields[f"{metric}_mul"] = multiplier

    updated = dict(overrides)
    override = DishOverride(**fields)
    if override.is_empty():
        updated.pop(dish_name, None)
    else:
        updated[dish_name] = override
    return updated


def clear_overrides(
    overrides: Mapping[str, DishOverride],
    dish_name: str,
    metric: str | None = None,
) -> dict[str, DishOverride]:
    """Drop every override of *dish_name*, or just the one for *metric*."""
    if metric is not None:
        return set_override(overrides, dish_name, metric)
    updated = dict(overrides)
    updated.pop(dish_name, None)
    return updated
