from __future__ import annotations

from dataclasses import dataclass, field


def _default_cooking_coefficients() -> dict[str, float]:
    # Multiplier applied to an ingredient's health_index, keyed by normalized state
    return {
        "raw": 1.0,
        "fresh": 1.0,
        "steamed": 0.98,
        "boiled": 0.95,
        "poached": 0.95,
        "blanched": 0.97,
        "fermented": 1.05,
        "pickled": 0.9,
        "stewed": 0.9,
        "braised": 0.9,
        "baked": 0.9,
        "roasted": 0.85,
        "grilled": 0.85,
        "sauteed": 0.85,
        "stir_fried": 0.85,
        "smoked": 0.75,
        "fried": 0.7,
        "deep_fried": 0.6,
    }


def _default_passive_penalty_steps() -> tuple[tuple[float, float], ...]:
    # (upper bound in hours, speed points subtracted); beyond the last bound the cap applies
    return (
        (0.0, 0.0),
        (1.0, 0.5),
        (2.0, 1.0),
        (4.0, 1.5),
        (8.0, 2.0),
        (12.0, 2.5),
    )


@dataclass(frozen=True)
class RankingConfig:
    reference_unit_grams: float = 1000.0
    override_epsilon: float = 1e-3
    neutral_score: int = 50
    neutral_percentile: float = 50.0
    min_score: float = 0.0
    max_score: float = 10.0
    min_time_minutes: float = 1.0
    passive_penalty_cap: float = 3.0
    cooking_coefficients: dict[str, float] = field(default_factory=_default_cooking_coefficients)
    passive_penalty_steps: tuple[tuple[float, float], ...] = field(
        default_factory=_default_passive_penalty_steps
    )


DEFAULT_RANKING_CONFIG = RankingConfig()
