from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ..catalog.models import Dish


class CookingMode(str, Enum):
    normal = "normal"
    optimized = "optimized"


class PriceUnit(str, Enum):
    serving = "serving"
    per1kg = "per1kg"
    per1000kcal = "per1000kcal"


class Metric(str, Enum):
    taste = "taste"
    health = "health"
    cheapness = "cheapness"
    speed = "speed"
    satiety = "satiety"
    low_calorie = "low_calorie"
    ethics = "ethics"


# Metrics a user can correct per dish, in the order they are applied
OVERRIDE_METRICS: tuple[str, ...] = ("taste", "price", "time", "health", "ethics", "calories")


# ── Caller-owned inputs ──────────────────────────────────────────────────


class DishOverride(BaseModel):
    """Per-dish user correction: an absolute value or a multiplier per metric."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, allow_inf_nan=False, extra="forbid"
    )

    taste: float | None = Field(default=None, ge=0.0)
    taste_mul: float | None = Field(
        default=None, ge=0.0, validation_alias=AliasChoices("taste_mul", "tasteMul")
    )
    price: float | None = Field(default=None, ge=0.0)
    price_mul: float | None = Field(
        default=None, ge=0.0, validation_alias=AliasChoices("price_mul", "priceMul")
    )
    time: float | None = Field(default=None, ge=0.0)
    time_mul: float | None = Field(
        default=None, ge=0.0, validation_alias=AliasChoices("time_mul", "timeMul")
    )
    health: float | None = Field(default=None, ge=0.0)
    health_mul: float | None = Field(
        default=None, ge=0.0, validation_alias=AliasChoices("health_mul", "healthMul")
    )
    ethics: float | None = Field(default=None, ge=0.0)
    ethics_mul: float | None = Field(
        default=None, ge=0.0, validation_alias=AliasChoices("ethics_mul", "ethicsMul")
    )
    calories: float | None = Field(default=None, ge=0.0)
    calories_mul: float | None = Field(
        default=None, ge=0.0, validation_alias=AliasChoices("calories_mul", "caloriesMul")
    )

    @model_validator(mode="after")
    def _absolute_and_multiplier_are_exclusive(self) -> DishOverride:
        for metric in OVERRIDE_METRICS:
            if getattr(self, metric) is not None and getattr(self, f"{metric}_mul") is not None:
                raise ValueError(
                    f"Override for '{metric}' sets both an absolute value and a multiplier"
                )
        return self

    def absolute(self, metric: str) -> float | None:
        return getattr(self, metric)

    def multiplier(self, metric: str) -> float | None:
        return getattr(self, f"{metric}_mul")

    def touches(self, metric: str) -> bool:
        return self.absolute(metric) is not None or self.multiplier(metric) is not None

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class PriorityVector(BaseModel):
    """Signed weight per metric in [-10, 10]; 0 leaves the metric out of scoring."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, allow_inf_nan=False, extra="forbid"
    )

    taste: float = Field(default=0.0, ge=-10.0, le=10.0)
    health: float = Field(default=0.0, ge=-10.0, le=10.0)
    cheapness: float = Field(default=0.0, ge=-10.0, le=10.0)
    speed: float = Field(default=0.0, ge=-10.0, le=10.0)
    satiety: float = Field(default=0.0, ge=-10.0, le=10.0)
    low_calorie: float = Field(
        default=0.0,
        ge=-10.0,
        le=10.0,
        validation_alias=AliasChoices("low_calorie", "lowCalorie"),
    )
    ethics: float = Field(default=0.0, ge=-10.0, le=10.0)

    def weight(self, metric: Metric) -> float:
        return getattr(self, metric.value)

    def active(self) -> dict[Metric, float]:
        return {m: self.weight(m) for m in Metric if self.weight(m) != 0}


class RankingPreferences(BaseModel):
    """Everything the engine needs from the caller for one ranking pass."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    zone: str | None = Field(
        default=None, validation_alias=AliasChoices("zone", "selected_zone", "selectedZone")
    )
    overrides: dict[str, DishOverride] = Field(default_factory=dict)
    priorities: PriorityVector = Field(default_factory=PriorityVector)
    is_optimized: bool = Field(
        default=True, validation_alias=AliasChoices("is_optimized", "isOptimized")
    )
    price_unit: PriceUnit = Field(
        default=PriceUnit.per1000kcal,
        validation_alias=AliasChoices("price_unit", "priceUnit"),
    )

    @property
    def mode(self) -> CookingMode:
        return CookingMode.optimized if self.is_optimized else CookingMode.normal


# ── Zone cost ────────────────────────────────────────────────────────────


class CostLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cost: float
    grams: float


class UnavailableIngredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    grams: float


class DishCost(BaseModel):
    model_config = ConfigDict(frozen=True)

    zone_id: str | None
    total_cost: float
    breakdown: list[CostLine] = Field(default_factory=list)
    unavailable_ingredients: list[UnavailableIngredient] = Field(default_factory=list)
    missing_ingredients: list[str] = Field(default_factory=list)
    missing_prices: list[str] = Field(default_factory=list)

    @property
    def is_available(self) -> bool:
        """False when at least one ingredient cannot be bought in the zone."""
        return not self.unavailable_ingredients


# ── Analysis output ──────────────────────────────────────────────────────


class HealthLine(BaseModel):
    """One ingredient's share of the dish health score."""

    model_config = ConfigDict(frozen=True)

    name: str
    grams: float
    cooking_state: str | None = None
    health_index: float
    coefficient: float
    adjusted: float


class EthicsLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    grams: float
    ethics_index: float
    reason: str = ""


class NormalizedMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    taste: float = Field(default=0.0, ge=0.0, le=10.0)
    health: float = Field(default=0.0, ge=0.0, le=10.0)
    cheapness: float = Field(default=0.0, ge=0.0, le=10.0)
    speed: float = Field(default=0.0, ge=0.0, le=10.0)
    satiety: float = Field(default=0.0, ge=0.0, le=10.0)
    low_calorie: float = Field(default=0.0, ge=0.0, le=10.0)
    ethics: float = Field(default=0.0, ge=0.0, le=10.0)

    def get(self, metric: Metric) -> float:
        return getattr(self, metric.value)


class AnalyzedDish(BaseModel):
    """One dish as seen through one (cooking mode, price unit) variant."""

    model_config = ConfigDict(frozen=True)

    dish: Dish
    name: str
    position: int
    mode: CookingMode
    price_unit: PriceUnit

    # effective values (overrides applied)
    taste: float
    health: float
    ethics: float
    cost: float
    price: float
    prices: dict[PriceUnit, float]
    time: float
    calories: float
    weight: float
    calorie_density: float
    passive_time_hours: float
    passive_penalty: float

    # catalog-derived values before overrides
    base_cost: float
    base_time: float

    speed_percentile: float
    speed_score_before_penalty: float
    normalized_metrics: NormalizedMetrics
    normalized_base: NormalizedMetrics

    cost_breakdown: list[CostLine] = Field(default_factory=list)
    missing_ingredients: list[str] = Field(default_factory=list)
    missing_prices: list[str] = Field(default_factory=list)
    unavailable_ingredients: list[UnavailableIngredient] = Field(default_factory=list)
    health_breakdown: list[HealthLine] = Field(default_factory=list)
    ethics_breakdown: list[EthicsLine] = Field(default_factory=list)
    is_available: bool = True
    has_overrides: bool = False
    # metric -> True when the user overrode it for this dish
    overridden_metrics: dict[str, bool] = Field(default_factory=dict)


class RankedDish(AnalyzedDish):
    score: int = Field(..., ge=0, le=100)
    rank: int = Field(..., ge=1)


# ── API payloads ─────────────────────────────────────────────────────────


class RankingRequest(RankingPreferences):
    limit: int | None = Field(default=None, ge=1, le=500)


class RankingResponse(BaseModel):
    dishes: list[RankedDish]
    total_dishes: int
    zone: str | None
    variant: str
    dataset_stats: dict = Field(default_factory=dict)
