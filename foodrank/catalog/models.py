from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Ingredient(BaseModel):
    """One entry of the ingredient catalog.

    ``price`` is the reference price used when no zone is selected;
    ``prices`` maps zone id -> unit price. A zone missing from ``prices``
    means the ingredient is not sold there.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    name: str = Field(..., min_length=1)
    health_index: float | None = Field(default=None, ge=0.0, le=10.0)
    ethics_index: float | None = Field(default=None, ge=0.0, le=10.0)
    ethics_reason: str = ""
    price: float | None = Field(
        default=None,
        ge=0.0,
        validation_alias=AliasChoices("price", "price_per_kg", "pricePerKg"),
    )
    prices: dict[str, float] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("prices", "zone_prices", "zonePrices"),
    )

    def price_in_zone(self, zone_id: str | None) -> float | None:
        if zone_id is None:
            return self.price
        return self.prices.get(zone_id)


class DishIngredient(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    name: str
    grams: float = Field(default=0.0, ge=0.0, validation_alias=AliasChoices("grams", "g"))
    cooking_state: str | None = Field(
        default=None,
        validation_alias=AliasChoices("cooking_state", "cookingState", "state"),
    )


class Dish(BaseModel):
    """Raw dish record as it appears in the catalog. Never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    id: str | None = None
    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "dish"))
    description: str = Field(default="", validation_alias=AliasChoices("description", "desc"))
    img_s: str | None = None
    img_m: str | None = None
    ingredients: tuple[DishIngredient, ...] = ()
    taste: float = Field(
        default=0.0,
        ge=0.0,
        le=10.0,
        validation_alias=AliasChoices("taste", "taste_score", "tasteScore"),
    )
    weight: float = Field(default=0.0, ge=0.0)
    calories: float = Field(default=0.0, ge=0.0)
    prep_time_normal: float = Field(
        default=0.0, ge=0.0, validation_alias=AliasChoices("prep_time_normal", "prepTimeNormal")
    )
    cook_time_normal: float = Field(
        default=0.0, ge=0.0, validation_alias=AliasChoices("cook_time_normal", "cookTimeNormal")
    )
    prep_time_optimized: float | None = Field(
        default=None,
        ge=0.0,
        validation_alias=AliasChoices("prep_time_optimized", "prepTimeOptimized"),
    )
    cook_time_optimized: float | None = Field(
        default=None,
        ge=0.0,
        validation_alias=AliasChoices("cook_time_optimized", "cookTimeOptimized"),
    )
    passive_time_hours: float = Field(
        default=0.0,
        ge=0.0,
        validation_alias=AliasChoices("passive_time_hours", "passiveTimeHours"),
    )
    comment: str = ""
    optimized_comment: str = Field(
        default="", validation_alias=AliasChoices("optimized_comment", "optimizedComment")
    )

    def total_time(self, optimized: bool) -> float:
        """Active prep + cook minutes; optimized times fall back to normal ones."""
        if not optimized:
            return self.prep_time_normal + self.cook_time_normal
        prep = self.prep_time_optimized if self.prep_time_optimized is not None else self.prep_time_normal
        cook = self.cook_time_optimized if self.cook_time_optimized is not None else self.cook_time_normal
        return prep + cook
