from __future__ import annotations

import pytest

from foodrank.catalog.models import Dish
from foodrank.ranking.analyzer import (
    analyze_dish,
    get_cooking_coef,
    get_passive_time_penalty,
    calorie_density,
)
from foodrank.ranking.config import RankingConfig
from foodrank.ranking.index import build_ingredient_index
from foodrank.ranking.models import CookingMode, DishOverride


# ── Lookup tables ────────────────────────────────────────────────────────


class TestCookingCoef:
    def test_raw_is_neutral(self):
        assert get_cooking_coef("raw") == 1.0

    def test_state_is_normalized(self):
        assert get_cooking_coef("Deep-Fried") == 0.6

    def test_missing_and_unknown_states_are_neutral(self):
        assert get_cooking_coef(None) == 1.0
        assert get_cooking_coef("") == 1.0
        assert get_cooking_coef("sous vide") == 1.0

    def test_table_is_configurable(self):
        config = RankingConfig(cooking_coefficients={"fried": 0.5})
        assert get_cooking_coef("fried", config) == 0.5
        assert get_cooking_coef("boiled", config) == 1.0


class TestPassivePenalty:
    def test_no_passive_time(self):
        assert get_passive_time_penalty(0) == 0.0
        assert get_passive_time_penalty(None) == 0.0

    def test_steps(self):
        assert get_passive_time_penalty(0.5) == 0.5
        assert get_passive_time_penalty(1) == 0.5
        assert get_passive_time_penalty(3) == 1.5
        assert get_passive_time_penalty(10) == 2.5

    def test_capped(self):
        assert get_passive_time_penalty(48) == 3.0
        assert get_passive_time_penalty(1000) == 3.0

    def test_monotonic(self):
        hours = [0, 0.25, 0.5, 1, 1.5, 2, 3, 4, 6, 8, 12, 13, 24, 72]
        penalties = [get_passive_time_penalty(h) for h in hours]
        assert penalties == sorted(penalties)


# ── Per-dish metrics ─────────────────────────────────────────────────────


@pytest.fixture
def health_index():
    return build_ingredient_index([
        {"name": "Greens", "health_index": 8, "ethics_index": 8},
        {"name": "Batter", "health_index": 4, "ethics_index": None},
    ])


def test_health_is_gram_weighted_with_cooking_coef(health_index):
    dish = Dish(name="Tempura", ingredients=[
        {"name": "Greens", "g": 100, "state": "raw"},
        {"name": "Batter", "g": 100, "state": "fried"},
    ])
    analysis = analyze_dish(dish, health_index)
    # (8 * 100 + 4 * 0.7 * 100) / 200
    assert analysis.health == pytest.approx(5.4)


def test_ethics_ignores_ingredients_without_data(health_index):
    dish = Dish(name="Tempura", ingredients=[
        {"name": "Greens", "g": 100},
        {"name": "Batter", "g": 300},
    ])
    assert analyze_dish(dish, health_index).ethics == pytest.approx(8.0)



def test_health_breakdown_per_ingredient(health_index):
    dish = Dish(name="Tempura", ingredients=[
        {"name": "Greens", "g": 100, "state": "raw"},
        {"name": "Batter", "g": 100, "state": "fried"},
        {"name": "Dragonfruit", "g": 50},
    ])
    lines = {line.name: line for line in analyze_dish(dish, health_index).health_breakdown}

    assert set(lines) == {"Greens", "Batter"}
    assert lines["Batter"].health_index == 4
    assert lines["Batter"].coefficient == 0.7
    assert lines["Batter"].adjusted == pytest.approx(2.8)
    assert lines["Batter"].cooking_state == "fried"
    assert lines["Greens"].adjusted == 8


def test_ethics_breakdown_carries_reason():
    index = build_ingredient_index([
        {"name": "Beef", "ethics_index": 2, "ethics_reason": "High land use."},
        {"name": "Salt"},
    ])
    dish = Dish(name="Steak", ingredients=[{"name": "Beef", "g": 200}, {"name": "Salt", "g": 2}])
    lines = analyze_dish(dish, index).ethics_breakdown

    assert [(line.name, line.grams, line.ethics_index, line.reason) for line in lines] == [
        ("Beef", 200, 2, "High land use."),
    ]


def test_unknown_ingredient_is_reported(health_index):
    dish = Dish(name="Salad", ingredients=[{"name": "Greens", "g": 100}, {"name": "Dragonfruit", "g": 50}])
    analysis = analyze_dish(dish, health_index)
    assert analysis.missing_ingredients == ("Dragonfruit",)
    assert analysis.health == pytest.approx(8.0)


def test_empty_dish_yields_zero_metrics(health_index):
    analysis = analyze_dish(Dish(name="Air"), health_index)
    assert analysis.health == 0.0
    assert analysis.ethics == 0.0
    assert analysis.calorie_density == 0.0
    assert analysis.price == 0.0


def test_calorie_density():
    # 0.5 kcal/g * 1000 / 100
    assert calorie_density(250, 500) == pytest.approx(5.0)
    assert calorie_density(250, 0) == 0.0
    assert calorie_density(0, 500) == 0.0


def test_optimized_time_falls_back_to_normal(health_index):
    dish = Dish(name="Stew", prep_time_normal=10, cook_time_normal=20, cook_time_optimized=10)
    analysis = analyze_dish(dish, health_index)
    assert analysis.time(CookingMode.normal) == 30
    assert analysis.time(CookingMode.optimized) == 20


def test_passive_penalty_attached(health_index):
    dish = Dish(name="Bread", passive_time_hours=3)
    assert analyze_dish(dish, health_index).passive_penalty == 1.5


# ── Overrides ────────────────────────────────────────────────────────────


class TestOverrideLayering:
    def test_taste_multiplier(self, health_index):
        dish = Dish(name="Soup", taste=6.0)
        analysis = analyze_dish(dish, health_index, override=DishOverride(taste_mul=1.2))
        assert analysis.taste == pytest.approx(7.2)
        assert analysis.base_taste == 6.0
        assert analysis.has_overrides
        assert analysis.overridden_metrics["taste"]
        assert not analysis.overridden_metrics["time"]

    def test_taste_multiplier_clamped(self, health_index):
        dish = Dish(name="Soup", taste=9.0)
        analysis = analyze_dish(dish, health_index, override=DishOverride(taste_mul=1.2))
        assert analysis.taste == 10.0

    def test_no_override_keeps_base(self, health_index):
        dish = Dish(name="Soup", taste=6.0)
        analysis = analyze_dish(dish, health_index, override=None)
        assert analysis.taste == 6.0
        assert not analysis.has_overrides

    def test_empty_override_is_no_override(self, health_index):
        analysis = analyze_dish(Dish(name="Soup", taste=6.0), health_index, override=DishOverride())
        assert not analysis.has_overrides
        assert not any(analysis.overridden_metrics.values())

    def test_time_override_applies_to_both_modes(self, health_index):
        dish = Dish(name="Stew", prep_time_normal=10, cook_time_normal=50, cook_time_optimized=20)
        analysis = analyze_dish(dish, health_index, override=DishOverride(time_mul=0.5))
        assert analysis.time(CookingMode.normal) == 30
        assert analysis.time(CookingMode.optimized) == 15
        assert analysis.base_time(CookingMode.normal) == 60

    def test_time_override_has_floor(self, health_index):
        dish = Dish(name="Stew", prep_time_normal=10)
        analysis = analyze_dish(dish, health_index, override=DishOverride(time=0))
        assert analysis.time(CookingMode.normal) == 1.0

    def test_price_and_calories_overrides(self, index):
        dish = Dish(name="Rice", weight=500, calories=600, ingredients=[{"name": "Rice", "g": 500}])
        analysis = analyze_dish(
            dish, index, "Z", override=DishOverride(price=4.0, calories_mul=0.5)
        )
        assert analysis.base_cost == pytest.approx(1.0)
        assert analysis.price == 4.0
        assert analysis.calories == 300
        assert analysis.base_calorie_density == pytest.approx(12.0)
        assert analysis.calorie_density == pytest.approx(6.0)
