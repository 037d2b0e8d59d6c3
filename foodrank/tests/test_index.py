from __future__ import annotations

import copy

from foodrank.catalog.models import Ingredient
from foodrank.ranking.index import (
    build_ingredient_index,
    lookup_ingredient,
    normalize_ingredient_name,
)


def test_normalize_collapses_punctuation_to_underscores():
    assert normalize_ingredient_name("  Chicken Breast (skinless) ") == "chicken_breast_skinless"


def test_normalize_drops_apostrophes():
    assert normalize_ingredient_name("Baker's Yeast") == "bakers_yeast"


def test_normalize_empty_values():
    assert normalize_ingredient_name("") == ""
    assert normalize_ingredient_name(None) == ""
    assert normalize_ingredient_name("---") == ""


def test_build_index_skips_entries_without_name():
    index = build_ingredient_index([
        {"name": "Rice", "health_index": 6},
        {"health_index": 5},
        {"name": ""},
    ])
    assert list(index) == ["rice"]


def test_build_index_accepts_models_and_mappings():
    index = build_ingredient_index([
        Ingredient(name="Olive Oil", health_index=7),
        {"name": "Sea Salt"},
    ])
    assert set(index) == {"olive_oil", "sea_salt"}
    assert isinstance(index["sea_salt"], Ingredient)


def test_build_index_collision_last_write_wins():
    index = build_ingredient_index([
        {"name": "Olive Oil", "health_index": 7},
        {"name": "olive-oil", "health_index": 5},
    ])
    assert len(index) == 1
    assert index["olive_oil"].health_index == 5


def test_build_index_does_not_mutate_catalog():
    catalog = [{"name": "Rice", "prices": {"Z": 1.0}}]
    snapshot = copy.deepcopy(catalog)
    build_ingredient_index(catalog)
    assert catalog == snapshot


def test_lookup_uses_same_normalization():
    index = build_ingredient_index([{"name": "Chicken breast"}])
    assert lookup_ingredient(index, "CHICKEN  BREAST").name == "Chicken breast"
    assert lookup_ingredient(index, "chicken thigh") is None
