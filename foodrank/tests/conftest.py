from __future__ import annotations

import pytest

from foodrank.catalog.models import Dish
from foodrank.ranking.index import build_ingredient_index


@pytest.fixture
def index():
    return build_ingredient_index([
        {"name": "Rice", "health_index": 6, "ethics_index": 7, "price": 2.0,
         "prices": {"Z": 2.0, "es": 2.4}},
        {"name": "Tomato", "health_index": 8, "ethics_index": 8, "price": 3.0,
         "prices": {"Z": 3.0, "es": 3.5}},
        {"name": "Saffron", "health_index": 7, "ethics_index": 6, "price": 8000.0,
         "prices": {"es": 9000.0}},
        {"name": "Beef", "health_index": 6, "ethics_index": 2, "price": 14.0,
         "prices": {"Z": 15.0, "es": 17.0}},
        {"name": "Mystery spice", "health_index": None, "ethics_index": None},
    ])


@pytest.fixture
def timed_dishes():
    """Three dishes whose only difference is active time: 10, 20 and 30 minutes."""
    return [
        Dish(name="A", weight=300, calories=300, taste=5, prep_time_normal=5, cook_time_normal=5),
        Dish(name="B", weight=300, calories=300, taste=5, prep_time_normal=10, cook_time_normal=10),
        Dish(name="C", weight=300, calories=300, taste=5, prep_time_normal=10, cook_time_normal=20),
    ]
