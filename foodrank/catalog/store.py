from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..ranking.index import build_ingredient_index
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import Dish, Ingredient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    ingredients: tuple[Ingredient, ...]
    dishes: tuple[Dish, ...]
    index: dict[str, Ingredient]

    def find_dish(self, name: str) -> Dish | None:
        needle = name.strip().lower()
        for dish in self.dishes:
            if dish.name.lower() == needle or (dish.id and dish.id.lower() == needle):
                return dish
        return None


_catalog: Catalog | None = None


def _read_records(path: Path) -> list[dict[str, Any]]:
    with path.open(encoding="utf-8") as fh:
        raw = json.load(fh)
    # Tolerate both a bare list and an object keyed by id
    if isinstance(raw, dict):
        return [
            {"id": key, **value} if isinstance(value, dict) else value
            for key, value in raw.items()
        ]
    return list(raw)


def load_ingredients(path: Path) -> list[Ingredient]:
    ingredients: list[Ingredient] = []
    for record in _read_records(path):
        try:
            ingredients.append(Ingredient.model_validate(record))
        except ValidationError:
            logger.warning("Skipping malformed ingredient record: %r", record)
    return ingredients


def load_dishes(path: Path) -> list[Dish]:
    dishes: list[Dish] = []
    for record in _read_records(path):
        try:
            dishes.append(Dish.model_validate(record))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed dish record %r: %s",
                record.get("name") or record.get("dish") if isinstance(record, dict) else record,
                exc,
            )
    return dishes


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Catalog:
    ingredients = load_ingredients(config.ingredients_path)
    dishes = load_dishes(config.dishes_path)
    logger.info(
        "Loaded catalog: %d ingredients, %d dishes from %s",
        len(ingredients),
        len(dishes),
        config.data_dir,
    )
    return Catalog(
        ingredients=tuple(ingredients),
        dishes=tuple(dishes),
        index=build_ingredient_index(ingredients),
    )


def get_catalog() -> Catalog:
    """Return the in-memory catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog()
    return _catalog
