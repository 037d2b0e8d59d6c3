from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ..catalog.models import Ingredient

logger = logging.getLogger(__name__)

_APOSTROPHES = re.compile(r"['‘’]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_ingredient_name(name: str | None) -> str:
    """Lowercase, trim and collapse punctuation runs to single underscores.

    ``"Chicken Breast (skinless)"`` -> ``"chicken_breast_skinless"``.
    The same function builds index keys and looks them up, so a dish's
    reference and the catalog entry always meet on one key.
    """
    text = str(name or "").strip().lower()
    if not text:
        return ""
    text = _APOSTROPHES.sub("", text)
    return _NON_ALNUM.sub("_", text).strip("_")


def build_ingredient_index(
    catalog: Iterable[Ingredient | Mapping[str, Any]],
) -> dict[str, Ingredient]:
    """Map normalized ingredient name -> Ingredient.

    Entries without a usable name are skipped. Two names that normalize to
    the same key are a data-quality problem, not an error: the later entry
    wins.
    """
    index: dict[str, Ingredient] = {}
    for entry in catalog:
        if isinstance(entry, Ingredient):
            ingredient = entry
        else:
            try:
                ingredient = Ingredient.model_validate(entry)
            except ValidationError:
                logger.debug("Skipping malformed ingredient entry: %r", entry)
                continue

        key = normalize_ingredient_name(ingredient.name)
        if not key:
            logger.debug("Skipping ingredient with empty normalized name: %r", ingredient.name)
            continue
        if key in index:
            logger.warning(
                "Ingredient name collision on %r (%r replaces %r)",
                key,
                ingredient.name,
                index[key].name,
            )
        index[key] = ingredient
    return index


def lookup_ingredient(index: Mapping[str, Ingredient], name: str | None) -> Ingredient | None:
    return index.get(normalize_ingredient_name(name))
