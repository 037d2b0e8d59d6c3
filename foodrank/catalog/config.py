from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_BUNDLED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Location of the static catalogs consumed by the ranking engine.
    """

    data_dir: Path = Path(os.getenv("FOODRANK_DATA_DIR", str(_BUNDLED_DATA_DIR)))
    ingredients_filename: str = "ingredients.json"
    dishes_filename: str = "dishes.json"

    @property
    def ingredients_path(self) -> Path:
        return self.data_dir / self.ingredients_filename

    @property
    def dishes_path(self) -> Path:
        return self.data_dir / self.dishes_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
