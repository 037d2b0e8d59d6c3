"""
Variant memo for interactive callers.

The six-way variant materialization is the expensive step; priority changes
only need the cheap score-and-sort. A caller keeps one ``VariantCache`` per
catalog and asks it for variants on every ranking request: a miss for any
(mode, unit) computes the full six-way set for that (zone, overrides) pair
exactly once.
"""
from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections.abc import Mapping, Sequence
from typing import Any

from ..catalog.models import Dish, Ingredient
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import CookingMode, DishOverride, PriceUnit
from .variants import Variant, VariantSet, analyze_all_dishes_variants

logger = logging.getLogger(__name__)

_DEFAULT_TTL = 300  # 5 minutes
_DEFAULT_MAX_ENTRIES = 64


def _make_key(zone_id: str | None, overrides: Mapping[str, DishOverride | Mapping[str, Any]]) -> str:
    payload = {
        "zone": zone_id,
        "overrides": {
            name: (o.model_dump(exclude_none=True) if isinstance(o, DishOverride) else dict(o))
            for name, o in overrides.items()
        },
    }
    normalized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


class VariantCache:
    """Safe to share across threads; the API serves sync endpoints from a threadpool."""

    def __init__(
        self,
        dishes: Sequence[Dish],
        index: Mapping[str, Ingredient],
        config: RankingConfig = DEFAULT_RANKING_CONFIG,
        ttl: float = _DEFAULT_TTL,
        max_entries: int = _DEFAULT_MAX_ENTRIES,
    ) -> None:
        self._dishes = tuple(dishes)
        self._index = index
        self._config = config
        self._ttl = ttl
        self._max_entries = max_entries
        self._entries: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_variant_set(
        self,
        zone_id: str | None,
        overrides: Mapping[str, DishOverride | Mapping[str, Any]] | None = None,
    ) -> VariantSet:
        overrides = overrides or {}
        key = _make_key(zone_id, overrides)
        with self._lock:
            entry = self._entries.get(key)
            if entry and time.time() - entry["created_at"] < self._ttl:
                self._hits += 1
                return entry["value"]
            self._entries.pop(key, None)
            self._misses += 1

        # Computed outside the lock; a concurrent miss on the same key computes it twice
        variant_set = analyze_all_dishes_variants(
            self._dishes, self._index, zone_id, overrides, self._config
        )
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k]["created_at"])
                del self._entries[oldest]
            self._entries[key] = {"value": variant_set, "created_at": time.time()}
        logger.debug("Variant cache miss for zone %r (key %s)", zone_id, key)
        return variant_set

    def get_variant(
        self,
        zone_id: str | None,
        overrides: Mapping[str, DishOverride | Mapping[str, Any]] | None,
        mode: CookingMode | str,
        unit: PriceUnit | str,
    ) -> Variant:
        return self.get_variant_set(zone_id, overrides).get(mode, unit)

    def get_stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
