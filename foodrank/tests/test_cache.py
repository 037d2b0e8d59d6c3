from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from foodrank.ranking.cache import VariantCache
from foodrank.ranking.models import DishOverride
from foodrank.ranking.variants import analyze_all_dishes_variants

_TARGET = "foodrank.ranking.cache.analyze_all_dishes_variants"


def _zones(mock):
    return [c.args[2] for c in mock.call_args_list]


def test_one_computation_serves_every_variant(timed_dishes, index):
    cache = VariantCache(timed_dishes, index)

    with patch(_TARGET, wraps=analyze_all_dishes_variants) as mock_analyze:
        for mode in ("normal", "optimized"):
            for unit in ("serving", "per1kg", "per1000kcal"):
                variant = cache.get_variant("Z", {}, mode, unit)
                assert variant.key == f"{mode}:{unit}"

    assert mock_analyze.call_count == 1
    assert cache.get_stats() == {"size": 1, "hits": 5, "misses": 1, "hit_rate": 83.3}


def test_zone_and_overrides_are_part_of_key(timed_dishes, index):
    cache = VariantCache(timed_dishes, index)

    with patch(_TARGET, wraps=analyze_all_dishes_variants) as mock_analyze:
        cache.get_variant_set("Z")
        cache.get_variant_set("es")
        cache.get_variant_set("Z", {"A": DishOverride(taste=9)})
        # Same override given as a raw mapping
        cache.get_variant_set("Z", {"A": {"taste": 9.0}})

    assert _zones(mock_analyze) == ["Z", "es", "Z"]


def test_expired_entry_is_recomputed(timed_dishes, index):
    cache = VariantCache(timed_dishes, index, ttl=0)

    with patch(_TARGET, wraps=analyze_all_dishes_variants) as mock_analyze:
        cache.get_variant_set("Z")
        cache.get_variant_set("Z")

    assert mock_analyze.call_count == 2
    assert cache.get_stats()["size"] == 1


def test_oldest_entry_evicted(timed_dishes, index):
    cache = VariantCache(timed_dishes, index, max_entries=2)

    cache.get_variant_set("Z")
    cache.get_variant_set("es")
    cache.get_variant_set(None)

    assert cache.get_stats()["size"] == 2


def test_clear(timed_dishes, index):
    cache = VariantCache(timed_dishes, index)
    cache.get_variant_set("Z")
    cache.clear()

    assert cache.get_stats() == {"size": 0, "hits": 0, "misses": 0, "hit_rate": 0.0}


def test_concurrent_requests_on_expiring_keys(timed_dishes, index):
    cache = VariantCache(timed_dishes, index, ttl=0, max_entries=2)
    zones = ["Z", "es", None] * 8

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda zone: cache.get_variant(zone, {}, "normal", "serving"), zones))

    assert len(results) == len(zones)
    assert all(len(variant.analyzed) == 3 for variant in results)
    stats = cache.get_stats()
    assert stats["misses"] == len(zones)
    assert stats["size"] <= 2
