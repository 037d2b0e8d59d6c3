from __future__ import annotations

from fastapi import FastAPI, HTTPException

from .catalog.store import get_catalog
from .catalog.zones import ECONOMIC_ZONES
from .ranking.cache import VariantCache
from .ranking.cost import summarize_zone_prices, zone_price_table
from .ranking.models import RankingRequest, RankingResponse
from .ranking.presets import PRESETS
from .ranking.scorer import score_and_sort_dishes
from .ranking.variants import variant_key

app = FastAPI(title="Dish Ranking API", version="2.0.0")

_variant_cache: VariantCache | None = None


def get_variant_cache() -> VariantCache:
    global _variant_cache
    if _variant_cache is None:
        catalog = get_catalog()
        _variant_cache = VariantCache(catalog.dishes, catalog.index)
    return _variant_cache


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/zones")
def zones() -> list[dict]:
    return [zone.model_dump() for zone in ECONOMIC_ZONES.values()]


@app.get("/presets")
def presets() -> list[dict]:
    return [preset.model_dump(mode="json") for preset in PRESETS]


@app.get("/metadata")
def metadata() -> dict:
    catalog = get_catalog()
    return {
        "dishes": len(catalog.dishes),
        "ingredients": len(catalog.index),
        "zones": sorted(ECONOMIC_ZONES),
    }


# ── Ranking ──────────────────────────────────────────────────────────────


@app.post("/rankings", response_model=RankingResponse)
def rankings(body: RankingRequest) -> RankingResponse:
    if body.zone is not None and body.zone not in ECONOMIC_ZONES:
        raise HTTPException(status_code=422, detail=f"Unknown zone: {body.zone}")

    # Expensive pass is shared by every priority change for the same zone + overrides
    variant = get_variant_cache().get_variant(
        body.zone, body.overrides, body.mode, body.price_unit
    )
    ranked = score_and_sort_dishes(variant.analyzed, variant.dataset_stats, body.priorities)
    if body.limit is not None:
        ranked = ranked[: body.limit]

    return RankingResponse(
        dishes=ranked,
        total_dishes=len(variant.analyzed),
        zone=body.zone,
        variant=variant_key(body.mode, body.price_unit),
        dataset_stats=variant.dataset_stats.summary(),
    )


@app.get("/dishes/{name}/zone-prices")
def dish_zone_prices(name: str) -> dict:
    catalog = get_catalog()
    dish = catalog.find_dish(name)
    if dish is None:
        raise HTTPException(status_code=404, detail=f"Unknown dish: {name}")

    table = zone_price_table(dish, catalog.index)
    return {
        "dish": dish.name,
        "prices": table,
        "summary": summarize_zone_prices(table),
    }


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_variant_cache().get_stats()
