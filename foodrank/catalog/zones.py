from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class EconomicZone(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    emoji: str
    color: str


# ---------------------------------------------------------------------------
# Pricing regions. Ingredient ``prices`` tables are keyed by these ids.
# ---------------------------------------------------------------------------

ECONOMIC_ZONES: dict[str, EconomicZone] = {
    zone.id: zone
    for zone in (
        EconomicZone(id="north_america", name="North America", emoji="🇺🇸", color="#3b82f6"),
        EconomicZone(id="latin_america", name="Latin America", emoji="🇧🇷", color="#22c55e"),
        EconomicZone(id="western_europe", name="Western Europe", emoji="🇪🇺", color="#6366f1"),
        EconomicZone(id="eastern_europe", name="Eastern Europe", emoji="🇵🇱", color="#a855f7"),
        EconomicZone(id="middle_east", name="Middle East", emoji="🇦🇪", color="#f59e0b"),
        EconomicZone(id="africa", name="Africa", emoji="🇳🇬", color="#ef4444"),
        EconomicZone(id="south_asia", name="South Asia", emoji="🇮🇳", color="#f97316"),
        EconomicZone(id="east_asia", name="East Asia", emoji="🇯🇵", color="#ec4899"),
        EconomicZone(id="southeast_asia", name="Southeast Asia", emoji="🇹🇭", color="#14b8a6"),
        EconomicZone(id="oceania", name="Oceania", emoji="🇦🇺", color="#06b6d4"),
        EconomicZone(id="central_asia", name="Central Asia", emoji="🇰🇿", color="#84cc16"),
    )
}


def get_zone(zone_id: str | None) -> EconomicZone | None:
    if zone_id is None:
        return None
    return ECONOMIC_ZONES.get(zone_id)
