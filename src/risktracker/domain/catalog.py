"""Static territory catalog.

The catalog is fixed at import time and shared read-only by every session.
Declaration order is the canonical listing order.
"""

from __future__ import annotations

from .models import CatalogTerritory, TerritoryID


def _entry(territory_id: str, name: str, points: int) -> CatalogTerritory:
    return CatalogTerritory(id=TerritoryID(territory_id), name=name, points=points)


TERRITORIES: tuple[CatalogTerritory, ...] = (
    # North America
    _entry("alaska", "Alaska", 1),
    _entry("alberta", "Alberta", 1),
    _entry("america_central", "América Central", 1),
    _entry("estados_unidos_orientales", "Estados Unidos Orientales", 1),
    _entry("groenlandia", "Groenlandia", 1),
    _entry("territorio_noroccidental", "Territorio Noroccidental", 1),
    _entry("ontario", "Ontario", 1),
    _entry("quebec", "Quebec", 1),
    _entry("estados_unidos_occidentales", "Estados Unidos Occidentales", 1),
    # South America
    _entry("argentina", "Argentina", 1),
    _entry("brasil", "Brasil", 2),
    _entry("peru", "Perú", 1),
    _entry("venezuela", "Venezuela", 1),
    # Europe
    _entry("gran_bretana", "Gran Bretaña", 2),
    _entry("islandia", "Islandia", 1),
    _entry("europa_del_norte", "Europa del Norte", 2),
    _entry("escandinavia", "Escandinavia", 2),
    _entry("europa_del_sur", "Europa del Sur", 2),
    _entry("ucrania", "Ucrania", 2),
    _entry("europa_occidental", "Europa Occidental", 2),
)

_BY_ID: dict[TerritoryID, CatalogTerritory] = {entry.id: entry for entry in TERRITORIES}


def list_all() -> tuple[CatalogTerritory, ...]:
    """Return every catalog territory in declaration order."""

    return TERRITORIES


def find(territory_id: str) -> CatalogTerritory | None:
    return _BY_ID.get(TerritoryID(territory_id))
