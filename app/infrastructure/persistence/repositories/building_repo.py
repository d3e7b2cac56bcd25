"""Building (edificio) repository: owner/company/location/amenity lookups and amenity edits."""

from __future__ import annotations

import math
from typing import Any

from app.core.constants import (
    ACTIVE_FIELD,
    COLLECTION_BUILDINGS,
    COLLECTION_USERS,
    PARENT_COMPANY,
    PARENT_USER,
)
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.generators import generate_cuid

OWNER_AXIS = Axis("usuarioId", parent=PARENT_USER)
COMPANY_AXIS = Axis("empresaInmobiliariaId", parent=PARENT_COMPANY)
CITY_AXIS = Axis("direccion.ciudad")
COUNTRY_AXIS = Axis("direccion.pais")
AMENITY_AXIS = Axis("tiposAmenidad", name="amenidad", many=True)
ACTIVE_AXIS = Axis(ACTIVE_FIELD)

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def _with_amenity_ids(amenities: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    return [{**a, "id": a.get("id") or generate_cuid()} for a in amenities or []]


def _amenity_types(amenities: list[dict[str, Any]]) -> list[str]:
    """Distinct amenity types in first-seen order (queryable with array-contains)."""
    seen: dict[str, None] = {}
    for amenity in amenities:
        if amenity.get("tipo"):
            seen.setdefault(amenity["tipo"], None)
    return list(seen)


class BuildingRepository(CachedRepository):
    """Edificios. Soft delete; tiposAmenidad mirrors amenidades[].tipo for lookups."""

    collection = COLLECTION_BUILDINGS
    soft_deletable = True
    axes = (OWNER_AXIS, COMPANY_AXIS, CITY_AXIS, COUNTRY_AXIS, AMENITY_AXIS)
    filter_map = {
        "ciudad": ("direccion.ciudad", "=="),
        "pais": ("direccion.pais", "=="),
        "amenidad": ("tiposAmenidad", "array-contains"),
        "calificacionMin": ("calificacionPromedio", ">="),
    }

    async def _expand(self, record: dict[str, Any]) -> dict[str, Any]:
        owner = await self._summary(COLLECTION_USERS, record.get("usuarioId"), ("nombre", "email"))
        return {**record, "propietario": owner}

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data["amenidades"] = _with_amenity_ids(data.get("amenidades"))
        data["tiposAmenidad"] = _amenity_types(data["amenidades"])
        data.setdefault("calificacionPromedio", 0)
        data.setdefault("totalResenas", 0)
        return data

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        changes = dict(changes)
        changes.pop("tiposAmenidad", None)
        if "amenidades" in changes:
            changes["amenidades"] = _with_amenity_ids(changes["amenidades"])
            changes["tiposAmenidad"] = _amenity_types(changes["amenidades"])
        return await super().update(entity_id, changes)

    async def by_owner(self, user_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(OWNER_AXIS, user_id)

    async def by_company(self, company_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(COMPANY_AXIS, company_id)

    async def by_city(self, city: str) -> list[dict[str, Any]]:
        return await self.by_axis(CITY_AXIS, city)

    async def by_country(self, country: str) -> list[dict[str, Any]]:
        return await self.by_axis(COUNTRY_AXIS, country)

    async def with_amenity(self, amenity_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(AMENITY_AXIS, amenity_type)

    async def nearby(self, lat: float, lng: float, radius_km: float) -> list[dict[str, Any]]:
        """Active buildings within radius_km of (lat, lng), nearest first, with distanciaKm."""
        found = []
        for building in await self.by_axis(ACTIVE_AXIS, True):
            coords = (building.get("direccion") or {}).get("coordenadas") or {}
            if coords.get("lat") is None or coords.get("lng") is None:
                continue
            distance = haversine_km(lat, lng, coords["lat"], coords["lng"])
            if distance <= radius_km:
                found.append({**building, "distanciaKm": round(distance, 3)})
        return sorted(found, key=lambda b: b["distanciaKm"])

    async def update_aggregate_rating(
        self, entity_id: str, average: float, total: int
    ) -> dict[str, Any] | None:
        return await self.update(
            entity_id, {"calificacionPromedio": average, "totalResenas": total}
        )

    async def add_amenity(self, entity_id: str, amenity: dict[str, Any]) -> dict[str, Any] | None:
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        amenities = [*(current.get("amenidades") or []), amenity]
        return await self.update(entity_id, {"amenidades": amenities})

    async def remove_amenity(self, entity_id: str, amenity_id: str) -> dict[str, Any] | None:
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        amenities = [a for a in current.get("amenidades") or [] if a.get("id") != amenity_id]
        return await self.update(entity_id, {"amenidades": amenities})

    async def update_schedule(self, entity_id: str, schedule: dict[str, Any]) -> dict[str, Any] | None:
        return await self.update(entity_id, {"horario": schedule})
