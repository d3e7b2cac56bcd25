"""Office (oficina) repository: unique code, capacity and price ranges."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import (
    ACTIVE_FIELD,
    CACHE_KEY_SEP,
    COLLECTION_BUILDINGS,
    COLLECTION_OFFICES,
    PARENT_BUILDING,
    PARENT_USER,
)
from app.domain.enums import OfficeStatus
from app.domain.exceptions import DuplicateValueException, ValidationException
from app.infrastructure.cache.keys import field_key, range_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository

BUILDING_AXIS = Axis("edificioId", parent=PARENT_BUILDING)
OWNER_AXIS = Axis("usuarioId", parent=PARENT_USER)
TYPE_AXIS = Axis("tipo")
STATUS_AXIS = Axis("estado")
CODE_AXIS = Axis("codigo")

PRICE_PERIODS = ("porHora", "porDia", "porMes")


class OfficeRepository(CachedRepository):
    """Oficinas. Soft delete; codigo is unique across the collection."""

    collection = COLLECTION_OFFICES
    soft_deletable = True
    axes = (BUILDING_AXIS, OWNER_AXIS, TYPE_AXIS, STATUS_AXIS, CODE_AXIS)
    range_axes = ("capacidad", "precio")
    filter_map = {
        "capacidadMin": ("capacidad", ">="),
        "capacidadMax": ("capacidad", "<="),
        "piso": ("piso", "=="),
    }

    def _available_key(self) -> str:
        return field_key(self.entity, "disponibles", True)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        if record.get("estado") == OfficeStatus.DISPONIBLE.value and record.get(ACTIVE_FIELD) is True:
            return {self._available_key()}
        return set()

    async def _expand(self, record: dict[str, Any]) -> dict[str, Any]:
        building = await self._summary(
            COLLECTION_BUILDINGS, record.get("edificioId"), ("nombre", "direccion")
        )
        return {**record, "edificio": building}

    async def _ensure_unique_code(self, code: str, exclude_id: str | None = None) -> None:
        existing = await self.store.find_one(self.collection, [FieldFilter("codigo", "==", code)])
        if existing is not None and existing["id"] != exclude_id:
            raise DuplicateValueException("oficina", "codigo", code)

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("estado", OfficeStatus.DISPONIBLE.value)
        data.setdefault("amenidades", [])
        data.setdefault("calificacionPromedio", 0)
        data.setdefault("totalResenas", 0)
        return data

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create an office; a taken codigo raises DuplicateValueException before any write."""
        await self._ensure_unique_code(data["codigo"])
        return await super().create(data)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        if changes.get("codigo") is not None:
            await self._ensure_unique_code(changes["codigo"], exclude_id=entity_id)
        return await super().update(entity_id, changes)

    async def by_code(self, code: str) -> dict[str, Any] | None:
        async def load() -> dict[str, Any] | None:
            found = await self.store.find_one(self.collection, [FieldFilter("codigo", "==", code)])
            return await self._shape(found)

        return await self._read_through(CODE_AXIS.key_for(self.entity, code), load)

    async def by_building(self, building_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(BUILDING_AXIS, building_id)

    async def by_type(self, office_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(TYPE_AXIS, office_type)

    async def by_owner(self, user_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(OWNER_AXIS, user_id)

    async def available(self) -> list[dict[str, Any]]:
        """Active offices in estado disponible."""
        return await self.find_cached(
            self._available_key(),
            [
                FieldFilter("estado", "==", OfficeStatus.DISPONIBLE.value),
                FieldFilter(ACTIVE_FIELD, "==", True),
            ],
        )

    async def by_capacity(self, minimum: int, maximum: int) -> list[dict[str, Any]]:
        """Active offices with minimum <= capacidad <= maximum."""
        return await self.find_cached(
            range_key(self.entity, "capacidad", minimum, maximum),
            [
                FieldFilter("capacidad", ">=", minimum),
                FieldFilter("capacidad", "<=", maximum),
                FieldFilter(ACTIVE_FIELD, "==", True),
            ],
            order_by="capacidad",
        )

    async def by_price(
        self, minimum: float, maximum: float, period: str = "porDia"
    ) -> list[dict[str, Any]]:
        """Active offices whose precios.{period} lies in [minimum, maximum]."""
        if period not in PRICE_PERIODS:
            raise ValidationException(f"Periodo de precio inválido: {period}", field="periodo")
        path = f"precios.{period}"
        return await self.find_cached(
            f"{range_key(self.entity, 'precio', minimum, maximum)}{CACHE_KEY_SEP}{period}",
            [
                FieldFilter(path, ">=", minimum),
                FieldFilter(path, "<=", maximum),
                FieldFilter(ACTIVE_FIELD, "==", True),
            ],
            order_by=path,
        )

    async def change_status(self, entity_id: str, status: str) -> dict[str, Any] | None:
        return await self.update(entity_id, {"estado": status})

    async def update_aggregate_rating(
        self, entity_id: str, average: float, total: int
    ) -> dict[str, Any] | None:
        return await self.update(
            entity_id, {"calificacionPromedio": average, "totalResenas": total}
        )
