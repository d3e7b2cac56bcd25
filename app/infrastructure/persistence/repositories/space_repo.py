"""Space (espacio) repository."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import (
    ACTIVE_FIELD,
    COLLECTION_BUILDINGS,
    COLLECTION_SPACES,
    PARENT_BUILDING,
    PARENT_COMPANY,
    PARENT_USER,
)
from app.domain.enums import SpaceStatus
from app.infrastructure.cache.keys import field_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository

BUILDING_AXIS = Axis("edificioId", parent=PARENT_BUILDING)
OWNER_AXIS = Axis("usuarioId", parent=PARENT_USER)
COMPANY_AXIS = Axis("empresaInmobiliariaId", parent=PARENT_COMPANY)
TYPE_AXIS = Axis("tipo")
STATUS_AXIS = Axis("estado")


def _is_available(record: dict[str, Any]) -> bool:
    return record.get("estado") == SpaceStatus.DISPONIBLE.value and record.get(ACTIVE_FIELD) is True


class SpaceRepository(CachedRepository):
    """Espacios. Soft delete; building summary embedded on reads."""

    collection = COLLECTION_SPACES
    soft_deletable = True
    axes = (BUILDING_AXIS, OWNER_AXIS, COMPANY_AXIS, TYPE_AXIS, STATUS_AXIS)
    filter_map = {
        "capacidadMin": ("capacidad", ">="),
        "capacidadMax": ("capacidad", "<="),
        "precioHoraMax": ("precioPorHora", "<="),
        "amenidad": ("amenidades", "array-contains"),
    }

    def _available_key(self) -> str:
        return field_key(self.entity, "disponibles", True)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        return {self._available_key()} if _is_available(record) else set()

    async def _expand(self, record: dict[str, Any]) -> dict[str, Any]:
        building = await self._summary(
            COLLECTION_BUILDINGS, record.get("edificioId"), ("nombre", "direccion")
        )
        return {**record, "edificio": building}

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("estado", SpaceStatus.DISPONIBLE.value)
        data.setdefault("amenidades", [])
        data.setdefault("calificacionPromedio", 0)
        data.setdefault("totalResenas", 0)
        return data

    async def by_building(self, building_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(BUILDING_AXIS, building_id)

    async def by_type(self, space_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(TYPE_AXIS, space_type)

    async def by_owner(self, user_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(OWNER_AXIS, user_id)

    async def by_company(self, company_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(COMPANY_AXIS, company_id)

    async def available(self) -> list[dict[str, Any]]:
        """Active spaces in estado disponible."""
        return await self.find_cached(
            self._available_key(),
            [
                FieldFilter("estado", "==", SpaceStatus.DISPONIBLE.value),
                FieldFilter(ACTIVE_FIELD, "==", True),
            ],
        )

    async def change_status(self, entity_id: str, status: str) -> dict[str, Any] | None:
        return await self.update(entity_id, {"estado": status})

    async def update_aggregate_rating(
        self, entity_id: str, average: float, total: int
    ) -> dict[str, Any] | None:
        return await self.update(
            entity_id, {"calificacionPromedio": average, "totalResenas": total}
        )
