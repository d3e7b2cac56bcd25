"""Additional service (servicio adicional) repository."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import (
    ACTIVE_FIELD,
    COLLECTION_ADDITIONAL_SERVICES,
    PARENT_PROVIDER,
    PARENT_SPACE,
)
from app.infrastructure.cache.keys import range_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository

TYPE_AXIS = Axis("tipo")
UNIT_AXIS = Axis("unidadPrecio")
PROVIDER_AXIS = Axis("proveedorId", parent=PARENT_PROVIDER)
SPACE_AXIS = Axis("espaciosDisponibles", parent=PARENT_SPACE, many=True)
APPROVAL_AXIS = Axis("requiereAprobacion")


class AdditionalServiceRepository(CachedRepository):
    """Servicios adicionales. Soft delete; offered in a list of spaces."""

    collection = COLLECTION_ADDITIONAL_SERVICES
    soft_deletable = True
    axes = (TYPE_AXIS, UNIT_AXIS, PROVIDER_AXIS, SPACE_AXIS, APPROVAL_AXIS)
    range_axes = ("precio",)
    filter_map = {
        "precioMin": ("precio", ">="),
        "precioMax": ("precio", "<="),
        "espacioId": ("espaciosDisponibles", "array-contains"),
    }

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("requiereAprobacion", False)
        data.setdefault("espaciosDisponibles", [])
        data.setdefault("tiempoAnticipacion", 0)
        return data

    async def by_type(self, service_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(TYPE_AXIS, service_type)

    async def by_provider(self, provider_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(PROVIDER_AXIS, provider_id)

    async def by_space(self, space_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(SPACE_AXIS, space_id)

    async def requiring_approval(self) -> list[dict[str, Any]]:
        return await self.by_axis(APPROVAL_AXIS, True)

    async def by_price(self, minimum: float, maximum: float) -> list[dict[str, Any]]:
        return await self.find_cached(
            range_key(self.entity, "precio", minimum, maximum),
            [
                FieldFilter("precio", ">=", minimum),
                FieldFilter("precio", "<=", maximum),
                FieldFilter(ACTIVE_FIELD, "==", True),
            ],
            order_by="precio",
        )

    async def add_space(self, entity_id: str, space_id: str) -> dict[str, Any] | None:
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        spaces = list(current.get("espaciosDisponibles") or [])
        if space_id not in spaces:
            spaces.append(space_id)
        return await self.update(entity_id, {"espaciosDisponibles": spaces})

    async def remove_space(self, entity_id: str, space_id: str) -> dict[str, Any] | None:
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        spaces = [s for s in current.get("espaciosDisponibles") or [] if s != space_id]
        return await self.update(entity_id, {"espaciosDisponibles": spaces})
