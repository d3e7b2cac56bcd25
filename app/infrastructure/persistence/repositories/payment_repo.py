"""Payment (pago) repository."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import COLLECTION_PAYMENTS, PARENT_USER
from app.domain.enums import PaymentStatus
from app.domain.state_machines import PAYMENT_TRANSITIONS, check_transition
from app.infrastructure.cache.keys import range_key, ref_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.datetime import today_iso

USER_AXIS = Axis("usuarioId", parent=PARENT_USER)
STATUS_AXIS = Axis("estado")
METHOD_AXIS = Axis("metodo")
CONCEPT_AXIS = Axis("concepto")

DEFAULT_CURRENCY = "COP"


class PaymentRepository(CachedRepository):
    """Pagos. Hard delete; entity key is pagos:entidad:{tipo}:{id}."""

    collection = COLLECTION_PAYMENTS
    axes = (USER_AXIS, STATUS_AXIS, METHOD_AXIS, CONCEPT_AXIS)
    range_axes = ("fechas", "montos")
    filter_map = {
        "montoMin": ("monto", ">="),
        "montoMax": ("monto", "<="),
        "fechaDesde": ("fecha", ">="),
        "fechaHasta": ("fecha", "<="),
        "entidadTipo": ("entidadRelacionada.tipo", "=="),
        "entidadId": ("entidadRelacionada.id", "=="),
    }

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        related = record.get("entidadRelacionada") or {}
        if related.get("tipo") and related.get("id"):
            return {ref_key(self.entity, related["tipo"], related["id"])}
        return set()

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("estado", PaymentStatus.PENDIENTE.value)
        data.setdefault("moneda", DEFAULT_CURRENCY)
        data.setdefault("fecha", today_iso())
        return data

    async def by_user(self, user_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            USER_AXIS.key_for(self.entity, user_id),
            [FieldFilter("usuarioId", "==", user_id)],
            order_by="fecha",
            descending=True,
        )

    async def by_status(self, status: str) -> list[dict[str, Any]]:
        return await self.by_axis(STATUS_AXIS, status)

    async def by_entity(self, entity_type: str, entity_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            ref_key(self.entity, entity_type, entity_id),
            [
                FieldFilter("entidadRelacionada.tipo", "==", entity_type),
                FieldFilter("entidadRelacionada.id", "==", entity_id),
            ],
        )

    async def by_amount(self, minimum: float, maximum: float) -> list[dict[str, Any]]:
        return await self.find_cached(
            range_key(self.entity, "montos", minimum, maximum),
            [FieldFilter("monto", ">=", minimum), FieldFilter("monto", "<=", maximum)],
            order_by="monto",
        )

    async def by_date_range(self, start: str, end: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            range_key(self.entity, "fechas", start, end),
            [FieldFilter("fecha", ">=", start), FieldFilter("fecha", "<=", end)],
            order_by="fecha",
        )

    async def change_status(self, entity_id: str, status: str) -> dict[str, Any] | None:
        """pendiente -> completado|fallido, completado -> reembolsado; others raise."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        check_transition(PAYMENT_TRANSITIONS, "pago", current.get("estado"), status)
        return await self.update(entity_id, {"estado": status})
