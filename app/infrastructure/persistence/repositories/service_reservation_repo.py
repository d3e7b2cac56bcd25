"""Service reservation (reserva de servicio) repository."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import (
    ACTIVE_FIELD,
    COLLECTION_ADDITIONAL_SERVICES,
    COLLECTION_SERVICE_RESERVATIONS,
    PARENT_RESERVATION,
    PARENT_SERVICE,
    PARENT_USER,
)
from app.domain.enums import ServiceReservationStatus
from app.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.state_machines import SERVICE_RESERVATION_TRANSITIONS, check_transition
from app.infrastructure.cache.keys import field_key, range_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.datetime import utc_now_iso

USER_AXIS = Axis("usuarioId", parent=PARENT_USER)
SERVICE_AXIS = Axis("servicioId", parent=PARENT_SERVICE)
RESERVATION_AXIS = Axis("reservaEspacioId", parent=PARENT_RESERVATION)
STATUS_AXIS = Axis("estado")

# Timestamp field written when entering each status.
_STATUS_TIMESTAMPS = {
    ServiceReservationStatus.CONFIRMADO.value: "fechaConfirmacion",
    ServiceReservationStatus.CANCELADO.value: "fechaCancelacion",
    ServiceReservationStatus.COMPLETADO.value: "fechaCompletado",
}


class ServiceReservationRepository(CachedRepository):
    """Reservas de servicio. Hard delete; pending bookings are also keyed per date."""

    collection = COLLECTION_SERVICE_RESERVATIONS
    axes = (USER_AXIS, SERVICE_AXIS, RESERVATION_AXIS, STATUS_AXIS)
    range_axes = ("fechas",)
    filter_map = {
        "fechaDesde": ("fecha", ">="),
        "fechaHasta": ("fecha", "<="),
    }

    def _pending_key(self, day: str) -> str:
        return field_key(self.entity, "pendientes", day)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        if record.get("estado") == ServiceReservationStatus.PENDIENTE.value and record.get("fecha"):
            return {self._pending_key(record["fecha"])}
        return set()

    async def _expand(self, record: dict[str, Any]) -> dict[str, Any]:
        service = await self._summary(
            COLLECTION_ADDITIONAL_SERVICES, record.get("servicioId"), ("nombre", "tipo", "precio")
        )
        return {**record, "servicio": service}

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Book an active service; precioTotal defaults to precio x cantidad."""
        service_id = data["servicioId"]
        service = await self.store.get(COLLECTION_ADDITIONAL_SERVICES, service_id)
        if service is None:
            raise ResourceNotFoundException("servicio adicional", service_id)
        if service.get(ACTIVE_FIELD) is False:
            raise ConflictException(
                "El servicio adicional no está activo",
                {"servicioId": service_id},
                field="servicioId",
            )
        if data.get("horaInicio") and data.get("horaFin") and data["horaFin"] <= data["horaInicio"]:
            raise ValidationException(
                "La hora de fin debe ser posterior a la hora de inicio", field="horaFin"
            )
        doc = dict(data)
        doc.setdefault("cantidad", 1)
        if doc.get("precioTotal") is None:
            doc["precioTotal"] = round(float(service.get("precio") or 0) * doc["cantidad"], 2)
        doc["estado"] = ServiceReservationStatus.PENDIENTE.value
        return await super().create(doc)

    async def by_user(self, user_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(USER_AXIS, user_id)

    async def by_service(self, service_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(SERVICE_AXIS, service_id)

    async def by_space_reservation(self, reservation_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(RESERVATION_AXIS, reservation_id)

    async def by_status(self, status: str) -> list[dict[str, Any]]:
        return await self.by_axis(STATUS_AXIS, status)

    async def by_date_range(self, start: str, end: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            range_key(self.entity, "fechas", start, end),
            [FieldFilter("fecha", ">=", start), FieldFilter("fecha", "<=", end)],
            order_by="fecha",
        )

    async def pending_for_date(self, day: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            self._pending_key(day),
            [
                FieldFilter("fecha", "==", day),
                FieldFilter("estado", "==", ServiceReservationStatus.PENDIENTE.value),
            ],
        )

    async def change_status(
        self, entity_id: str, status: str, extra: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Apply a status transition (stamping its date); illegal ones raise before writing."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        check_transition(
            SERVICE_RESERVATION_TRANSITIONS, "reserva de servicio", current.get("estado"), status
        )
        changes: dict[str, Any] = {"estado": status, **(extra or {})}
        if status in _STATUS_TIMESTAMPS:
            changes[_STATUS_TIMESTAMPS[status]] = utc_now_iso()
        return await self.update(entity_id, changes)

    async def confirm(self, entity_id: str) -> dict[str, Any] | None:
        return await self.change_status(entity_id, ServiceReservationStatus.CONFIRMADO.value)

    async def cancel(self, entity_id: str, reason: str | None = None) -> dict[str, Any] | None:
        return await self.change_status(
            entity_id,
            ServiceReservationStatus.CANCELADO.value,
            {"motivoCancelacion": reason},
        )

    async def complete(self, entity_id: str) -> dict[str, Any] | None:
        return await self.change_status(entity_id, ServiceReservationStatus.COMPLETADO.value)

    async def link_payment(self, entity_id: str, payment_id: str) -> dict[str, Any] | None:
        return await self.update(entity_id, {"pagoId": payment_id})
