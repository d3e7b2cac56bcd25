"""Reservation (reserva) repository: double-booking guard, status machine, client statistics."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import (
    COLLECTION_RESERVATIONS,
    COLLECTION_USERS,
    PARENT_CLIENT,
    PARENT_USER,
)
from app.domain.enums import ReservationStatus
from app.domain.exceptions import ConflictException, ValidationException
from app.domain.state_machines import RESERVATION_TRANSITIONS, check_transition
from app.infrastructure.cache.keys import field_key, range_key, ref_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.datetime import utc_now_iso

USER_AXIS = Axis("usuarioId", parent=PARENT_USER)
CLIENT_AXIS = Axis("clienteId", parent=PARENT_CLIENT)
STATUS_AXIS = Axis("estado")
RECURRING_AXIS = Axis("esRecurrente")

# Statuses that hold the reserved entity.
BLOCKING_STATUSES = (ReservationStatus.PENDIENTE.value, ReservationStatus.CONFIRMADA.value)


def _hours_overlap(a: dict[str, Any], b: dict[str, Any]) -> bool:
    """Time-of-day overlap; a reservation without hours blocks the whole day."""
    if not (a.get("horaInicio") and a.get("horaFin") and b.get("horaInicio") and b.get("horaFin")):
        return True
    return a["horaInicio"] < b["horaFin"] and b["horaInicio"] < a["horaFin"]


class ReservationRepository(CachedRepository):
    """Reservas. Hard delete; entity key is reservas:entidad:{tipo}:{id}."""

    collection = COLLECTION_RESERVATIONS
    axes = (USER_AXIS, CLIENT_AXIS, STATUS_AXIS, RECURRING_AXIS)
    range_axes = ("fechas",)
    filter_map = {
        "entidadTipo": ("entidadReservada.tipo", "=="),
        "entidadId": ("entidadReservada.id", "=="),
        "fechaDesde": ("fechaInicio", ">="),
        "fechaHasta": ("fechaInicio", "<="),
    }

    def _entity_key(self, entity_type: str, entity_id: str) -> str:
        return ref_key(self.entity, entity_type, entity_id)

    def _stats_key(self, client_id: str) -> str:
        return field_key(self.entity, "estadisticas", client_id)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        keys = set()
        target = record.get("entidadReservada") or {}
        if target.get("tipo") and target.get("id"):
            keys.add(self._entity_key(target["tipo"], target["id"]))
        if record.get("clienteId"):
            keys.add(self._stats_key(record["clienteId"]))
        return keys

    async def _expand(self, record: dict[str, Any]) -> dict[str, Any]:
        client = await self._summary(COLLECTION_USERS, record.get("clienteId"), ("nombre", "email"))
        return {**record, "cliente": client}

    async def _check_availability(self, doc: dict[str, Any], exclude_id: str | None = None) -> None:
        """Raise ConflictException if a pending/confirmed reservation of the same entity overlaps."""
        if doc["fechaFin"] < doc["fechaInicio"]:
            raise ValidationException(
                "La fecha de fin debe ser igual o posterior a la fecha de inicio",
                field="fechaFin",
            )
        target = doc["entidadReservada"]
        candidates = await self.store.find(
            self.collection,
            [
                FieldFilter("entidadReservada.tipo", "==", target["tipo"]),
                FieldFilter("entidadReservada.id", "==", target["id"]),
                FieldFilter("estado", "in", list(BLOCKING_STATUSES)),
                FieldFilter("fechaInicio", "<=", doc["fechaFin"]),
            ],
        )
        for other in candidates:
            if other["id"] == exclude_id or other.get("fechaFin", "") < doc["fechaInicio"]:
                continue
            if _hours_overlap(doc, other):
                raise ConflictException(
                    "La entidad ya está reservada en ese horario",
                    {"reserva_existente": other["id"]},
                    field="fechaInicio",
                )

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("estado", ReservationStatus.PENDIENTE.value)
        data.setdefault("esRecurrente", False)
        data.setdefault("cantidadPersonas", 1)
        data.setdefault("serviciosAdicionales", [])
        return data

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a reservation; overlapping a pending/confirmed one for the same entity conflicts."""
        await self._check_availability(data)
        return await super().create(data)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        schedule_fields = {"fechaInicio", "fechaFin", "horaInicio", "horaFin", "entidadReservada"}
        if schedule_fields & changes.keys():
            current = await self.store.get(self.collection, entity_id)
            if current is None:
                return None
            merged = {**current, **changes}
            if merged.get("estado") in BLOCKING_STATUSES:
                await self._check_availability(merged, exclude_id=entity_id)
        return await super().update(entity_id, changes)

    async def by_user(self, user_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            USER_AXIS.key_for(self.entity, user_id),
            [FieldFilter("usuarioId", "==", user_id)],
            order_by="fechaInicio",
            descending=True,
        )

    async def by_client(self, client_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            CLIENT_AXIS.key_for(self.entity, client_id),
            [FieldFilter("clienteId", "==", client_id)],
            order_by="fechaInicio",
            descending=True,
        )

    async def by_entity(self, entity_type: str, entity_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            self._entity_key(entity_type, entity_id),
            [
                FieldFilter("entidadReservada.tipo", "==", entity_type),
                FieldFilter("entidadReservada.id", "==", entity_id),
            ],
            order_by="fechaInicio",
        )

    async def by_status(self, status: str) -> list[dict[str, Any]]:
        return await self.by_axis(STATUS_AXIS, status)

    async def pending(self) -> list[dict[str, Any]]:
        return await self.by_status(ReservationStatus.PENDIENTE.value)

    async def recurring(self) -> list[dict[str, Any]]:
        return await self.by_axis(RECURRING_AXIS, True)

    async def by_date_range(self, start: str, end: str) -> list[dict[str, Any]]:
        """Reservations whose [fechaInicio, fechaFin] intersects [start, end]."""
        return await self.find_cached(
            range_key(self.entity, "fechas", start, end),
            [FieldFilter("fechaInicio", "<=", end), FieldFilter("fechaFin", ">=", start)],
        )

    async def client_statistics(self, client_id: str) -> dict[str, Any]:
        """Counts per estado and amounts for one client."""

        async def load() -> dict[str, Any]:
            rows = await self.store.find(
                self.collection, [FieldFilter("clienteId", "==", client_id)]
            )
            by_status = {status: 0 for status in ReservationStatus.values()}
            total_amount = 0.0
            paid_amount = 0.0
            for row in rows:
                status = row.get("estado") or ReservationStatus.PENDIENTE.value
                by_status[status] = by_status.get(status, 0) + 1
                total_amount += float(row.get("precioTotal") or 0)
                paid_amount += float(row.get("precioFinalPagado") or 0)
            return {
                "clienteId": client_id,
                "total": len(rows),
                "porEstado": by_status,
                "montoTotal": round(total_amount, 2),
                "montoPagado": round(paid_amount, 2),
            }

        return await self._read_through(self._stats_key(client_id), load)

    async def change_status(self, entity_id: str, status: str) -> dict[str, Any] | None:
        """Apply a status transition; an illegal one raises before anything is written."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        check_transition(RESERVATION_TRANSITIONS, "reserva", current.get("estado"), status)
        return await super().update(entity_id, {"estado": status})

    async def approve(
        self, entity_id: str, approver_id: str, notes: str | None = None
    ) -> dict[str, Any] | None:
        """Record the approver and confirm the reservation."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        check_transition(
            RESERVATION_TRANSITIONS,
            "reserva",
            current.get("estado"),
            ReservationStatus.CONFIRMADA.value,
        )
        approver = {
            **(current.get("aprobador") or {}),
            "usuarioId": approver_id,
            "fechaAprobacion": utc_now_iso(),
            "notas": notes,
        }
        return await super().update(
            entity_id,
            {"aprobador": approver, "estado": ReservationStatus.CONFIRMADA.value},
        )

    async def attach_payment(
        self, entity_id: str, payment_id: str, amount_paid: float | None = None
    ) -> dict[str, Any] | None:
        changes: dict[str, Any] = {"pagoId": payment_id}
        if amount_paid is not None:
            changes["precioFinalPagado"] = amount_paid
        return await super().update(entity_id, changes)
