"""Availability (disponibilidad) repository: one slot calendar per entity and day."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import COLLECTION_AVAILABILITY
from app.domain.exceptions import ConflictException, ValidationException
from app.domain.rules import minutes_of_day, slots_overlap
from app.infrastructure.cache.keys import ref_key
from app.infrastructure.persistence.repositories.base import CachedRepository
from app.shared.utils.datetime import parse_date

# Longest span crear-diaria accepts in one call
MAX_DAILY_SPAN_DAYS = 366

SLOT_DEFAULTS = {"disponible": True, "bloqueado": False, "reservaId": None, "motivo": None}


def _label(slot: dict[str, Any]) -> str:
    return f"{slot['horaInicio']}-{slot['horaFin']}"


def normalize_slots(slots: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Fill slot defaults and sort by start; empty or overlapping slots raise 400."""
    normalized = sorted(
        ({**SLOT_DEFAULTS, **slot} for slot in slots),
        key=lambda s: minutes_of_day(s["horaInicio"]),
    )
    for slot in normalized:
        if minutes_of_day(slot["horaInicio"]) >= minutes_of_day(slot["horaFin"]):
            raise ValidationException(
                "La hora de fin de la franja debe ser posterior a la de inicio",
                field="franjas",
                details={"franja": _label(slot)},
            )
    for previous, current in zip(normalized, normalized[1:]):
        if slots_overlap(
            previous["horaInicio"], previous["horaFin"], current["horaInicio"], current["horaFin"]
        ):
            raise ValidationException(
                "Las franjas de un mismo día no pueden solaparse",
                field="franjas",
                details={"franjas": [_label(previous), _label(current)]},
            )
    return normalized


class AvailabilityRepository(CachedRepository):
    """Disponibilidades. Hard delete; one document per (tipoEntidad, entidadId, fecha).

    The whole calendar of an entity is cached under disponibilidades:entidad:{tipo}:{id};
    day, range and free-slot reads filter that calendar.
    """

    collection = COLLECTION_AVAILABILITY
    default_order = "fecha"
    filter_map = {
        "fechaDesde": ("fecha", ">="),
        "fechaHasta": ("fecha", "<="),
    }

    def _calendar_key(self, entity_type: str, entity_id: str) -> str:
        return ref_key(self.entity, entity_type, entity_id)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        if record.get("tipoEntidad") and record.get("entidadId"):
            return {self._calendar_key(record["tipoEntidad"], record["entidadId"])}
        return set()

    def _day_filters(self, entity_type: str, entity_id: str, day: str) -> list[FieldFilter]:
        return [
            FieldFilter("tipoEntidad", "==", entity_type),
            FieldFilter("entidadId", "==", entity_id),
            FieldFilter("fecha", "==", day),
        ]

    async def _day_document(
        self, entity_type: str, entity_id: str, day: str
    ) -> dict[str, Any] | None:
        return await self.store.find_one(
            self.collection, self._day_filters(entity_type, entity_id, day)
        )

    async def _ensure_free_day(
        self, entity_type: str, entity_id: str, day: str, exclude_id: str | None = None
    ) -> None:
        existing = await self._day_document(entity_type, entity_id, day)
        if existing is not None and existing["id"] != exclude_id:
            raise ConflictException(
                "Ya existe disponibilidad para esa entidad en esa fecha",
                {"disponibilidad_existente": existing["id"]},
                field="fecha",
            )

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data["franjas"] = normalize_slots(data.get("franjas") or [])
        return data

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a day calendar; a second one for the same entity and day conflicts."""
        await self._ensure_free_day(data["tipoEntidad"], data["entidadId"], data["fecha"])
        return await super().create(data)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        if "franjas" in changes:
            changes = {**changes, "franjas": normalize_slots(changes["franjas"] or [])}
        if {"tipoEntidad", "entidadId", "fecha"} & changes.keys():
            current = await self.store.get(self.collection, entity_id)
            if current is None:
                return None
            merged = {**current, **changes}
            await self._ensure_free_day(
                merged["tipoEntidad"], merged["entidadId"], merged["fecha"], exclude_id=entity_id
            )
        return await super().update(entity_id, changes)

    # ------------------------------------------------------------------ reads

    async def by_entity(self, entity_type: str, entity_id: str) -> list[dict[str, Any]]:
        """Every day calendar of one entity, oldest first."""
        return await self.find_cached(
            self._calendar_key(entity_type, entity_id),
            [
                FieldFilter("tipoEntidad", "==", entity_type),
                FieldFilter("entidadId", "==", entity_id),
            ],
            order_by="fecha",
        )

    async def by_date(self, entity_type: str, entity_id: str, day: str) -> dict[str, Any] | None:
        calendar = await self.by_entity(entity_type, entity_id)
        return next((doc for doc in calendar if doc.get("fecha") == day), None)

    async def in_range(
        self, entity_type: str, entity_id: str, start: str, end: str
    ) -> list[dict[str, Any]]:
        calendar = await self.by_entity(entity_type, entity_id)
        return [doc for doc in calendar if start <= doc.get("fecha", "") <= end]

    async def free_slots(self, entity_type: str, entity_id: str, day: str) -> list[dict[str, Any]]:
        """Slots of the day that are neither reserved nor blocked (empty when no calendar)."""
        calendar = await self.by_date(entity_type, entity_id, day)
        if calendar is None:
            return []
        return [
            slot
            for slot in calendar.get("franjas") or []
            if slot.get("disponible") and not slot.get("bloqueado")
        ]

    # ------------------------------------------------------------------ slots

    def _overlapping(
        self, slots: list[dict[str, Any]], start: str, end: str
    ) -> list[int]:
        return [
            i
            for i, slot in enumerate(slots)
            if slots_overlap(slot["horaInicio"], slot["horaFin"], start, end)
        ]

    async def reserve_slot(
        self,
        entity_type: str,
        entity_id: str,
        day: str,
        start: str,
        end: str,
        reservation_id: str,
    ) -> dict[str, Any] | None:
        """Mark every slot overlapping [start, end) as taken by reservation_id.

        Returns None when the entity has no calendar that day. A window with no
        slots raises ValidationException; a reserved or blocked slot in the
        window raises ConflictException and nothing is written.
        """
        calendar = await self._day_document(entity_type, entity_id, day)
        if calendar is None:
            return None
        slots = list(calendar.get("franjas") or [])
        hits = self._overlapping(slots, start, end)
        if not hits:
            raise ValidationException("No hay franjas en ese horario", field="horaInicio")
        taken = [
            slots[i]
            for i in hits
            if not slots[i].get("disponible") or slots[i].get("bloqueado")
        ]
        if taken:
            raise ConflictException(
                "La franja ya está reservada o bloqueada",
                {"franjas": [_label(slot) for slot in taken]},
                field="horaInicio",
            )
        for i in hits:
            slots[i] = {**slots[i], "disponible": False, "reservaId": reservation_id}
        return await self.update(calendar["id"], {"franjas": slots})

    async def release_slot(
        self,
        entity_type: str,
        entity_id: str,
        day: str,
        start: str,
        end: str,
        reservation_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Free reserved slots overlapping [start, end); blocked slots stay blocked.

        With reservation_id only that reservation's slots are freed.
        """
        calendar = await self._day_document(entity_type, entity_id, day)
        if calendar is None:
            return None
        slots = list(calendar.get("franjas") or [])
        for i in self._overlapping(slots, start, end):
            slot = slots[i]
            if slot.get("bloqueado"):
                continue
            if reservation_id is not None and slot.get("reservaId") != reservation_id:
                continue
            slots[i] = {**slot, "disponible": True, "reservaId": None}
        return await self.update(calendar["id"], {"franjas": slots})

    async def block_slot(
        self,
        entity_type: str,
        entity_id: str,
        day: str,
        start: str,
        end: str,
        reason: str | None = None,
    ) -> dict[str, Any]:
        """Block the window: overlapping slots are blocked, or a blocked slot is added.

        Creates the day calendar when missing. Blocking over a reserved slot conflicts.
        """
        calendar = await self._day_document(entity_type, entity_id, day)
        if calendar is None:
            calendar = await super().create(
                {"tipoEntidad": entity_type, "entidadId": entity_id, "fecha": day}
            )
        slots = list(calendar.get("franjas") or [])
        hits = self._overlapping(slots, start, end)
        reserved = [slots[i] for i in hits if slots[i].get("reservaId")]
        if reserved:
            raise ConflictException(
                "No se puede bloquear una franja reservada",
                {"franjas": [_label(slot) for slot in reserved]},
                field="horaInicio",
            )
        for i in hits:
            slots[i] = {**slots[i], "disponible": False, "bloqueado": True, "motivo": reason}
        if not hits:
            slots.append(
                {
                    **SLOT_DEFAULTS,
                    "horaInicio": start,
                    "horaFin": end,
                    "disponible": False,
                    "bloqueado": True,
                    "motivo": reason,
                }
            )
        return await self.update(calendar["id"], {"franjas": slots})

    async def unblock_slot(
        self, entity_type: str, entity_id: str, day: str, start: str, end: str
    ) -> dict[str, Any] | None:
        """Unblock blocked slots overlapping [start, end); none blocked raises 400."""
        calendar = await self._day_document(entity_type, entity_id, day)
        if calendar is None:
            return None
        slots = list(calendar.get("franjas") or [])
        hits = [i for i in self._overlapping(slots, start, end) if slots[i].get("bloqueado")]
        if not hits:
            raise ValidationException(
                "No hay franjas bloqueadas en ese horario", field="horaInicio"
            )
        for i in hits:
            slots[i] = {**slots[i], "disponible": True, "bloqueado": False, "motivo": None}
        return await self.update(calendar["id"], {"franjas": slots})

    async def create_daily(
        self,
        entity_type: str,
        entity_id: str,
        start: str,
        end: str,
        base_slots: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """One calendar per day in [start, end] with base_slots; days that exist are skipped.

        Returns {"creadas": [...], "omitidas": [fechas]}.
        """
        first, last = parse_date(start), parse_date(end)
        if last < first:
            raise ValidationException(
                "La fecha de fin debe ser igual o posterior a la fecha de inicio",
                field="fechaFin",
            )
        if (last - first).days >= MAX_DAILY_SPAN_DAYS:
            raise ValidationException(
                f"El rango no puede superar {MAX_DAILY_SPAN_DAYS} días",
                field="fechaFin",
                details={"maximo": MAX_DAILY_SPAN_DAYS},
            )
        slots = normalize_slots(base_slots)
        existing = await self.store.find(
            self.collection,
            [
                FieldFilter("tipoEntidad", "==", entity_type),
                FieldFilter("entidadId", "==", entity_id),
                FieldFilter("fecha", ">=", first.isoformat()),
                FieldFilter("fecha", "<=", last.isoformat()),
            ],
        )
        taken = {doc.get("fecha") for doc in existing}
        created: list[dict[str, Any]] = []
        skipped: list[str] = []
        day = first
        while day <= last:
            iso = day.isoformat()
            if iso in taken:
                skipped.append(iso)
            else:
                created.append(
                    await super().create(
                        {
                            "tipoEntidad": entity_type,
                            "entidadId": entity_id,
                            "fecha": iso,
                            "franjas": slots,
                        }
                    )
                )
            day += timedelta(days=1)
        return {"creadas": created, "omitidas": skipped}
