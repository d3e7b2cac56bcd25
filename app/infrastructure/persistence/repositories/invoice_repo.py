"""Invoice (factura) repository: numbering, totals, status machine and billing statistics."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import COLLECTION_INVOICES, COLLECTION_PAYMENTS, PARENT_USER
from app.domain.enums import InvoiceStatus
from app.domain.exceptions import (
    DuplicateValueException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.rules import invoice_totals
from app.domain.state_machines import INVOICE_TRANSITIONS, allowed_transitions, check_transition
from app.infrastructure.cache.keys import field_key, range_key, range_prefix, ref_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.datetime import today_iso
from app.shared.utils.generators import generate_cuid

USER_AXIS = Axis("usuarioId", parent=PARENT_USER)
STATUS_AXIS = Axis("estado")
NUMBER_AXIS = Axis("numeroFactura", name="numero")

ISSUER_FAMILY = "emisor"
OVERDUE_SEGMENT = "vencidas"
STATS_SEGMENT = "estadisticas"

# Statuses that still accept payments
OPEN_STATUSES = (InvoiceStatus.PENDIENTE.value, InvoiceStatus.VENCIDA.value)


def new_invoice_number(day: str) -> str:
    """FAC-YYYYMMDD-XXXXXXXX."""
    return f"FAC-{day.replace('-', '')}-{generate_cuid()[-8:].upper()}"


class InvoiceRepository(CachedRepository):
    """Facturas. Hard delete; issuer key is facturas:emisor:{tipoEmisor}:{emisorId}.

    Totals are always computed from conceptos; client-sent totals are ignored.
    """

    collection = COLLECTION_INVOICES
    axes = (USER_AXIS, STATUS_AXIS, NUMBER_AXIS)
    range_axes = ("fechas", "montos", STATS_SEGMENT)
    default_order = "fechaEmision"
    filter_map = {
        "totalMin": ("total", ">="),
        "totalMax": ("total", "<="),
        "fechaDesde": ("fechaEmision", ">="),
        "fechaHasta": ("fechaEmision", "<="),
    }

    def _issuer_key(self, issuer_type: str, issuer_id: str) -> str:
        return ref_key(self.entity, issuer_type, issuer_id, family=ISSUER_FAMILY)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        if record.get("tipoEmisor") and record.get("emisorId"):
            return {self._issuer_key(record["tipoEmisor"], record["emisorId"])}
        return set()

    def _extra_prefixes(
        self, before: dict[str, Any] | None, after: dict[str, Any] | None
    ) -> set[str]:
        return {range_prefix(self.entity, OVERDUE_SEGMENT)}

    async def _ensure_unique_number(self, number: str, exclude_id: str | None = None) -> None:
        existing = await self.store.find_one(
            self.collection, [FieldFilter("numeroFactura", "==", number)]
        )
        if existing is not None and existing["id"] != exclude_id:
            raise DuplicateValueException("factura", "numeroFactura", number)

    @staticmethod
    def _check_dates(doc: dict[str, Any]) -> None:
        if doc.get("fechaVencimiento", "") < doc.get("fechaEmision", ""):
            raise ValidationException(
                "La fecha de vencimiento debe ser igual o posterior a la fecha de emisión",
                field="fechaVencimiento",
            )

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("estado", InvoiceStatus.PENDIENTE.value)
        data.setdefault("fechaEmision", today_iso())
        data.setdefault("pagosIds", [])
        data.update(invoice_totals(data.get("conceptos") or []))
        return data

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create an invoice; numeroFactura is generated when absent and must be unique."""
        data = dict(data)
        data.setdefault("fechaEmision", today_iso())
        if not data.get("numeroFactura"):
            data["numeroFactura"] = new_invoice_number(data["fechaEmision"])
        await self._ensure_unique_number(data["numeroFactura"])
        self._check_dates(data)
        return await super().create(data)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Merge changes; new conceptos recompute the totals."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        changes = dict(changes)
        if "conceptos" in changes:
            changes.update(invoice_totals(changes["conceptos"] or []))
        if changes.get("numeroFactura"):
            await self._ensure_unique_number(changes["numeroFactura"], exclude_id=entity_id)
        self._check_dates({**current, **changes})
        return await super().update(entity_id, changes)

    # ------------------------------------------------------------------ reads

    async def by_number(self, number: str) -> dict[str, Any] | None:
        async def load() -> dict[str, Any] | None:
            found = await self.store.find_one(
                self.collection, [FieldFilter("numeroFactura", "==", number)]
            )
            return await self._shape(found)

        return await self._read_through(NUMBER_AXIS.key_for(self.entity, number), load)

    async def by_user(self, user_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            USER_AXIS.key_for(self.entity, user_id),
            [FieldFilter("usuarioId", "==", user_id)],
            order_by="fechaEmision",
            descending=True,
        )

    async def by_issuer(self, issuer_type: str, issuer_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            self._issuer_key(issuer_type, issuer_id),
            [
                FieldFilter("tipoEmisor", "==", issuer_type),
                FieldFilter("emisorId", "==", issuer_id),
            ],
            order_by="fechaEmision",
            descending=True,
        )

    async def by_status(self, status: str) -> list[dict[str, Any]]:
        return await self.by_axis(STATUS_AXIS, status)

    async def overdue(self, today: str | None = None) -> list[dict[str, Any]]:
        """Pending invoices whose fechaVencimiento is before today, soonest due first."""
        today = today or today_iso()
        return await self.find_cached(
            field_key(self.entity, OVERDUE_SEGMENT, today),
            [
                FieldFilter("estado", "==", InvoiceStatus.PENDIENTE.value),
                FieldFilter("fechaVencimiento", "<", today),
            ],
            order_by="fechaVencimiento",
        )

    async def by_date_range(self, start: str, end: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            range_key(self.entity, "fechas", start, end),
            [FieldFilter("fechaEmision", ">=", start), FieldFilter("fechaEmision", "<=", end)],
            order_by="fechaEmision",
            descending=True,
        )

    async def by_amount(self, minimum: float, maximum: float) -> list[dict[str, Any]]:
        return await self.find_cached(
            range_key(self.entity, "montos", minimum, maximum),
            [FieldFilter("total", ">=", minimum), FieldFilter("total", "<=", maximum)],
            order_by="total",
            descending=True,
        )

    async def statistics(self, start: str, end: str) -> dict[str, Any]:
        """Per-estado cantidad, total and promedio of invoices issued in [start, end]."""

        async def load() -> dict[str, Any]:
            rows = await self.store.find(
                self.collection,
                [FieldFilter("fechaEmision", ">=", start), FieldFilter("fechaEmision", "<=", end)],
            )
            groups: dict[str, dict[str, Any]] = {}
            for row in rows:
                status = row.get("estado") or InvoiceStatus.PENDIENTE.value
                group = groups.setdefault(status, {"cantidad": 0, "total": 0.0})
                group["cantidad"] += 1
                group["total"] += float(row.get("total") or 0)
            by_status = {
                status: {
                    "cantidad": group["cantidad"],
                    "total": round(group["total"], 2),
                    "promedio": round(group["total"] / group["cantidad"], 2),
                }
                for status, group in sorted(groups.items())
            }
            return {
                "fechaInicio": start,
                "fechaFin": end,
                "cantidad": len(rows),
                "montoTotal": round(sum(g["total"] for g in groups.values()), 2),
                "porEstado": by_status,
            }

        return await self._read_through(range_key(self.entity, STATS_SEGMENT, start, end), load)

    # ------------------------------------------------------------------ state

    async def change_status(self, entity_id: str, status: str) -> dict[str, Any] | None:
        """pendiente -> pagada|vencida|cancelada, vencida -> pagada|cancelada; others raise."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        check_transition(INVOICE_TRANSITIONS, "factura", current.get("estado"), status)
        return await super().update(entity_id, {"estado": status})

    async def cancel(self, entity_id: str, reason: str | None = None) -> dict[str, Any] | None:
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        check_transition(
            INVOICE_TRANSITIONS,
            "factura",
            current.get("estado"),
            InvoiceStatus.CANCELADA.value,
        )
        return await super().update(
            entity_id,
            {"estado": InvoiceStatus.CANCELADA.value, "motivoCancelacion": reason},
        )

    async def add_payment(self, entity_id: str, payment_id: str) -> dict[str, Any] | None:
        """Link an existing pago (once); paid or cancelled invoices take no more payments."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        status = current.get("estado")
        if status not in OPEN_STATUSES:
            raise InvalidStateException(
                "factura", status, "agregar pago", allowed_transitions(INVOICE_TRANSITIONS, status)
            )
        if await self.store.get(COLLECTION_PAYMENTS, payment_id) is None:
            raise ResourceNotFoundException("pago", payment_id)
        payments = list(current.get("pagosIds") or [])
        if payment_id in payments:
            return self._public(current)
        return await super().update(entity_id, {"pagosIds": [*payments, payment_id]})

    async def set_pdf_url(self, entity_id: str, url: str) -> dict[str, Any] | None:
        return await super().update(entity_id, {"pdfUrl": url})
