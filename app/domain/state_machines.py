"""Status transition tables for reservations, service bookings, reviews, payments and invoices.

Each table maps a current status to the set of statuses it may move to.
Statuses missing from the table, or mapped to an empty set, are terminal.
check_transition raises before anything is written, so a rejected
transition never mutates stored state.
"""

from collections.abc import Mapping

from app.domain.enums import (
    InvoiceStatus,
    PaymentStatus,
    ReservationStatus,
    ReviewStatus,
    ServiceReservationStatus,
)
from app.domain.exceptions import InvalidStateException

Transitions = Mapping[str, frozenset[str]]

RESERVATION_TRANSITIONS: Transitions = {
    ReservationStatus.PENDIENTE.value: frozenset(
        {ReservationStatus.CONFIRMADA.value, ReservationStatus.CANCELADA.value}
    ),
    ReservationStatus.CONFIRMADA.value: frozenset(
        {
            ReservationStatus.COMPLETADA.value,
            ReservationStatus.CANCELADA.value,
            ReservationStatus.NO_ASISTIO.value,
        }
    ),
}

SERVICE_RESERVATION_TRANSITIONS: Transitions = {
    ServiceReservationStatus.PENDIENTE.value: frozenset(
        {ServiceReservationStatus.CONFIRMADO.value, ServiceReservationStatus.CANCELADO.value}
    ),
    ServiceReservationStatus.CONFIRMADO.value: frozenset(
        {ServiceReservationStatus.COMPLETADO.value, ServiceReservationStatus.CANCELADO.value}
    ),
}

REVIEW_MODERATION_TRANSITIONS: Transitions = {
    ReviewStatus.PENDIENTE.value: frozenset(
        {ReviewStatus.APROBADA.value, ReviewStatus.RECHAZADA.value}
    ),
}

PAYMENT_TRANSITIONS: Transitions = {
    PaymentStatus.PENDIENTE.value: frozenset(
        {PaymentStatus.COMPLETADO.value, PaymentStatus.FALLIDO.value}
    ),
    PaymentStatus.COMPLETADO.value: frozenset({PaymentStatus.REEMBOLSADO.value}),
}

INVOICE_TRANSITIONS: Transitions = {
    InvoiceStatus.PENDIENTE.value: frozenset(
        {
            InvoiceStatus.PAGADA.value,
            InvoiceStatus.VENCIDA.value,
            InvoiceStatus.CANCELADA.value,
        }
    ),
    InvoiceStatus.VENCIDA.value: frozenset(
        {InvoiceStatus.PAGADA.value, InvoiceStatus.CANCELADA.value}
    ),
}


def allowed_transitions(table: Transitions, current: str) -> list[str]:
    """Return the sorted statuses reachable from current (empty if terminal)."""
    return sorted(table.get(current, frozenset()))


def can_transition(table: Transitions, current: str, requested: str) -> bool:
    """Return True if requested is reachable from current in one step."""
    return requested in table.get(current, frozenset())


def check_transition(
    table: Transitions, resource_type: str, current: str, requested: str
) -> None:
    """Raise InvalidStateException unless current -> requested is allowed."""
    if not can_transition(table, current, requested):
        raise InvalidStateException(
            resource_type,
            current,
            requested,
            allowed_transitions(table, current),
        )
