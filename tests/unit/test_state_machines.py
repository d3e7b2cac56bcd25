"""Tests for the status transition tables."""

import pytest

from app.domain.exceptions import InvalidStateException
from app.domain.state_machines import (
    PAYMENT_TRANSITIONS,
    RESERVATION_TRANSITIONS,
    SERVICE_RESERVATION_TRANSITIONS,
    allowed_transitions,
    can_transition,
    check_transition,
)


def test_reservation_allowed_from_pending() -> None:
    assert allowed_transitions(RESERVATION_TRANSITIONS, "pendiente") == ["cancelada", "confirmada"]


@pytest.mark.parametrize("terminal", ["cancelada", "completada", "no_asistio"])
def test_reservation_terminal_states(terminal: str) -> None:
    assert allowed_transitions(RESERVATION_TRANSITIONS, terminal) == []


def test_service_reservation_cannot_skip_confirmation() -> None:
    assert not can_transition(SERVICE_RESERVATION_TRANSITIONS, "pendiente", "completado")
    assert can_transition(SERVICE_RESERVATION_TRANSITIONS, "confirmado", "completado")


def test_payment_refund_only_after_completion() -> None:
    assert can_transition(PAYMENT_TRANSITIONS, "completado", "reembolsado")
    assert not can_transition(PAYMENT_TRANSITIONS, "pendiente", "reembolsado")


def test_check_transition_raises_with_details() -> None:
    with pytest.raises(InvalidStateException) as exc_info:
        check_transition(PAYMENT_TRANSITIONS, "pago", "fallido", "completado")
    assert exc_info.value.details["estado_actual"] == "fallido"
    assert exc_info.value.details["estado_solicitado"] == "completado"
