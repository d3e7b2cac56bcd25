"""Tests for ReservationRepository: double booking, status machine, approval, statistics."""

import pytest

from app.domain.exceptions import ConflictException, InvalidStateException, ValidationException
from app.infrastructure.cache.keys import ref_key
from app.infrastructure.persistence.container import Repositories


def reservation(**overrides) -> dict:
    data = {
        "usuarioId": "user1",
        "clienteId": "client1",
        "entidadReservada": {"tipo": "oficina", "id": "office1"},
        "fechaInicio": "2024-03-10",
        "fechaFin": "2024-03-10",
        "horaInicio": "09:00",
        "horaFin": "12:00",
        "precioTotal": 100.0,
    }
    data.update(overrides)
    return data


async def test_new_reservation_defaults_to_pendiente(repos: Repositories) -> None:
    created = await repos.reservations.create(reservation())
    assert created["estado"] == "pendiente"
    assert created["esRecurrente"] is False
    assert created["cantidadPersonas"] == 1


async def test_overlapping_reservation_is_rejected(repos: Repositories) -> None:
    await repos.reservations.create(reservation())
    with pytest.raises(ConflictException) as exc_info:
        await repos.reservations.create(reservation(horaInicio="11:00", horaFin="13:00"))
    assert exc_info.value.error_code == "CONFLICT"


async def test_adjacent_hours_do_not_overlap(repos: Repositories) -> None:
    await repos.reservations.create(reservation())
    second = await repos.reservations.create(reservation(horaInicio="12:00", horaFin="14:00"))
    assert second["id"]


async def test_cancelled_reservation_frees_the_slot(repos: Repositories) -> None:
    first = await repos.reservations.create(reservation())
    await repos.reservations.change_status(first["id"], "cancelada")
    second = await repos.reservations.create(reservation())
    assert second["id"] != first["id"]


async def test_other_entity_same_hours_is_allowed(repos: Repositories) -> None:
    await repos.reservations.create(reservation())
    other = await repos.reservations.create(
        reservation(entidadReservada={"tipo": "oficina", "id": "office2"})
    )
    assert other["id"]


async def test_end_before_start_is_rejected(repos: Repositories) -> None:
    with pytest.raises(ValidationException):
        await repos.reservations.create(reservation(fechaFin="2024-03-09"))


@pytest.mark.parametrize(
    ("path", "final"),
    [
        (["confirmada", "completada"], "completada"),
        (["confirmada", "no_asistio"], "no_asistio"),
        (["cancelada"], "cancelada"),
    ],
)
async def test_legal_status_paths(repos: Repositories, path: list[str], final: str) -> None:
    created = await repos.reservations.create(reservation())
    for status in path:
        updated = await repos.reservations.change_status(created["id"], status)
    assert updated["estado"] == final


async def test_illegal_transition_raises_and_writes_nothing(repos: Repositories) -> None:
    created = await repos.reservations.create(reservation())
    await repos.reservations.change_status(created["id"], "cancelada")
    with pytest.raises(InvalidStateException) as exc_info:
        await repos.reservations.change_status(created["id"], "confirmada")
    assert exc_info.value.details["estado_actual"] == "cancelada"
    assert exc_info.value.details["transiciones_permitidas"] == []
    stored = await repos.reservations.get_by_id(created["id"])
    assert stored["estado"] == "cancelada"


async def test_change_status_missing_returns_none(repos: Repositories) -> None:
    assert await repos.reservations.change_status("missing", "confirmada") is None


async def test_approve_records_approver_and_confirms(repos: Repositories) -> None:
    created = await repos.reservations.create(reservation())
    approved = await repos.reservations.approve(created["id"], "admin1", "Todo en orden")
    assert approved["estado"] == "confirmada"
    assert approved["aprobador"]["usuarioId"] == "admin1"
    assert approved["aprobador"]["notas"] == "Todo en orden"
    assert approved["aprobador"]["fechaAprobacion"]


async def test_by_entity_is_invalidated_on_create(repos: Repositories, cache) -> None:
    await repos.reservations.create(reservation())
    assert len(await repos.reservations.by_entity("oficina", "office1")) == 1
    assert ref_key("reservas", "oficina", "office1") in cache.keys()
    await repos.reservations.create(reservation(fechaInicio="2024-03-11", fechaFin="2024-03-11"))
    assert ref_key("reservas", "oficina", "office1") not in cache.keys()
    assert len(await repos.reservations.by_entity("oficina", "office1")) == 2


async def test_by_date_range_intersects(repos: Repositories) -> None:
    await repos.reservations.create(reservation(fechaInicio="2024-03-01", fechaFin="2024-03-05"))
    await repos.reservations.create(
        reservation(
            entidadReservada={"tipo": "espacio", "id": "space1"},
            fechaInicio="2024-04-01",
            fechaFin="2024-04-02",
        )
    )
    found = await repos.reservations.by_date_range("2024-03-04", "2024-03-20")
    assert [r["fechaInicio"] for r in found] == ["2024-03-01"]


async def test_client_statistics(repos: Repositories) -> None:
    first = await repos.reservations.create(reservation())
    await repos.reservations.create(
        reservation(fechaInicio="2024-03-11", fechaFin="2024-03-11", precioTotal=50.0)
    )
    await repos.reservations.change_status(first["id"], "confirmada")
    await repos.reservations.attach_payment(first["id"], "pay1", 90.0)
    stats = await repos.reservations.client_statistics("client1")
    assert stats["total"] == 2
    assert stats["porEstado"]["confirmada"] == 1
    assert stats["porEstado"]["pendiente"] == 1
    assert stats["montoTotal"] == 150.0
    assert stats["montoPagado"] == 90.0
