"""API tests for /reservas and /reservas-servicio."""

from httpx import AsyncClient

RESERVATION = {
    "usuarioId": "user1",
    "clienteId": "client1",
    "entidadReservada": {"tipo": "oficina", "id": "office1"},
    "fechaInicio": "2024-05-20",
    "fechaFin": "2024-05-20",
    "horaInicio": "08:00",
    "horaFin": "12:00",
    "tipoReserva": "hora",
    "precioTotal": 120000,
}


async def create_reservation(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post("/api/v1/reservas", headers=headers, json={**RESERVATION, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["reserva"]


async def test_create_reservation_starts_pending(client: AsyncClient, admin_headers: dict) -> None:
    created = await create_reservation(client, admin_headers)
    assert created["estado"] == "pendiente"
    pending = await client.get("/api/v1/reservas/pendientes", headers=admin_headers)
    assert [r["id"] for r in pending.json()] == [created["id"]]


async def test_double_booking_returns_400(client: AsyncClient, admin_headers: dict) -> None:
    await create_reservation(client, admin_headers)
    response = await client.post(
        "/api/v1/reservas",
        headers=admin_headers,
        json={**RESERVATION, "horaInicio": "10:00", "horaFin": "14:00"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "La entidad ya está reservada en ese horario"


async def test_end_before_start_returns_400(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.post(
        "/api/v1/reservas", headers=admin_headers, json={**RESERVATION, "fechaFin": "2024-05-19"}
    )
    assert response.status_code == 400


async def test_update_rejects_null_dates(client: AsyncClient, admin_headers: dict) -> None:
    created = await create_reservation(client, admin_headers)
    url = f"/api/v1/reservas/{created['id']}"
    response = await client.put(url, headers=admin_headers, json={"fechaFin": None})
    assert response.status_code == 400
    assert response.json()["field"] == "fechaFin"

    cleared = await client.put(url, headers=admin_headers, json={"proposito": None})
    assert cleared.status_code == 200
    assert cleared.json()["reserva"]["fechaFin"] == "2024-05-20"


async def test_status_machine_over_http(client: AsyncClient, admin_headers: dict) -> None:
    created = await create_reservation(client, admin_headers)
    url = f"/api/v1/reservas/{created['id']}/estado"
    illegal = await client.put(url, headers=admin_headers, json={"estado": "completada"})
    assert illegal.status_code == 400
    assert illegal.json()["details"]["transiciones_permitidas"] == ["cancelada", "confirmada"]

    confirmed = await client.put(url, headers=admin_headers, json={"estado": "confirmada"})
    assert confirmed.json()["reserva"]["estado"] == "confirmada"
    done = await client.put(url, headers=admin_headers, json={"estado": "completada"})
    assert done.json()["reserva"]["estado"] == "completada"


async def test_approve_records_caller(client: AsyncClient, admin_headers: dict, admin_user: dict) -> None:
    created = await create_reservation(client, admin_headers)
    response = await client.put(
        f"/api/v1/reservas/{created['id']}/aprobar", headers=admin_headers, json={"notas": "OK"}
    )
    assert response.status_code == 200
    reservation = response.json()["reserva"]
    assert reservation["estado"] == "confirmada"
    assert reservation["aprobador"]["usuarioId"] == admin_user["id"]


async def test_approve_with_service_token(client: AsyncClient, service_headers: dict) -> None:
    created = await create_reservation(client, service_headers)
    response = await client.put(
        f"/api/v1/reservas/{created['id']}/aprobar", headers=service_headers, json={}
    )
    assert response.json()["reserva"]["aprobador"]["usuarioId"] == "servicio"


async def test_lookups_and_statistics(client: AsyncClient, admin_headers: dict) -> None:
    created = await create_reservation(client, admin_headers)
    await client.put(
        f"/api/v1/reservas/{created['id']}/pago",
        headers=admin_headers,
        json={"pagoId": "pay1", "precioFinalPagado": 100000},
    )
    by_user = await client.get("/api/v1/reservas/usuario/user1", headers=admin_headers)
    by_entity = await client.get("/api/v1/reservas/entidad/oficina/office1", headers=admin_headers)
    by_dates = await client.get(
        "/api/v1/reservas/fecha?fechaInicio=2024-05-01&fechaFin=2024-05-31", headers=admin_headers
    )
    stats = await client.get("/api/v1/reservas/cliente/client1/estadisticas", headers=admin_headers)
    assert len(by_user.json()) == len(by_entity.json()) == len(by_dates.json()) == 1
    assert stats.json()["montoPagado"] == 100000
    assert stats.json()["total"] == 1


async def test_inverted_date_range_returns_400(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.get(
        "/api/v1/reservas/fecha?fechaInicio=2024-05-31&fechaFin=2024-05-01", headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["field"] == "fechaFin"
    assert response.json()["details"] == {"min": "2024-05-31", "max": "2024-05-01"}

    filtered = await client.get(
        "/api/v1/reservas/filtrar?fechaDesde=2024-05-31&fechaHasta=2024-05-01", headers=admin_headers
    )
    assert filtered.status_code == 400


async def test_delete_reservation(client: AsyncClient, admin_headers: dict) -> None:
    created = await create_reservation(client, admin_headers)
    deleted = await client.delete(f"/api/v1/reservas/{created['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    again = await client.delete(f"/api/v1/reservas/{created['id']}", headers=admin_headers)
    assert again.status_code == 404


async def create_service(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post(
        "/api/v1/servicios-adicionales",
        headers=headers,
        json={
            "nombre": "Café ilimitado",
            "descripcion": "Estación de café",
            "tipo": "catering",
            "precio": 15000,
            "unidadPrecio": "por_persona",
            **overrides,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["servicio"]


async def test_service_booking_lifecycle(client: AsyncClient, admin_headers: dict) -> None:
    service = await create_service(client, admin_headers)
    response = await client.post(
        "/api/v1/reservas-servicio",
        headers=admin_headers,
        json={"usuarioId": "user1", "servicioId": service["id"], "fecha": "2024-05-20", "cantidad": 3},
    )
    assert response.status_code == 201
    booking = response.json()["reservaServicio"]
    assert booking["estado"] == "pendiente"
    assert booking["precioTotal"] == 45000

    pending = await client.get("/api/v1/reservas-servicio/pendientes?fecha=2024-05-20", headers=admin_headers)
    assert [b["id"] for b in pending.json()] == [booking["id"]]

    skip = await client.put(f"/api/v1/reservas-servicio/{booking['id']}/completar", headers=admin_headers)
    assert skip.status_code == 400

    confirmed = await client.put(f"/api/v1/reservas-servicio/{booking['id']}/confirmar", headers=admin_headers)
    assert confirmed.json()["reservaServicio"]["estado"] == "confirmado"
    assert (
        await client.get("/api/v1/reservas-servicio/pendientes?fecha=2024-05-20", headers=admin_headers)
    ).json() == []

    cancelled = await client.put(
        f"/api/v1/reservas-servicio/{booking['id']}/cancelar",
        headers=admin_headers,
        json={"motivo": "Evento suspendido"},
    )
    assert cancelled.json()["reservaServicio"]["motivoCancelacion"] == "Evento suspendido"


async def test_booking_inactive_or_unknown_service(client: AsyncClient, admin_headers: dict) -> None:
    unknown = await client.post(
        "/api/v1/reservas-servicio",
        headers=admin_headers,
        json={"usuarioId": "user1", "servicioId": "missing", "fecha": "2024-05-20"},
    )
    assert unknown.status_code == 404

    service = await create_service(client, admin_headers, activo=False)
    inactive = await client.post(
        "/api/v1/reservas-servicio",
        headers=admin_headers,
        json={"usuarioId": "user1", "servicioId": service["id"], "fecha": "2024-05-20"},
    )
    assert inactive.status_code == 400
