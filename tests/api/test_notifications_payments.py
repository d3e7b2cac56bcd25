"""API tests for /notificaciones and /pagos."""

from httpx import AsyncClient


async def notify(
    client: AsyncClient, headers: dict, user_id: str, titulo: str, related: dict | None = None
) -> dict:
    response = await client.post(
        "/api/v1/notificaciones",
        headers=headers,
        json={
            "usuarioId": user_id,
            "tipo": "reserva",
            "titulo": titulo,
            "mensaje": "Tu reserva fue confirmada",
            "entidadRelacionada": related or {"tipo": "reserva", "id": "res1"},
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["notificacion"]


async def test_new_notification_is_unread(
    client: AsyncClient, admin_headers: dict, regular_user: dict
) -> None:
    created = await notify(client, admin_headers, regular_user["id"], "Reserva")
    assert created["leido"] is False
    assert created["fechaLectura"] is None

    read = await client.put(f"/api/v1/notificaciones/{created['id']}/leer", headers=admin_headers)
    assert read.json()["notificacion"]["leido"] is True
    assert read.json()["notificacion"]["fechaLectura"] is not None


async def test_mark_all_read_returns_count(
    client: AsyncClient, user_headers: dict, admin_headers: dict, regular_user: dict
) -> None:
    for title in ("Uno", "Dos", "Tres"):
        await notify(client, admin_headers, regular_user["id"], title)
    url = f"/api/v1/notificaciones/usuario/{regular_user['id']}"
    assert len((await client.get(f"{url}?noLeidas=true", headers=user_headers)).json()) == 3

    response = await client.put(f"{url}/leer-todas", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["actualizadas"] == 3
    assert (await client.get(f"{url}?noLeidas=true", headers=user_headers)).json() == []
    assert len((await client.get(url, headers=user_headers)).json()) == 3


async def test_mark_all_read_for_someone_else_is_forbidden(
    client: AsyncClient, user_headers: dict, admin_user: dict
) -> None:
    response = await client.put(
        f"/api/v1/notificaciones/usuario/{admin_user['id']}/leer-todas", headers=user_headers
    )
    assert response.status_code == 403


async def test_notifications_by_entity(
    client: AsyncClient, admin_headers: dict, regular_user: dict
) -> None:
    created = await notify(client, admin_headers, regular_user["id"], "Reserva")
    response = await client.get("/api/v1/notificaciones/entidad/reserva/res1", headers=admin_headers)
    assert [n["id"] for n in response.json()] == [created["id"]]


async def test_entity_lookup_does_not_leak_into_user_or_id_reads(
    client: AsyncClient, admin_headers: dict, regular_user: dict, admin_user: dict
) -> None:
    """A reference typed "usuario" or "id" is cached apart from the by-user and by-id reads."""
    own = await notify(client, admin_headers, regular_user["id"], "Para maria")
    about = await notify(
        client,
        admin_headers,
        admin_user["id"],
        "Sobre maria",
        related={"tipo": "usuario", "id": regular_user["id"]},
    )

    by_ref = await client.get(
        f"/api/v1/notificaciones/entidad/usuario/{regular_user['id']}", headers=admin_headers
    )
    assert [n["titulo"] for n in by_ref.json()] == ["Sobre maria"]
    by_user = await client.get(
        f"/api/v1/notificaciones/usuario/{regular_user['id']}", headers=admin_headers
    )
    assert [n["titulo"] for n in by_user.json()] == ["Para maria"]

    await client.get(f"/api/v1/notificaciones/entidad/id/{own['id']}", headers=admin_headers)
    by_id = await client.get(f"/api/v1/notificaciones/{own['id']}", headers=admin_headers)
    assert by_id.status_code == 200
    assert by_id.json()["id"] == own["id"]
    assert about["id"] != own["id"]


async def create_payment(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post(
        "/api/v1/pagos",
        headers=headers,
        json={
            "usuarioId": "user1",
            "monto": 120000,
            "metodo": "tarjeta",
            "concepto": "reserva",
            "fecha": "2024-05-20",
            "entidadRelacionada": {"tipo": "reserva", "id": "res1"},
            **overrides,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["pago"]


async def test_payment_status_transitions(client: AsyncClient, admin_headers: dict) -> None:
    payment = await create_payment(client, admin_headers)
    assert payment["estado"] == "pendiente"
    url = f"/api/v1/pagos/{payment['id']}/estado"

    early_refund = await client.put(url, headers=admin_headers, json={"estado": "reembolsado"})
    assert early_refund.status_code == 400

    completed = await client.put(url, headers=admin_headers, json={"estado": "completado"})
    assert completed.json()["pago"]["estado"] == "completado"
    refunded = await client.put(url, headers=admin_headers, json={"estado": "reembolsado"})
    assert refunded.json()["pago"]["estado"] == "reembolsado"

    terminal = await client.put(url, headers=admin_headers, json={"estado": "completado"})
    assert terminal.status_code == 400
    assert terminal.json()["details"]["transiciones_permitidas"] == []


async def test_payment_lookups(client: AsyncClient, admin_headers: dict) -> None:
    payment = await create_payment(client, admin_headers)
    await create_payment(
        client,
        admin_headers,
        usuarioId="user2",
        monto=5000,
        fecha="2024-06-02",
        entidadRelacionada={"tipo": "membresia", "id": "plan1"},
    )
    by_user = await client.get("/api/v1/pagos/usuario/user1", headers=admin_headers)
    by_entity = await client.get("/api/v1/pagos/entidad/reserva/res1", headers=admin_headers)
    by_status = await client.get("/api/v1/pagos/estado/pendiente", headers=admin_headers)
    by_dates = await client.get(
        "/api/v1/pagos/fechas?fechaInicio=2024-05-01&fechaFin=2024-05-31", headers=admin_headers
    )
    assert [p["id"] for p in by_user.json()] == [payment["id"]]
    assert [p["id"] for p in by_entity.json()] == [payment["id"]]
    assert len(by_status.json()) == 2
    assert [p["id"] for p in by_dates.json()] == [payment["id"]]


async def test_payment_amount_must_be_positive(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.post(
        "/api/v1/pagos",
        headers=admin_headers,
        json={"usuarioId": "user1", "monto": 0, "metodo": "efectivo"},
    )
    assert response.status_code == 400
    assert response.json()["field"] == "monto"


async def test_inverted_payment_date_range_returns_400(
    client: AsyncClient, admin_headers: dict
) -> None:
    response = await client.get(
        "/api/v1/pagos/fechas?fechaInicio=2024-06-30&fechaFin=2024-06-01", headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["details"]["min"] == "2024-06-30"
