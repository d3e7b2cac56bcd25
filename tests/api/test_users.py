"""API tests for /usuarios: ownership rules, roles and payment methods."""

from httpx import AsyncClient

CARD = {
    "tipo": "tarjeta",
    "ultimosDigitos": "4242",
    "fechaExpiracion": "12/29",
    "nombreTitular": "María Gómez",
    "marca": "visa",
}


async def test_create_user_hides_password(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.post(
        "/api/v1/usuarios",
        headers=admin_headers,
        json={
            "username": "carlos",
            "email": "Carlos@Example.com",
            "password": "Segura123!",
            "nombre": "Carlos",
        },
    )
    assert response.status_code == 201
    user = response.json()["usuario"]
    assert "password" not in user
    assert user["email"] == "carlos@example.com"
    assert user["rol"] == "usuario"


async def test_duplicate_username_returns_400(
    client: AsyncClient, admin_headers: dict, regular_user: dict
) -> None:
    response = await client.post(
        "/api/v1/usuarios",
        headers=admin_headers,
        json={
            "username": regular_user["username"],
            "email": "otra@example.com",
            "password": "Segura123!",
            "nombre": "Otra",
        },
    )
    assert response.status_code == 400
    assert response.json()["field"] == "username"


async def test_regular_user_cannot_create_administrator(
    client: AsyncClient, user_headers: dict
) -> None:
    response = await client.post(
        "/api/v1/usuarios",
        headers=user_headers,
        json={
            "username": "jefe",
            "email": "jefe@example.com",
            "password": "Segura123!",
            "nombre": "Jefe",
            "tipoUsuario": "administrador",
        },
    )
    assert response.status_code == 403


async def test_user_updates_self_but_not_others(
    client: AsyncClient, user_headers: dict, regular_user: dict, admin_user: dict
) -> None:
    own = await client.put(
        f"/api/v1/usuarios/{regular_user['id']}", headers=user_headers, json={"apellidos": "Gómez"}
    )
    assert own.status_code == 200
    assert own.json()["usuario"]["apellidos"] == "Gómez"

    other = await client.put(
        f"/api/v1/usuarios/{admin_user['id']}", headers=user_headers, json={"apellidos": "X"}
    )
    assert other.status_code == 403


async def test_update_cannot_clear_required_fields(
    client: AsyncClient, user_headers: dict, regular_user: dict
) -> None:
    url = f"/api/v1/usuarios/{regular_user['id']}"
    response = await client.put(url, headers=user_headers, json={"email": None, "username": None})
    assert response.status_code == 400
    assert response.json()["field"] in ("email", "username")

    unchanged = await client.get(url, headers=user_headers)
    assert unchanged.json()["email"] == regular_user["email"]

    cleared = await client.put(url, headers=user_headers, json={"apellidos": None})
    assert cleared.status_code == 200
    assert cleared.json()["usuario"]["apellidos"] is None


async def test_role_change_is_admin_only(
    client: AsyncClient, admin_headers: dict, user_headers: dict, regular_user: dict
) -> None:
    url = f"/api/v1/usuarios/{regular_user['id']}/rol"
    denied = await client.put(url, headers=user_headers, json={"rol": "administrador"})
    assert denied.status_code == 403

    granted = await client.put(url, headers=admin_headers, json={"rol": "editor"})
    assert granted.status_code == 200
    assert granted.json()["usuario"]["rol"] == "editor"

    by_role = await client.get("/api/v1/usuarios?rol=editor", headers=admin_headers)
    assert [u["id"] for u in by_role.json()] == [regular_user["id"]]


async def test_payment_methods_keep_one_default(
    client: AsyncClient, user_headers: dict, regular_user: dict
) -> None:
    url = f"/api/v1/usuarios/{regular_user['id']}/metodos-pago"
    first = await client.post(url, headers=user_headers, json=CARD)
    assert first.status_code == 201
    second = await client.post(
        url,
        headers=user_headers,
        json={"tipo": "paypal", "ultimosDigitos": "0001", "predeterminado": True},
    )
    methods = second.json()["usuario"]["metodoPago"]
    assert [m["tipo"] for m in methods] == ["paypal", "tarjeta"]
    assert [m["predeterminado"] for m in methods] == [True, False]

    removed = await client.delete(f"{url}/{methods[0]['id']}", headers=user_headers)
    remaining = removed.json()["usuario"]["metodoPago"]
    assert len(remaining) == 1
    assert remaining[0]["predeterminado"] is True


async def test_replace_payment_methods_rejects_two_defaults(
    client: AsyncClient, user_headers: dict, regular_user: dict
) -> None:
    response = await client.put(
        f"/api/v1/usuarios/{regular_user['id']}/metodos-pago",
        headers=user_headers,
        json={
            "metodoPago": [
                {**CARD, "predeterminado": True},
                {"tipo": "paypal", "ultimosDigitos": "0001", "predeterminado": True},
            ]
        },
    )
    assert response.status_code == 400


async def test_card_requires_expiry(
    client: AsyncClient, user_headers: dict, regular_user: dict
) -> None:
    card = {k: v for k, v in CARD.items() if k != "fechaExpiracion"}
    response = await client.put(
        f"/api/v1/usuarios/{regular_user['id']}/metodos-pago",
        headers=user_headers,
        json={"metodoPago": [card]},
    )
    assert response.status_code == 400


async def test_membership_snapshot_and_clear(
    client: AsyncClient, user_headers: dict, regular_user: dict
) -> None:
    url = f"/api/v1/usuarios/{regular_user['id']}/membresia"
    empty = await client.get(url, headers=user_headers)
    assert empty.json() == {"usuarioId": regular_user["id"], "membresia": None}
    cleared = await client.delete(url, headers=user_headers)
    assert cleared.status_code == 200
    assert cleared.json()["usuario"]["membresia"] is None


async def test_list_by_type_and_delete(
    client: AsyncClient, admin_headers: dict, regular_user: dict
) -> None:
    listed = await client.get("/api/v1/usuarios/tipo/usuario", headers=admin_headers)
    assert regular_user["id"] in [u["id"] for u in listed.json()]

    deleted = await client.delete(f"/api/v1/usuarios/{regular_user['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    missing = await client.get(f"/api/v1/usuarios/{regular_user['id']}", headers=admin_headers)
    assert missing.status_code == 404
