"""API tests for /resenas: moderation and the rating pushed onto the reviewed entity."""

from httpx import AsyncClient


async def create_building(client: AsyncClient, headers: dict) -> dict:
    response = await client.post(
        "/api/v1/edificios",
        headers=headers,
        json={
            "nombre": "Casa Coworking",
            "usuarioId": "owner1",
            "direccion": {
                "calle": "Carrera 7",
                "numero": "71-21",
                "ciudad": "Bogotá",
                "departamento": "Cundinamarca",
                "codigoPostal": "110231",
                "pais": "Colombia",
                "coordenadas": {"lat": 4.6553, "lng": -74.0566},
            },
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["edificio"]


async def post_review(client: AsyncClient, headers: dict, building_id: str, rating: int) -> dict:
    response = await client.post(
        "/api/v1/resenas",
        headers=headers,
        json={
            "usuarioId": "user1",
            "entidad": {"tipo": "edificio", "id": building_id},
            "calificacion": rating,
            "comentario": "Buena conexión y café",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["resena"]


async def test_new_review_waits_for_moderation(client: AsyncClient, admin_headers: dict) -> None:
    building = await create_building(client, admin_headers)
    review = await post_review(client, admin_headers, building["id"], 5)
    assert review["estado"] == "pendiente"

    pending = await client.get("/api/v1/resenas/pendientes", headers=admin_headers)
    assert [r["id"] for r in pending.json()] == [review["id"]]
    listed = await client.get(
        f"/api/v1/resenas/entidad/edificio/{building['id']}", headers=admin_headers
    )
    assert listed.json() == []


async def test_approval_updates_building_rating(client: AsyncClient, admin_headers: dict) -> None:
    building = await create_building(client, admin_headers)
    four = await post_review(client, admin_headers, building["id"], 4)
    two = await post_review(client, admin_headers, building["id"], 2)
    for review in (four, two):
        response = await client.put(
            f"/api/v1/resenas/{review['id']}/moderar",
            headers=admin_headers,
            json={"estado": "aprobada"},
        )
        assert response.status_code == 200
        assert "warning" not in response.json()

    stored = (await client.get(f"/api/v1/edificios/{building['id']}", headers=admin_headers)).json()
    assert stored["calificacionPromedio"] == 3.0
    assert stored["totalResenas"] == 2

    rating = await client.get(
        f"/api/v1/resenas/entidad/edificio/{building['id']}/calificacion", headers=admin_headers
    )
    assert rating.json()["total"] == 2


async def test_regular_user_cannot_moderate(
    client: AsyncClient, admin_headers: dict, user_headers: dict
) -> None:
    building = await create_building(client, admin_headers)
    review = await post_review(client, user_headers, building["id"], 3)
    response = await client.put(
        f"/api/v1/resenas/{review['id']}/moderar", headers=user_headers, json={"estado": "aprobada"}
    )
    assert response.status_code == 403


async def test_moderating_twice_returns_400(client: AsyncClient, admin_headers: dict) -> None:
    building = await create_building(client, admin_headers)
    review = await post_review(client, admin_headers, building["id"], 3)
    url = f"/api/v1/resenas/{review['id']}/moderar"
    await client.put(url, headers=admin_headers, json={"estado": "rechazada", "motivoRechazo": "Spam"})
    again = await client.put(url, headers=admin_headers, json={"estado": "aprobada"})
    assert again.status_code == 400


async def test_rating_out_of_range_is_rejected(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.post(
        "/api/v1/resenas",
        headers=admin_headers,
        json={
            "usuarioId": "user1",
            "entidad": {"tipo": "edificio", "id": "b1"},
            "calificacion": 6,
            "comentario": "Demasiado bueno",
        },
    )
    assert response.status_code == 400
    assert response.json()["field"] == "calificacion"


async def test_delete_missing_review_returns_404(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.delete("/api/v1/resenas/missing", headers=admin_headers)
    assert response.status_code == 404
