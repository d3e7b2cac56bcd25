"""API tests for /oficinas and /servicios-adicionales."""

from httpx import AsyncClient


async def create_office(client: AsyncClient, headers: dict, **overrides) -> dict:
    body = {
        "codigo": "OF-101",
        "nombre": "Oficina Norte",
        "tipo": "privada",
        "edificioId": "b1",
        "usuarioId": "owner1",
        "piso": 1,
        "capacidad": 4,
        "precios": {"porHora": 20000, "porDia": 120000},
        **overrides,
    }
    response = await client.post("/api/v1/oficinas", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()["oficina"]


async def test_office_code_is_unique(client: AsyncClient, admin_headers: dict) -> None:
    created = await create_office(client, admin_headers)
    assert created["estado"] == "disponible"
    assert created["calificacionPromedio"] == 0

    duplicate = await client.post(
        "/api/v1/oficinas",
        headers=admin_headers,
        json={"codigo": "OF-101", "nombre": "Otra", "tipo": "equipo", "edificioId": "b1", "capacidad": 2},
    )
    assert duplicate.status_code == 400
    by_code = await client.get("/api/v1/oficinas/codigo/OF-101", headers=admin_headers)
    assert by_code.json()["id"] == created["id"]


async def test_capacity_and_price_ranges(client: AsyncClient, admin_headers: dict) -> None:
    small = await create_office(client, admin_headers)
    large = await create_office(
        client, admin_headers, codigo="OF-201", capacidad=12, precios={"porDia": 400000}
    )
    capacity = await client.get("/api/v1/oficinas/capacidad?min=10&max=20", headers=admin_headers)
    assert [o["id"] for o in capacity.json()] == [large["id"]]

    price = await client.get(
        "/api/v1/oficinas/precio?min=100000&max=200000&periodo=porDia", headers=admin_headers
    )
    assert [o["id"] for o in price.json()] == [small["id"]]

    inverted = await client.get("/api/v1/oficinas/capacidad?min=20&max=10", headers=admin_headers)
    assert inverted.status_code == 400


async def test_status_change_leaves_available_list(client: AsyncClient, admin_headers: dict) -> None:
    office = await create_office(client, admin_headers)
    available = await client.get("/api/v1/oficinas/disponibles", headers=admin_headers)
    assert [o["id"] for o in available.json()] == [office["id"]]

    changed = await client.put(
        f"/api/v1/oficinas/{office['id']}/estado", headers=admin_headers, json={"estado": "ocupada"}
    )
    assert changed.json()["oficina"]["estado"] == "ocupada"
    assert (await client.get("/api/v1/oficinas/disponibles", headers=admin_headers)).json() == []


async def test_soft_deleted_office_hidden_from_building(
    client: AsyncClient, admin_headers: dict
) -> None:
    office = await create_office(client, admin_headers)
    url = "/api/v1/oficinas/edificio/b1"
    assert len((await client.get(url, headers=admin_headers)).json()) == 1
    await client.delete(f"/api/v1/oficinas/{office['id']}", headers=admin_headers)
    assert (await client.get(url, headers=admin_headers)).json() == []
    stored = await client.get(f"/api/v1/oficinas/{office['id']}", headers=admin_headers)
    assert stored.json()["activo"] is False


async def create_service(client: AsyncClient, headers: dict, **overrides) -> dict:
    body = {
        "nombre": "Impresión a color",
        "descripcion": "Impresora láser",
        "tipo": "impresion",
        "precio": 500,
        "proveedorId": "prov1",
        **overrides,
    }
    response = await client.post("/api/v1/servicios-adicionales", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()["servicio"]


async def test_service_space_links(client: AsyncClient, admin_headers: dict) -> None:
    service = await create_service(client, admin_headers)
    base = f"/api/v1/servicios-adicionales/{service['id']}/espacio"
    added = await client.post(base, headers=admin_headers, json={"espacioId": "space1"})
    assert added.json()["servicio"]["espaciosDisponibles"] == ["space1"]
    again = await client.post(base, headers=admin_headers, json={"espacioId": "space1"})
    assert again.json()["servicio"]["espaciosDisponibles"] == ["space1"]

    by_space = await client.get("/api/v1/servicios-adicionales/espacio/space1", headers=admin_headers)
    assert [s["id"] for s in by_space.json()] == [service["id"]]

    removed = await client.delete(f"{base}/space1", headers=admin_headers)
    assert removed.json()["servicio"]["espaciosDisponibles"] == []
    assert (
        await client.get("/api/v1/servicios-adicionales/espacio/space1", headers=admin_headers)
    ).json() == []


async def test_service_lookups(client: AsyncClient, admin_headers: dict) -> None:
    cheap = await create_service(client, admin_headers)
    gated = await create_service(
        client, admin_headers, nombre="Sala VIP", tipo="otro", precio=90000, requiereAprobacion=True
    )
    gated_list = await client.get("/api/v1/servicios-adicionales/aprobacion", headers=admin_headers)
    assert [s["id"] for s in gated_list.json()] == [gated["id"]]
    priced = await client.get(
        "/api/v1/servicios-adicionales/precio?min=0&max=1000", headers=admin_headers
    )
    assert [s["id"] for s in priced.json()] == [cheap["id"]]
    by_provider = await client.get(
        "/api/v1/servicios-adicionales/proveedor/prov1", headers=admin_headers
    )
    assert len(by_provider.json()) == 2
