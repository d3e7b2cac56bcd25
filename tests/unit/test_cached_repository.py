"""Tests for CachedRepository: read-through, invalidation, TTL, soft delete, cache failures."""

import pytest

from app.core.config import get_settings
from app.infrastructure.cache.keys import field_key, id_key, list_key, parent_key
from app.infrastructure.persistence.container import build_repositories
from app.infrastructure.persistence.repositories import BuildingRepository
from tests.fakes import InMemoryCache, InMemoryDocumentStore


def building(**overrides) -> dict:
    data = {
        "nombre": "Torre Central",
        "usuarioId": "owner1",
        "direccion": {
            "calle": "Calle 10",
            "numero": "5-20",
            "ciudad": "Cali",
            "departamento": "Valle",
            "codigoPostal": "760001",
            "pais": "Colombia",
            "coordenadas": {"lat": 3.4516, "lng": -76.532},
        },
        "amenidades": [{"tipo": "wifi"}],
    }
    data.update(overrides)
    return data


@pytest.fixture
def repo(store: InMemoryDocumentStore, cache: InMemoryCache) -> BuildingRepository:
    return BuildingRepository(store, cache, cache_ttl=60)


async def test_create_sets_defaults_and_timestamps(repo: BuildingRepository) -> None:
    created = await repo.create(building())
    assert created["id"]
    assert created["activo"] is True
    assert created["createdAt"] == created["updatedAt"]
    assert created["calificacionPromedio"] == 0
    assert created["tiposAmenidad"] == ["wifi"]
    assert created["amenidades"][0]["id"]


async def test_get_by_id_reads_through_cache(
    repo: BuildingRepository, store: InMemoryDocumentStore, cache: InMemoryCache
) -> None:
    """Second read is served from the cache without touching the store."""
    created = await repo.create(building())
    first = await repo.get_by_id(created["id"])
    assert id_key("edificios", created["id"]) in cache.keys()
    gets_before = store.calls.count(("get", "edificios"))
    second = await repo.get_by_id(created["id"])
    assert second == first
    assert store.calls.count(("get", "edificios")) == gets_before


async def test_missing_record_is_not_cached(repo: BuildingRepository, cache: InMemoryCache) -> None:
    assert await repo.get_by_id("doesnotexist") is None
    assert id_key("edificios", "doesnotexist") not in cache.keys()


async def test_update_invalidates_old_and_new_axis_keys(
    repo: BuildingRepository, cache: InMemoryCache
) -> None:
    """Moving a building from Cali to Medellín drops both city listings."""
    created = await repo.create(building())
    assert len(await repo.by_city("Cali")) == 1
    assert await repo.by_city("Medellín") == []
    await repo.get_by_id(created["id"])

    new_address = {**created["direccion"], "ciudad": "Medellín"}
    await repo.update(created["id"], {"direccion": new_address})

    assert field_key("edificios", "ciudad", "Cali") not in cache.keys()
    assert field_key("edificios", "ciudad", "Medellín") not in cache.keys()
    assert id_key("edificios", created["id"]) not in cache.keys()
    assert await repo.by_city("Cali") == []
    assert [b["id"] for b in await repo.by_city("Medellín")] == [created["id"]]


async def test_create_invalidates_filtered_lists(repo: BuildingRepository, cache: InMemoryCache) -> None:
    await repo.create(building())
    assert len(await repo.get_all()) == 1
    key = list_key("edificios", {"activo": True}, 0, 10)
    assert key in cache.keys()
    await repo.create(building(nombre="Torre Norte"))
    assert key not in cache.keys()
    assert len(await repo.get_all()) == 2


async def test_owner_axis_uses_parent_key(repo: BuildingRepository, cache: InMemoryCache) -> None:
    await repo.create(building())
    await repo.by_owner("owner1")
    assert parent_key("usuario", "owner1", "edificios") in cache.keys()


async def test_soft_delete_hides_from_listings_but_keeps_record(
    repo: BuildingRepository, store: InMemoryDocumentStore
) -> None:
    created = await repo.create(building())
    await repo.get_all()
    deleted = await repo.soft_delete(created["id"])
    assert deleted["activo"] is False
    assert await repo.get_all() == []
    assert await repo.by_city("Cali") == []
    assert store.collections["edificios"][created["id"]]["activo"] is False
    assert (await repo.get_all({"activo": False}))[0]["id"] == created["id"]

    await repo.activate(created["id"])
    assert len(await repo.get_all()) == 1


async def test_hard_delete_returns_false_for_missing(repo: BuildingRepository) -> None:
    assert await repo.delete("missing") is False


async def test_ttl_expiry_forces_store_read(
    repo: BuildingRepository, store: InMemoryDocumentStore, cache: InMemoryCache
) -> None:
    """Entries expire at a fixed TTL; reads do not extend it."""
    created = await repo.create(building())
    await repo.get_by_id(created["id"])
    cache.advance(30)
    await repo.get_by_id(created["id"])
    cache.advance(31)
    assert id_key("edificios", created["id"]) not in cache.keys()
    gets_before = store.calls.count(("get", "edificios"))
    await repo.get_by_id(created["id"])
    assert store.calls.count(("get", "edificios")) == gets_before + 1


async def test_failing_cache_falls_back_to_store(
    repo: BuildingRepository, cache: InMemoryCache
) -> None:
    """A cache that raises on every call never breaks reads or writes."""
    created = await repo.create(building())
    cache.failing = True
    assert (await repo.get_by_id(created["id"]))["id"] == created["id"]
    updated = await repo.update(created["id"], {"nombre": "Renombrado"})
    assert updated["nombre"] == "Renombrado"


async def test_unavailable_cache_is_skipped(repo: BuildingRepository, cache: InMemoryCache) -> None:
    cache.available = False
    created = await repo.create(building())
    await repo.get_by_id(created["id"])
    assert cache.keys() == set()


async def test_garbled_cache_entry_is_treated_as_miss(
    repo: BuildingRepository, cache: InMemoryCache
) -> None:
    created = await repo.create(building())
    key = id_key("edificios", created["id"])
    cache.entries[key] = ('"not json', None)
    cache.get = _raw_get(cache)
    found = await repo.get_by_id(created["id"])
    assert found["id"] == created["id"]


def _raw_get(cache: InMemoryCache):
    async def get(key: str):
        entry = cache.entries.get(key)
        return entry[0] if entry else None

    return get


async def test_filter_map_translates_nested_filters(repo: BuildingRepository) -> None:
    await repo.create(building())
    await repo.create(building(nombre="Sur", direccion={**building()["direccion"], "ciudad": "Pasto"}))
    assert [b["nombre"] for b in await repo.get_all({"ciudad": "Pasto"})] == ["Sur"]
    assert len(await repo.get_all({"amenidad": "wifi"})) == 2


async def test_nearby_orders_by_distance(repo: BuildingRepository) -> None:
    near = await repo.create(building(nombre="Cerca"))
    far_address = {**building()["direccion"], "coordenadas": {"lat": 3.6, "lng": -76.532}}
    await repo.create(building(nombre="Lejos", direccion=far_address))
    found = await repo.nearby(3.4516, -76.532, 5)
    assert [b["id"] for b in found] == [near["id"]]
    assert found[0]["distanciaKm"] == 0
    assert len(await repo.nearby(3.4516, -76.532, 50)) == 2


async def test_expand_embeds_owner_summary(store: InMemoryDocumentStore, cache: InMemoryCache) -> None:
    repos = build_repositories(store, cache, get_settings())
    owner = await repos.users.create(
        {"username": "duena", "email": "duena@example.com", "password": "Secreta123", "nombre": "Ana"}
    )
    created = await repos.buildings.create(building(usuarioId=owner["id"]))
    found = await repos.buildings.get_by_id(created["id"])
    assert found["propietario"] == {"id": owner["id"], "nombre": "Ana", "email": "duena@example.com"}
