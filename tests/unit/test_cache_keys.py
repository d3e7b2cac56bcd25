"""Tests for cache key builders (format and determinism)."""

import pytest

from app.infrastructure.cache.keys import (
    canonical_filters,
    field_key,
    id_key,
    list_key,
    list_prefix,
    parent_key,
    range_key,
    range_prefix,
    ref_key,
)


def test_id_key_format() -> None:
    assert id_key("edificios", "abc123") == "id:abc123-edificios"


def test_parent_key_format() -> None:
    assert parent_key("usuario", "u1", "reservas") == "usuario:u1-reservas"


def test_field_key_format_and_booleans() -> None:
    assert field_key("espacios", "estado", "disponible") == "espacios:estado:disponible"
    assert field_key("edificios", "activo", True) == "edificios:activo:true"
    assert field_key("edificios", "activo", False) == "edificios:activo:false"


def test_field_key_escapes_non_ascii_and_separators() -> None:
    """Values are percent-encoded so they can never inject a separator or glob."""
    key = field_key("edificios", "ciudad", "Bogotá")
    assert key == "edificios:ciudad:Bogot%C3%A1"
    assert field_key("edificios", "ciudad", "a:b*") == "edificios:ciudad:a%3Ab%2A"


def test_range_key_shares_range_prefix() -> None:
    key = range_key("reservas", "fechas", "2024-01-01", "2024-01-31")
    assert key == "reservas:fechas:2024-01-01-2024-01-31"
    assert key.startswith(range_prefix("reservas", "fechas"))


def test_list_key_is_independent_of_filter_order_and_unset_filters() -> None:
    """Same query shape, same key: sorted keys and None values dropped."""
    a = list_key("edificios", {"ciudad": "Cali", "activo": True, "pais": None}, 0, 10)
    b = list_key("edificios", {"activo": True, "ciudad": "Cali"}, 0, 10)
    assert a == b
    assert a == 'edificios:{"activo":true,"ciudad":"Cali"}:skip=0:limit=10'
    assert a.startswith(list_prefix("edificios"))


def test_list_key_differs_by_page() -> None:
    assert list_key("pagos", {}, 0, 10) != list_key("pagos", {}, 10, 10)


def test_canonical_filters_empty() -> None:
    assert canonical_filters(None) == "{}"
    assert canonical_filters({"x": None}) == "{}"


def test_entity_with_separator_is_rejected() -> None:
    with pytest.raises(ValueError):
        id_key("bad:entity", "x")


def test_ref_key_format_escapes_type_and_id() -> None:
    assert ref_key("reservas", "oficina", "o1") == "reservas:entidad:oficina:o1"
    assert ref_key("resenas", "edificio", "b1", family="calificacion") == (
        "resenas:calificacion:edificio:b1"
    )
    assert ref_key("pagos", "a:b", "x*") == "pagos:entidad:a%3Ab:x%2A"


def test_id_key_escapes_id() -> None:
    assert id_key("pagos", "a:b*") == "id:a%3Ab%2A-pagos"


def test_key_families_never_collide() -> None:
    """Caller-chosen reference types cannot reach the id, parent or field families."""
    entity = "notificaciones"
    keys = [
        id_key(entity, "n1"),
        parent_key("usuario", "n1", entity),
        parent_key("id", "n1", "x"),
        field_key(entity, "tipo", "n1"),
        field_key(entity, "entidad", "usuario"),
        field_key(entity, "entidad", "usuario:n1"),
        range_key(entity, "entidad", "usuario", "n1"),
        list_key(entity, {"entidad": "usuario"}, 0, 10),
        ref_key(entity, "usuario", "n1"),
        ref_key(entity, "id", "n1"),
        ref_key(entity, "tipo", "n1"),
        ref_key(entity, "usuario", "n1", family="calificacion"),
    ]
    assert len(set(keys)) == len(keys)
    for tipo in ("usuario", "id", "cliente", "edificio"):
        ref = ref_key(entity, tipo, "n1")
        assert ref != id_key(entity, "n1")
        assert ref != parent_key(tipo, "n1", entity)
        assert ref.startswith(f"{entity}:entidad:")
