"""Tests for the Firestore REST document store over an httpx MockTransport."""

import json
from types import SimpleNamespace

import httpx
import pytest

from app.application.interfaces.document_store import FieldFilter
from app.domain.exceptions import InfrastructureException, InvalidIdentifierException
from app.infrastructure.firebase import FirestoreDocumentStore
from app.infrastructure.firebase._rest_client import FirestoreRESTClient, build_structured_query
from app.infrastructure.firebase._rest_encoding import decode_fields, encode_document, field_path

PREFIX = "projects/demo/databases/(default)/documents"


def make_store(handler) -> tuple[FirestoreDocumentStore, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(record))
    credentials = SimpleNamespace(valid=True, token="tok")
    client = FirestoreRESTClient("demo", credentials, http_client=http)
    return FirestoreDocumentStore(client), seen


def doc(doc_id: str, **fields) -> dict:
    return {"name": f"{PREFIX}/edificios/{doc_id}", **encode_document(fields)}


def test_encoding_keeps_nested_values() -> None:
    record = {"nombre": "Torre", "piso": 3, "precio": 9.5, "activo": True, "tags": ["wifi"], "x": None}
    encoded = encode_document({**record, "direccion": {"ciudad": "Cali"}})
    assert encoded["fields"]["piso"] == {"integerValue": "3"}
    assert decode_fields(encoded["fields"]) == {**record, "direccion": {"ciudad": "Cali"}}


def test_field_path_quotes_odd_segments() -> None:
    assert field_path("direccion.ciudad") == "direccion.ciudad"
    assert field_path("precios.por-dia") == "precios.`por-dia`"


def test_structured_query_shape() -> None:
    query = build_structured_query(
        "espacios",
        [("edificioId", "==", "b1"), ("capacidad", ">=", 4)],
        order_by="capacidad",
        descending=True,
        offset=10,
        limit=5,
    )
    assert query["from"] == [{"collectionId": "espacios"}]
    filters = query["where"]["compositeFilter"]["filters"]
    assert filters[1]["fieldFilter"]["op"] == "GREATER_THAN_OR_EQUAL"
    assert query["orderBy"][0]["direction"] == "DESCENDING"
    assert query["offset"] == 10
    assert query["limit"] == 5


def test_null_equality_is_unary() -> None:
    query = build_structured_query("usuarios", [("membresia", "==", None)])
    assert query["where"] == {
        "unaryFilter": {"field": {"fieldPath": "membresia"}, "op": "IS_NULL"}
    }


async def test_get_returns_record_with_id() -> None:
    store, seen = make_store(lambda r: httpx.Response(200, json=doc("b1", nombre="Torre")))
    assert await store.get("edificios", "b1") == {"id": "b1", "nombre": "Torre"}
    assert seen[0].headers["Authorization"] == "Bearer tok"


async def test_get_missing_is_none() -> None:
    store, _ = make_store(lambda r: httpx.Response(404))
    assert await store.get("edificios", "b1") is None


async def test_invalid_id_rejected_before_io() -> None:
    store, seen = make_store(lambda r: httpx.Response(200, json={}))
    with pytest.raises(InvalidIdentifierException):
        await store.get("edificios", "../etc")
    assert seen == []


async def test_insert_generates_id() -> None:
    store, seen = make_store(lambda r: httpx.Response(200, json={}))
    created = await store.insert("edificios", {"id": "ignored", "nombre": "Torre"})
    assert created["id"] != "ignored"
    assert created["nombre"] == "Torre"
    assert seen[0].url.params["documentId"] == created["id"]


async def test_update_sends_mask_and_missing_is_none() -> None:
    store, seen = make_store(
        lambda r: httpx.Response(400, text='{"error": {"status": "FAILED_PRECONDITION"}}')
    )
    assert await store.update("edificios", "b1", {"nombre": "Nueva"}) is None
    assert seen[0].url.params.get_list("updateMask.fieldPaths") == ["nombre"]
    assert seen[0].url.params["currentDocument.exists"] == "true"


async def test_find_skips_non_document_rows() -> None:
    rows = [{"readTime": "2024-01-01T00:00:00Z"}, {"document": doc("b2", nombre="Sur")}]
    store, seen = make_store(lambda r: httpx.Response(200, json=rows))
    found = await store.find("edificios", [FieldFilter("activo", "==", True)], limit=3)
    assert found == [{"id": "b2", "nombre": "Sur"}]
    body = json.loads(seen[0].content)
    assert body["structuredQuery"]["limit"] == 3


async def test_aggregate_averages_and_count() -> None:
    result = [
        {
            "result": {
                "aggregateFields": {
                    "count": {"integerValue": "2"},
                    "avg_0": {"doubleValue": 3.5},
                }
            }
        }
    ]
    store, _ = make_store(lambda r: httpx.Response(200, json=result))
    summary = await store.aggregate("resenas", average_fields=["calificacion"])
    assert summary == {"count": 2, "averages": {"calificacion": 3.5}}


async def test_http_error_becomes_infrastructure_exception() -> None:
    store, _ = make_store(lambda r: httpx.Response(503, text="unavailable"))
    with pytest.raises(InfrastructureException) as exc_info:
        await store.find("edificios")
    assert exc_info.value.details["operation"] == "find"
