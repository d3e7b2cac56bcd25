"""Firestore implementation of DocumentStoreProtocol.

Every id is checked before any I/O; transport and HTTP failures surface as
InfrastructureException carrying the raw error message.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from app.application.interfaces.document_store import FieldFilter
from app.domain.exceptions import (
    InfrastructureException,
    InvalidIdentifierException,
)
from app.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
    build_structured_query,
)
from app.infrastructure.firebase._rest_encoding import field_path
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


def _check_id(doc_id: str) -> None:
    if not InputSanitizer.is_identifier(doc_id):
        raise InvalidIdentifierException(str(doc_id))


def _with_id(doc_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    return {"id": doc_id, **fields}


class FirestoreDocumentStore:
    """Document store over the Firestore REST client (one collection per entity)."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self.client = client

    async def _call(self, operation: str, coro):
        try:
            return await coro
        except httpx.HTTPStatusError as e:
            logger.error("Firestore %s failed: %s", operation, e)
            raise InfrastructureException(
                "Error en el almacén de documentos",
                {"operation": operation, "error": str(e)},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Firestore %s transport error: %s", operation, e)
            raise InfrastructureException(
                "Error de conexión con el almacén de documentos",
                {"operation": operation, "error": str(e)},
            ) from e

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        _check_id(doc_id)
        found = await self._call("get", self.client.get_document(collection, doc_id))
        return _with_id(*found) if found else None

    async def find(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: str | None = None,
        descending: bool = False,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        structured = build_structured_query(
            collection,
            [(f.field, f.op, f.value) for f in filters],
            order_by=order_by,
            descending=descending,
            offset=skip,
            limit=limit,
        )
        rows = await self._call("find", self.client.run_query(structured))
        return [_with_id(doc_id, fields) for doc_id, fields in rows]

    async def find_one(
        self, collection: str, filters: Sequence[FieldFilter]
    ) -> dict[str, Any] | None:
        rows = await self.find(collection, filters, limit=1)
        return rows[0] if rows else None

    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        fields = {k: v for k, v in data.items() if k != "id"}
        doc_id = generate_cuid()
        try:
            await self._call("insert", self.client.create_document(collection, doc_id, fields))
        except DocumentExistsError as e:
            raise InfrastructureException(
                "Colisión de identificador al crear documento",
                {"collection": collection, "id": doc_id},
            ) from e
        return _with_id(doc_id, fields)

    async def update(
        self, collection: str, doc_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        _check_id(doc_id)
        fields = {k: v for k, v in changes.items() if k != "id"}
        if not fields:
            return await self.get(collection, doc_id)
        updated = await self._call(
            "update", self.client.patch_document(collection, doc_id, fields)
        )
        return _with_id(*updated) if updated else None

    async def delete(self, collection: str, doc_id: str) -> bool:
        _check_id(doc_id)
        return await self._call("delete", self.client.delete_document(collection, doc_id))

    async def aggregate(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        *,
        average_fields: Sequence[str] = (),
    ) -> dict[str, Any]:
        structured = build_structured_query(
            collection, [(f.field, f.op, f.value) for f in filters]
        )
        aggregations: list[dict[str, Any]] = [{"alias": "count", "count": {}}]
        for i, name in enumerate(average_fields):
            aggregations.append({"alias": f"avg_{i}", "avg": {"field": {"fieldPath": field_path(name)}}})
        values = await self._call(
            "aggregate", self.client.run_aggregation(structured, aggregations)
        )
        return {
            "count": int(values.get("count") or 0),
            "averages": {
                name: values.get(f"avg_{i}") for i, name in enumerate(average_fields)
            },
        }
