"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Keeps the deployment small (avoids grpcio / firebase-admin).
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from app.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_fields,
    decode_value,
    encode_document,
    field_path,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
# runAggregationQuery accepts at most five aggregations per request.
MAX_AGGREGATIONS = 5


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class DocumentExistsError(Exception):
    """Raised when createDocument returns 409 (document ID already exists)."""


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: list[tuple[str, str]] | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method not in ("GET", "PATCH", "POST", "DELETE"):
        raise ValueError(f"Unsupported method: {method!r}")
    resp = await client.request(method, url, headers=headers, json=body, params=params)
    if resp.status_code == 404:
        return None
    if resp.status_code == 409:
        raise DocumentExistsError("Document already exists")
    # A failed currentDocument precondition is reported as 400 FAILED_PRECONDITION.
    if resp.status_code == 400 and "FAILED_PRECONDITION" in resp.text:
        return None
    if resp.status_code not in (200, 204):
        resp.raise_for_status()
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "array-contains": "ARRAY_CONTAINS",
}


def _build_filter(field: str, op: str, value: Any) -> dict:
    """Build one REST filter; equality against None becomes a unary IS_NULL test."""
    if value is None and op in ("==", "!="):
        return {
            "unaryFilter": {
                "field": {"fieldPath": field_path(field)},
                "op": "IS_NULL" if op == "==" else "IS_NOT_NULL",
            }
        }
    return {
        "fieldFilter": {
            "field": {"fieldPath": field_path(field)},
            "op": _OP_MAP[op],
            "value": _encode_value(value),
        }
    }


def build_structured_query(
    collection_id: str,
    filters: Sequence[tuple[str, str, Any]] = (),
    *,
    order_by: str | None = None,
    descending: bool = False,
    offset: int = 0,
    limit: int | None = None,
) -> dict[str, Any]:
    """Return a StructuredQuery body: composite AND of filters, order, offset, limit."""
    structured: dict[str, Any] = {"from": [{"collectionId": collection_id}]}
    built = [_build_filter(f, op, v) for f, op, v in filters]
    if len(built) == 1:
        structured["where"] = built[0]
    elif built:
        structured["where"] = {"compositeFilter": {"op": "AND", "filters": built}}
    if order_by is not None:
        structured["orderBy"] = [
            {
                "field": {"fieldPath": field_path(order_by)},
                "direction": "DESCENDING" if descending else "ASCENDING",
            }
        ]
    if offset:
        structured["offset"] = offset
    if limit:
        structured["limit"] = limit
    return structured


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin).

    Documents are addressed by (collection, id); results are (id, fields)
    pairs with fields already decoded.
    """

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def _doc_url(self, collection_id: str, document_id: str) -> str:
        return f"{_BASE}/{self._prefix}/{collection_id}/{quote(document_id, safe='')}"

    async def get_document(
        self, collection_id: str, document_id: str
    ) -> tuple[str, dict] | None:
        """Fetch one document; None if not found."""
        out = await _request_async(
            self._http,
            self._doc_url(collection_id, document_id),
            access_token=await self.get_token(),
        )
        if not out:
            return None
        return document_id, decode_fields(out.get("fields"))

    async def create_document(
        self, collection_id: str, document_id: str, data: dict[str, Any]
    ) -> None:
        """Create a document with the given ID (DocumentExistsError if it exists)."""
        url = f"{_BASE}/{self._prefix}/{collection_id}"
        await _request_async(
            self._http,
            url,
            method="POST",
            body=encode_document(data),
            access_token=await self.get_token(),
            params=[("documentId", document_id)],
        )

    async def patch_document(
        self, collection_id: str, document_id: str, data: dict[str, Any]
    ) -> tuple[str, dict] | None:
        """Merge top-level fields into an existing document.

        Only the keys in data are written (updateMask); the currentDocument
        precondition makes a missing document come back as None instead of
        being created.
        """
        params = [("updateMask.fieldPaths", field_path(k)) for k in data]
        params.append(("currentDocument.exists", "true"))
        out = await _request_async(
            self._http,
            self._doc_url(collection_id, document_id),
            method="PATCH",
            body=encode_document(data),
            access_token=await self.get_token(),
            params=params,
        )
        if not out:
            return None
        return document_id, decode_fields(out.get("fields"))

    async def delete_document(self, collection_id: str, document_id: str) -> bool:
        """Delete a document; False if it did not exist."""
        out = await _request_async(
            self._http,
            self._doc_url(collection_id, document_id),
            method="DELETE",
            access_token=await self.get_token(),
            params=[("currentDocument.exists", "true")],
        )
        return out is not None

    async def run_query(self, structured: dict[str, Any]) -> list[tuple[str, dict]]:
        """Execute a StructuredQuery and return (id, fields) pairs in result order."""
        resp = await _request_async(
            self._http,
            f"{_BASE}/{self._prefix}:runQuery",
            method="POST",
            body={"structuredQuery": structured},
            access_token=await self.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        results: list[tuple[str, dict]] = []
        for item in items:
            if "document" not in item:
                continue
            doc = item["document"]
            name = doc.get("name", "")
            doc_id = name.split("/")[-1] if name else ""
            results.append((doc_id, decode_fields(doc.get("fields"))))
        return results

    async def run_aggregation(
        self, structured: dict[str, Any], aggregations: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Execute aggregations over a StructuredQuery; returns alias -> value.

        Aggregations are sent in chunks of MAX_AGGREGATIONS.
        """
        values: dict[str, Any] = {}
        for start in range(0, len(aggregations), MAX_AGGREGATIONS):
            chunk = aggregations[start : start + MAX_AGGREGATIONS]
            resp = await _request_async(
                self._http,
                f"{_BASE}/{self._prefix}:runAggregationQuery",
                method="POST",
                body={
                    "structuredAggregationQuery": {
                        "structuredQuery": structured,
                        "aggregations": chunk,
                    }
                },
                access_token=await self.get_token(),
            )
            items = resp if isinstance(resp, list) else ([resp] if resp else [])
            for item in items:
                fields = (item.get("result") or {}).get("aggregateFields") or {}
                for alias, raw in fields.items():
                    values[alias] = decode_value(raw)
        return values
