"""Document store port: the system of record every repository reads and writes.

Documents are JSON-native dicts. Reads return the stored fields plus "id";
the id is assigned by the store on insert and is never part of the stored
fields. Implementations raise InvalidIdentifierException for ids outside
the store's id format before doing any I/O.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

FILTER_OPS = frozenset({"==", "!=", "<", "<=", ">", ">=", "in", "array-contains"})


@dataclass(frozen=True, slots=True)
class FieldFilter:
    """One conjunct of a store query. field may be a dotted path (direccion.ciudad)."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly form (used in cache keys and logs)."""
        return {"field": self.field, "op": self.op, "value": self.value}


class DocumentStoreProtocol(Protocol):
    """Protocol for the document store (Firestore in production, in-memory in tests)."""

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return the document with its id, or None if it does not exist."""
        ...

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
        """Return documents matching every filter (AND), ordered and paginated."""
        ...

    async def find_one(
        self, collection: str, filters: Sequence[FieldFilter]
    ) -> dict[str, Any] | None:
        """Return the first matching document, or None."""
        ...

    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Persist a new document under a fresh id; return it with its id."""
        ...

    async def update(
        self, collection: str, doc_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Merge top-level fields into an existing document; return the post-image or None."""
        ...

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Remove a document; return False if it did not exist."""
        ...

    async def aggregate(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        *,
        average_fields: Sequence[str] = (),
    ) -> dict[str, Any]:
        """Return {"count": n, "averages": {field: avg|None}}."""
        ...
