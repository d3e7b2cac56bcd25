"""Base repository: read-through cache over the document store, write paths and invalidation.

Each subclass names its collection and declares its lookup axes. An axis is
a record field whose value selects a cached result set, e.g. edificios by
direccion.ciudad. On every mutation the repository deletes:

- the record's by-id key;
- every filtered-list key (prefix scan, the family is open-ended);
- every range key of the entity (prefix scan);
- for each axis, the key of the value held before and the value held after.

The cache is never authoritative. A failing or garbled cache turns into a
store read; a failing invalidation is logged and the write still succeeds.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from app.application.interfaces.document_store import DocumentStoreProtocol, FieldFilter
from app.core.constants import ACTIVE_FIELD
from app.infrastructure.cache.cache_protocol import CacheProtocol
from app.infrastructure.cache.keys import (
    field_key,
    id_key,
    list_key,
    list_prefix,
    parent_key,
    range_prefix,
)
from app.shared.utils.datetime import utc_now_iso
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)

_MISSING = object()


def get_path(record: dict[str, Any] | None, path: str) -> Any:
    """Return the value at a dotted path, or None if any segment is missing."""
    value: Any = record
    for segment in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(segment)
    return value


def _flatten(value: Any) -> list[Any]:
    """Axis values: scalars as one value, lists as their non-None items, None as nothing."""
    if value is None:
        return []
    if isinstance(value, list):
        return [v for v in value if v is not None and not isinstance(v, (dict, list))]
    return [value]


@dataclass(frozen=True, slots=True)
class Axis:
    """A cached lookup axis.

    path: dotted document path holding the value (list-valued fields give one key per item).
    parent: when set, keys are {parent}:{value}-{entity}; otherwise {entity}:{name}:{value}.
    name: key segment for field-style axes (defaults to the last path segment).
    many: the field holds a list; lookups use array-contains.
    """

    path: str
    parent: str | None = None
    name: str | None = None
    many: bool = False

    def key_for(self, entity: str, value: Any) -> str:
        if self.parent:
            return parent_key(self.parent, value, entity)
        return field_key(entity, self.name or self.path.rsplit(".", 1)[-1], value)

    def keys(self, entity: str, record: dict[str, Any] | None) -> set[str]:
        return {self.key_for(entity, v) for v in _flatten(get_path(record, self.path))}


class CachedRepository:
    """Base repository with cached reads, create/update/delete and invalidation hooks.

    Subclasses set collection and axes, and override _on_after_create,
    _on_after_update, _on_after_delete (calling super) or the narrower
    _extra_keys/_extra_prefixes for entity-specific cache families.
    """

    collection: ClassVar[str]
    axes: ClassVar[tuple[Axis, ...]] = ()
    range_axes: ClassVar[tuple[str, ...]] = ()
    soft_deletable: ClassVar[bool] = False
    # filter name -> (document path, operator); unnamed filters are equality on the same path
    filter_map: ClassVar[dict[str, tuple[str, str]]] = {}
    default_order: ClassVar[str | None] = None

    def __init__(
        self,
        store: DocumentStoreProtocol,
        cache: CacheProtocol | None = None,
        *,
        cache_ttl: int = 3600,
    ) -> None:
        self.store = store
        self.cache = cache
        self.cache_ttl = cache_ttl

    @property
    def entity(self) -> str:
        """Entity segment of every cache key (the collection name)."""
        return self.collection

    def _all_axes(self) -> tuple[Axis, ...]:
        if self.soft_deletable:
            return (*self.axes, Axis(ACTIVE_FIELD))
        return self.axes

    # ------------------------------------------------------------------ cache

    def _cache_ready(self) -> bool:
        if self.cache is None:
            return False
        try:
            return bool(self.cache.is_available())
        except Exception:
            logger.warning("Cache availability check failed for %s", self.entity, exc_info=True)
            return False

    async def _cache_get(self, key: str) -> Any:
        """Return the cached value for key, or _MISSING on miss, cache error or parse failure."""
        if not self._cache_ready():
            return _MISSING
        try:
            hit = await self.cache.get(key)
        except Exception:
            logger.warning("Cache get failed for %s; reading store", key, exc_info=True)
            return _MISSING
        if hit is None:
            return _MISSING
        if isinstance(hit, (str, bytes)):
            try:
                return json.loads(hit)
            except ValueError:
                logger.warning("Unparseable cache entry for %s; reading store", key)
                return _MISSING
        return hit

    async def _cache_set(self, key: str, value: Any) -> None:
        if not self._cache_ready():
            return
        try:
            await self.cache.set(key, value, ttl=self.cache_ttl)
        except Exception:
            logger.warning("Cache set failed for %s", key, exc_info=True)

    async def _read_through(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        *,
        cache_empty: bool = True,
    ) -> Any:
        """Return the cached value for key, or load it from the store and cache it.

        None results are never cached; empty lists are cached unless cache_empty is False.
        Store errors from loader propagate.
        """
        hit = await self._cache_get(key)
        if hit is not _MISSING:
            return hit
        value = await loader()
        if value is None or (not cache_empty and not value):
            return value
        await self._cache_set(key, value)
        return value

    async def invalidate_keys(self, keys: Iterable[str], prefixes: Iterable[str] = ()) -> None:
        """Delete keys and prefix families; cache errors are logged only."""
        if not self._cache_ready():
            return
        for key in sorted(set(keys)):
            try:
                await self.cache.delete(key)
            except Exception:
                logger.warning("Cache delete failed for %s", key, exc_info=True)
        for prefix in sorted(set(prefixes)):
            try:
                await self.cache.invalidate_prefix(prefix)
            except Exception:
                logger.warning("Cache prefix invalidation failed for %s", prefix, exc_info=True)

    def _record_keys(self, record: dict[str, Any] | None) -> set[str]:
        if not record:
            return set()
        keys = {id_key(self.entity, record["id"])}
        for axis in self._all_axes():
            keys |= axis.keys(self.entity, record)
        keys |= self._extra_keys(record)
        return keys

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        """Entity-specific keys implied by one record (composite axes, summaries)."""
        return set()

    def _extra_prefixes(
        self, before: dict[str, Any] | None, after: dict[str, Any] | None
    ) -> set[str]:
        """Entity-specific prefix families to scan-delete on any mutation."""
        return set()

    async def _invalidate(
        self, before: dict[str, Any] | None, after: dict[str, Any] | None
    ) -> None:
        """Invalidate every key whose result set could differ between before and after."""
        keys = self._record_keys(before) | self._record_keys(after)
        prefixes = {list_prefix(self.entity)}
        prefixes |= {range_prefix(self.entity, axis) for axis in self.range_axes}
        prefixes |= self._extra_prefixes(before, after)
        logger.debug(
            "Invalidating %s: %d keys, %d prefixes", self.entity, len(keys), len(prefixes)
        )
        await self.invalidate_keys(keys, prefixes)

    # ------------------------------------------------------------------ hooks

    async def _on_after_create(self, obj: dict[str, Any]) -> None:
        """Override in subclasses for extra side effects; call super to invalidate."""
        await self._invalidate(None, obj)

    async def _on_after_update(self, before: dict[str, Any], after: dict[str, Any]) -> None:
        """Override in subclasses for extra side effects; call super to invalidate."""
        await self._invalidate(before, after)

    async def _on_after_delete(self, obj: dict[str, Any]) -> None:
        """Override in subclasses for extra side effects; call super to invalidate."""
        await self._invalidate(obj, None)

    # ------------------------------------------------------------------ shaping

    def _public(self, record: dict[str, Any]) -> dict[str, Any]:
        """Return the record as exposed to callers and the cache (override to strip fields)."""
        return record

    async def _expand(self, record: dict[str, Any]) -> dict[str, Any]:
        """Relational expansion: embed summaries of referenced records (override)."""
        return record

    async def _shape(self, record: dict[str, Any] | None) -> dict[str, Any] | None:
        if record is None:
            return None
        return await self._expand(self._public(record))

    async def _shape_many(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return list(await asyncio.gather(*(self._shape(r) for r in records)))

    async def _summary(
        self, collection: str, doc_id: Any, fields: Sequence[str]
    ) -> dict[str, Any] | None:
        """Return {id, *fields} of a referenced document, or None if absent or malformed."""
        if not InputSanitizer.is_identifier(doc_id):
            return None
        doc = await self.store.get(collection, doc_id)
        if doc is None:
            return None
        return {"id": doc["id"], **{f: doc.get(f) for f in fields}}

    # ------------------------------------------------------------------ reads

    def build_filters(self, filters: dict[str, Any] | None) -> list[FieldFilter]:
        """Translate a filter object into store filters via filter_map."""
        built: list[FieldFilter] = []
        for name, value in sorted((filters or {}).items()):
            if value is None:
                continue
            path, op = self.filter_map.get(name, (name, "=="))
            built.append(FieldFilter(path, op, value))
        return built

    def _effective_filters(self, filters: dict[str, Any] | None) -> dict[str, Any]:
        effective = {k: v for k, v in (filters or {}).items() if v is not None}
        if self.soft_deletable and ACTIVE_FIELD not in effective:
            effective[ACTIVE_FIELD] = True
        return effective

    async def _query(
        self,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: str | None = None,
        descending: bool = False,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        records = await self.store.find(
            self.collection,
            filters,
            order_by=order_by or self.default_order,
            descending=descending,
            skip=skip,
            limit=limit,
        )
        return await self._shape_many(records)

    async def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Return one record (expanded) by id, cached only when it exists."""

        async def load() -> dict[str, Any] | None:
            return await self._shape(await self.store.get(self.collection, entity_id))

        return await self._read_through(id_key(self.entity, entity_id), load)

    async def get_all(
        self, filters: dict[str, Any] | None = None, skip: int = 0, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Return a filtered page. Soft-deletable entities default to activo=true."""
        effective = self._effective_filters(filters)

        async def load() -> list[dict[str, Any]]:
            return await self._query(self.build_filters(effective), skip=skip, limit=limit)

        return await self._read_through(
            list_key(self.entity, effective, skip, limit), load
        )

    async def find_cached(
        self,
        key: str,
        filters: Sequence[FieldFilter],
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Read-through for an axis lookup (whole result set under one key)."""

        async def load() -> list[dict[str, Any]]:
            return await self._query(
                filters, order_by=order_by, descending=descending, limit=limit
            )

        return await self._read_through(key, load)

    async def by_axis(self, axis: Axis, value: Any) -> list[dict[str, Any]]:
        """Return every record whose axis field holds value (array-contains for list fields).

        Soft-deletable entities only return active records, except on the activo axis itself.
        """
        op = "array-contains" if axis.many else "=="
        filters = [FieldFilter(axis.path, op, value)]
        if self.soft_deletable and axis.path != ACTIVE_FIELD:
            filters.append(FieldFilter(ACTIVE_FIELD, "==", True))
        return await self.find_cached(axis.key_for(self.entity, value), filters)

    # ------------------------------------------------------------------ writes

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Defaults applied to a new document (override, call super)."""
        if self.soft_deletable:
            data.setdefault(ACTIVE_FIELD, True)
        return data

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Persist a new record and invalidate every family it joins."""
        doc = self._prepare_create({k: v for k, v in data.items() if k != "id"})
        now = utc_now_iso()
        doc["createdAt"] = now
        doc["updatedAt"] = now
        created = await self.store.insert(self.collection, doc)
        await self._on_after_create(created)
        return self._public(created)

    async def _update_raw(
        self, entity_id: str, changes: dict[str, Any]
    ) -> tuple[dict[str, Any], dict[str, Any]] | None:
        before = await self.store.get(self.collection, entity_id)
        if before is None:
            return None
        fields = {k: v for k, v in changes.items() if k not in ("id", "createdAt")}
        fields["updatedAt"] = utc_now_iso()
        after = await self.store.update(self.collection, entity_id, fields)
        if after is None:
            return None
        await self._on_after_update(before, after)
        return before, after

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Merge changes into the record; return the post-image, or None if it does not exist."""
        result = await self._update_raw(entity_id, changes)
        return self._public(result[1]) if result else None

    async def delete(self, entity_id: str) -> bool:
        """Remove the record from the store and invalidate its pre-image families."""
        before = await self.store.get(self.collection, entity_id)
        if before is None:
            return False
        deleted = await self.store.delete(self.collection, entity_id)
        if deleted:
            await self._on_after_delete(before)
        return deleted

    async def soft_delete(self, entity_id: str) -> dict[str, Any] | None:
        """Flag the record inactive (stays in the store, leaves active listings)."""
        return await self.update(entity_id, {ACTIVE_FIELD: False})

    async def activate(self, entity_id: str) -> dict[str, Any] | None:
        """Flag the record active again (rejoins active listings)."""
        return await self.update(entity_id, {ACTIVE_FIELD: True})
