"""Cache key builders. Single place for key format (DRY).

Key families, one per query shape:

    id:{id}-{entity}                                   by id
    {entity}:{filtersJSON}:skip={n}:limit={m}          filtered list
    {parent}:{parentId}-{entity}                       by foreign key
    {entity}:{field}:{value}                           by classifying value
    {entity}:{axis}:{start}-{end}                      by range
    {entity}:{family}:{tipo}:{refId}                   by polymorphic reference

Builders are pure: the same query shape always yields the same bytes.
Filter objects are serialized with sorted keys and None values dropped,
so field order and unset filters never change the key.
"""

import json
from typing import Any
from urllib.parse import quote

from app.core.constants import CACHE_KEY_SEP, CACHE_PARENT_SEP, CACHE_PREFIX_ID


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator.

    Entity and field names are code constants; this guards against a
    builder being called with a user-supplied value in the wrong slot.
    """
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def _format_value(value: Any) -> str:
    """Render a classifying value: booleans lowercase, glob characters escaped."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return quote(str(value), safe="-_.@")


def canonical_filters(filters: dict[str, Any] | None) -> str:
    """Serialize a filter object to stable JSON (sorted keys, no None values)."""
    cleaned = {k: v for k, v in (filters or {}).items() if v is not None}
    return json.dumps(cleaned, sort_keys=True, separators=(",", ":"), default=str)


def id_key(entity: str, entity_id: str) -> str:
    """Cache key for a record by id: id:{id}-{entity}."""
    _validate_key_component(entity, "entity")
    return (
        f"{CACHE_PREFIX_ID}{CACHE_KEY_SEP}{_format_value(entity_id)}"
        f"{CACHE_PARENT_SEP}{entity}"
    )


def list_prefix(entity: str) -> str:
    """Prefix shared by every filtered-list key of an entity (wholesale invalidation)."""
    _validate_key_component(entity, "entity")
    return f"{entity}{CACHE_KEY_SEP}{{"


def list_key(entity: str, filters: dict[str, Any] | None, skip: int, limit: int) -> str:
    """Cache key for a filtered, paginated list."""
    _validate_key_component(entity, "entity")
    return (
        f"{entity}{CACHE_KEY_SEP}{canonical_filters(filters)}"
        f"{CACHE_KEY_SEP}skip={skip}{CACHE_KEY_SEP}limit={limit}"
    )


def parent_key(parent: str, parent_id: Any, entity: str) -> str:
    """Cache key for the children of a parent record: {parent}:{parentId}-{entity}."""
    _validate_key_component(entity, "entity")
    return (
        f"{parent}{CACHE_KEY_SEP}{_format_value(parent_id)}"
        f"{CACHE_PARENT_SEP}{entity}"
    )


def field_key(entity: str, field: str, value: Any) -> str:
    """Cache key for records with a classifying value: {entity}:{field}:{value}."""
    _validate_key_component(entity, "entity")
    _validate_key_component(field, "field")
    return f"{entity}{CACHE_KEY_SEP}{field}{CACHE_KEY_SEP}{_format_value(value)}"


def range_prefix(entity: str, axis: str) -> str:
    """Prefix shared by every range key of one axis."""
    _validate_key_component(entity, "entity")
    _validate_key_component(axis, "axis")
    return f"{entity}{CACHE_KEY_SEP}{axis}{CACHE_KEY_SEP}"


def range_key(entity: str, axis: str, start: Any, end: Any) -> str:
    """Cache key for a range query: {entity}:{axis}:{start}-{end}."""
    return (
        f"{range_prefix(entity, axis)}{_format_value(start)}"
        f"{CACHE_PARENT_SEP}{_format_value(end)}"
    )


def ref_key(entity: str, ref_type: Any, ref_id: Any, family: str = "entidad") -> str:
    """Cache key for records pointing at a typed reference: {entity}:{family}:{tipo}:{id}.

    The reference type comes from the caller, so it is kept under the entity's
    own namespace and escaped like any value; it can never produce a parent
    or id key.
    """
    _validate_key_component(entity, "entity")
    _validate_key_component(family, "family")
    return (
        f"{entity}{CACHE_KEY_SEP}{family}{CACHE_KEY_SEP}"
        f"{_format_value(ref_type)}{CACHE_KEY_SEP}{_format_value(ref_id)}"
    )
