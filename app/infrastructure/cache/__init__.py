"""Cache: Redis service and cache key utilities.

Used by repositories for read-through caching. CacheService uses
app.core.config; key format is in keys.py (DRY).
"""

from app.infrastructure.cache.cache_protocol import CacheProtocol
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
from app.infrastructure.cache.redis_cache import CacheService, escape_glob

__all__ = [
    "CacheProtocol",
    "CacheService",
    "canonical_filters",
    "escape_glob",
    "field_key",
    "id_key",
    "list_key",
    "list_prefix",
    "parent_key",
    "range_key",
    "range_prefix",
    "ref_key",
]
