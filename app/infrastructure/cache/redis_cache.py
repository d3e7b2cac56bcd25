"""Redis-based cache service for repository read-through caching.

Provides async Redis caching with fixed per-key TTL. Values are stored as
JSON; the cache is never the source of truth, so every failure here is
logged and reported as a miss or a no-op. Key format lives in
app.infrastructure.cache.keys (DRY).
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import redis.asyncio as redis

from app.core.config import get_settings

logger = logging.getLogger(__name__)

_GLOB_SPECIALS = re.compile(r"([*?\[\]\\])")


def escape_glob(value: str) -> str:
    """Escape Redis MATCH glob characters so value matches literally."""
    return _GLOB_SPECIALS.sub(r"\\\1", value)


class CacheService:
    """Async Redis cache service with TTL support.

    Uses app.core.config for connection settings. Call connect() at
    startup and disconnect() at shutdown. Connection errors trigger one
    reconnect attempt, then the call degrades (None / False / 0).
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
                await self.redis.ping()
                self._connected = True
                logger.info(
                    "Redis cache connected: %s:%s",
                    self.settings.redis_host,
                    self.settings.redis_port,
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning(
                    "Redis connection failed: %s. Cache disabled.",
                    e,
                )
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Attempt to reconnect after disconnect. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError as e:
            logger.debug("Ignoring error while closing stale Redis client: %s", e)
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    @staticmethod
    def _decode(key: str, value: str | None) -> Any | None:
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError):
            logger.warning("Cache value for %s is not valid JSON; treating as miss", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return decoded

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable.

        Args:
            key: Cache key (use app.infrastructure.cache.keys builders).

        Returns:
            Cached value or None.
        """
        if not self.is_available() or self.redis is None:
            return None
        try:
            return self._decode(key, await self.redis.get(key))
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    return self._decode(key, await self.redis.get(key))
                except redis.RedisError:
                    logger.exception("Cache get error for key %s after reconnect", key)
                    return None
            logger.warning("Cache get unavailable for key %s (Redis disconnected)", key)
            return None
        except redis.RedisError:
            logger.exception("Cache get error for key %s", key)
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with a fixed TTL. Returns True on success.

        Args:
            key: Cache key.
            value: Value to cache (JSON-serializable).
            ttl: Time-to-live in seconds (default settings.cache_ttl_default).

        Returns:
            True if stored, False otherwise.
        """
        if not self.is_available() or self.redis is None:
            return False
        ttl = ttl or self.settings.cache_ttl_default
        serialized = json.dumps(value, default=str)
        try:
            await self.redis.setex(key, ttl, serialized)
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
            return True
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    await self.redis.setex(key, ttl, serialized)
                    return True
                except redis.RedisError:
                    logger.exception("Cache set error for key %s after reconnect", key)
                    return False
            logger.warning("Cache set unavailable for key %s (Redis disconnected)", key)
            return False
        except redis.RedisError:
            logger.exception("Cache set error for key %s", key)
            return False

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if the command ran.

        Args:
            key: Cache key to delete.
        """
        if not self.is_available() or self.redis is None:
            return False
        try:
            await self.redis.delete(key)
            logger.debug("Cache DELETE: %s", key)
            return True
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    await self.redis.delete(key)
                    return True
                except redis.RedisError:
                    logger.exception("Cache delete error for key %s after reconnect", key)
                    return False
            logger.warning("Cache delete unavailable for key %s (Redis disconnected)", key)
            return False
        except redis.RedisError:
            logger.exception("Cache delete error for key %s", key)
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking).

        Uses scan_iter to avoid KEYS blocking; collects keys in chunks and
        UNLINKs each chunk to minimize round-trips and keep deletion async on server.

        Args:
            pattern: Redis SCAN match pattern (e.g. reservas:fechas:*).

        Returns:
            Number of keys deleted.
        """
        if not self.is_available() or self.redis is None:
            return 0
        chunk_size = 500
        deleted = 0
        try:
            chunk: list[str] = []
            async for key in self.redis.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= chunk_size:
                    deleted += await self._unlink(chunk)
                    chunk = []
            if chunk:
                deleted += await self._unlink(chunk)
            if deleted > 0:
                logger.debug("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
            return deleted
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                return await self.delete_pattern(pattern)
            logger.warning(
                "Cache delete_pattern unavailable for %s (Redis disconnected)", pattern
            )
            return 0
        except redis.RedisError:
            logger.exception("Cache delete_pattern error for %s", pattern)
            return 0

    async def _unlink(self, keys: list[str]) -> int:
        async with self.redis.pipeline(transaction=False) as pipe:
            pipe.unlink(*keys)
            results = await pipe.execute()
        return sum(int(r or 0) for r in results)

    async def invalidate_prefix(self, prefix: str) -> int:
        """Delete every key that starts with prefix (literal match, then '*').

        Args:
            prefix: Key prefix from app.infrastructure.cache.keys (e.g. list_prefix).

        Returns:
            Number of keys deleted.
        """
        return await self.delete_pattern(f"{escape_glob(prefix)}*")

    async def clear_all(self) -> bool:
        """Clear entire cache. Use with caution.

        Returns:
            True if cleared, False otherwise.
        """
        if not self.is_available() or self.redis is None:
            return False
        try:
            await self.redis.flushdb()
            logger.warning("Cache CLEARED: all keys deleted")
            return True
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    await self.redis.flushdb()
                    return True
                except redis.RedisError:
                    logger.exception("Cache clear error after reconnect")
                    return False
            return False
        except redis.RedisError:
            logger.exception("Cache clear error")
            return False
