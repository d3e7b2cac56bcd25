"""Tests for the Redis CacheService with a mocked client (no Redis needed)."""

import json
from unittest.mock import AsyncMock, MagicMock

import redis.asyncio as redis

from app.infrastructure.cache.redis_cache import CacheService, escape_glob


def make_service() -> tuple[CacheService, AsyncMock]:
    client = AsyncMock()
    return CacheService(redis_client=client), client


async def test_get_decodes_json() -> None:
    service, client = make_service()
    client.get.return_value = json.dumps({"id": "a1"})
    assert await service.get("id:a1-edificios") == {"id": "a1"}


async def test_get_miss_and_garbage_are_none() -> None:
    service, client = make_service()
    client.get.return_value = None
    assert await service.get("k") is None
    client.get.return_value = "{not json"
    assert await service.get("k") is None


async def test_set_uses_fixed_ttl() -> None:
    service, client = make_service()
    assert await service.set("k", [1, 2], ttl=120) is True
    client.setex.assert_awaited_once_with("k", 120, "[1, 2]")


async def test_redis_error_degrades_to_miss() -> None:
    service, client = make_service()
    client.get.side_effect = redis.RedisError("boom")
    assert await service.get("k") is None
    client.setex.side_effect = redis.RedisError("boom")
    assert await service.set("k", 1, ttl=5) is False


async def test_unavailable_service_is_noop() -> None:
    service = CacheService()
    assert service.is_available() is False
    assert await service.get("k") is None
    assert await service.set("k", 1) is False
    assert await service.delete("k") is False
    assert await service.invalidate_prefix("edificios:{") == 0


async def test_invalidate_prefix_scans_escaped_pattern() -> None:
    service, client = make_service()

    async def scan_iter(match: str):
        assert match == "edificios:ciudad:Cali\\*x*"
        for key in ("edificios:ciudad:Cali*x", "edificios:ciudad:Cali*x2"):
            yield key

    client.scan_iter = MagicMock(side_effect=scan_iter)
    pipe = AsyncMock()
    pipe.unlink = MagicMock()
    pipe.execute.return_value = [2]
    client.pipeline = MagicMock(return_value=_AsyncContext(pipe))

    assert await service.invalidate_prefix("edificios:ciudad:Cali*x") == 2
    pipe.unlink.assert_called_once_with("edificios:ciudad:Cali*x", "edificios:ciudad:Cali*x2")


class _AsyncContext:
    def __init__(self, value) -> None:
        self.value = value

    async def __aenter__(self):
        return self.value

    async def __aexit__(self, *exc) -> bool:
        return False


def test_escape_glob() -> None:
    assert escape_glob("a*b?c[d]") == "a\\*b\\?c\\[d\\]"


async def test_clear_all_flushes_db() -> None:
    service, client = make_service()
    assert await service.clear_all() is True
    client.flushdb.assert_awaited_once()
    client.flushdb.side_effect = redis.RedisError("boom")
    assert await service.clear_all() is False
