"""Cache protocol for the repository layer (DIP)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for cache backends (Redis in production, in-memory in tests)."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> Any:
        """Store value with a fixed TTL in seconds."""
        ...

    async def delete(self, key: str) -> Any:
        """Remove key from cache."""
        ...

    async def invalidate_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix; return the number removed."""
        ...
