"""Repository interfaces (ports) for cross-entity hooks.

Services depend on these protocols, not on concrete repositories (DIP).
"""

from __future__ import annotations

from typing import Any, Protocol


class IRatedEntityRepository(Protocol):
    """Repository of an entity that carries an aggregate rating (building, office, space)."""

    async def update_aggregate_rating(
        self, entity_id: str, average: float, total: int
    ) -> dict[str, Any] | None:
        """Write calificacionPromedio/totalResenas through the update path (invalidates caches)."""
        ...
