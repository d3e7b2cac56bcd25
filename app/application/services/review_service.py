"""Review application service: review writes plus the aggregate-rating hook.

After a review is created, deleted, moderated, or has its calificacion
changed, the approved-review average of the reviewed entity is recomputed
and pushed into that entity's repository. A failed push never undoes the
review write; the caller gets a warning string instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.application.interfaces.repositories import IRatedEntityRepository
from app.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)

RATING_WARNING = "La reseña se guardó, pero no se pudo actualizar la calificación de la entidad"


class ReviewService:
    """Create/update/delete/moderate reviews and keep entity ratings in step."""

    def __init__(
        self,
        review_repo: Any,
        rated_repos: Mapping[str, IRatedEntityRepository],
    ) -> None:
        self._reviews = review_repo
        self._rated = rated_repos

    async def refresh_rating(self, entity: dict[str, Any] | None) -> str | None:
        """Recompute and push the rating of entity {tipo, id}; return a warning on failure."""
        if not entity or not entity.get("tipo") or not entity.get("id"):
            return None
        entity_type, entity_id = entity["tipo"], entity["id"]
        repo = self._rated.get(entity_type)
        if repo is None:
            logger.warning("No rated repository registered for %s", entity_type)
            return RATING_WARNING
        try:
            summary = await self._reviews.compute_rating(entity_type, entity_id)
            updated = await repo.update_aggregate_rating(
                entity_id, summary["promedio"], summary["total"]
            )
        except Exception:
            logger.warning(
                "Rating push failed for %s %s", entity_type, entity_id, exc_info=True
            )
            return RATING_WARNING
        if updated is None:
            logger.warning("Rated entity %s %s not found", entity_type, entity_id)
            return RATING_WARNING
        return None

    async def create(self, data: dict[str, Any]) -> tuple[dict[str, Any], str | None]:
        review = await self._reviews.create(data)
        warning = await self.refresh_rating(review.get("entidad"))
        return review, warning

    async def update(
        self, review_id: str, changes: dict[str, Any]
    ) -> tuple[dict[str, Any], str | None]:
        """Update a review; the rating is recomputed only when calificacion changed."""
        if "estado" in changes:
            raise ValidationException(
                "El estado de una reseña solo se cambia moderándola", field="estado"
            )
        result = await self._reviews.update_with_image(review_id, changes)
        if result is None:
            raise ResourceNotFoundException("reseña", review_id)
        before, after = result
        warning = None
        if before.get("calificacion") != after.get("calificacion"):
            warning = await self.refresh_rating(after.get("entidad"))
        return after, warning

    async def delete(self, review_id: str) -> str | None:
        before = await self._reviews.delete_returning(review_id)
        if before is None:
            raise ResourceNotFoundException("reseña", review_id)
        return await self.refresh_rating(before.get("entidad"))

    async def moderate(
        self, review_id: str, status: str, reason: str | None = None
    ) -> tuple[dict[str, Any], str | None]:
        result = await self._reviews.moderate(review_id, status, reason)
        if result is None:
            raise ResourceNotFoundException("reseña", review_id)
        _, after = result
        warning = await self.refresh_rating(after.get("entidad"))
        return after, warning
