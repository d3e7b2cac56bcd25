"""Review (resena) repository: entity listings, rating summaries and moderation."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import COLLECTION_REVIEWS, COLLECTION_USERS, PARENT_USER
from app.domain.enums import ReviewStatus
from app.domain.state_machines import REVIEW_MODERATION_TRANSITIONS, check_transition
from app.infrastructure.cache.keys import ref_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.datetime import utc_now_iso

USER_AXIS = Axis("usuarioId", parent=PARENT_USER)
STATUS_AXIS = Axis("estado")

ASPECTS = ("limpieza", "ubicacion", "servicios", "relacionCalidadPrecio")
RATING_SEGMENT = "calificacion"


class ReviewRepository(CachedRepository):
    """Resenas. Hard delete; only aprobada reviews are listed per entity and rated."""

    collection = COLLECTION_REVIEWS
    axes = (USER_AXIS, STATUS_AXIS)
    filter_map = {
        "entidadTipo": ("entidad.tipo", "=="),
        "entidadId": ("entidad.id", "=="),
        "calificacionMin": ("calificacion", ">="),
    }

    def _entity_key(self, entity_type: str, entity_id: str) -> str:
        return ref_key(self.entity, entity_type, entity_id)

    def _rating_key(self, entity_type: str, entity_id: str) -> str:
        return ref_key(self.entity, entity_type, entity_id, family=RATING_SEGMENT)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        target = record.get("entidad") or {}
        if not (target.get("tipo") and target.get("id")):
            return set()
        return {
            self._entity_key(target["tipo"], target["id"]),
            self._rating_key(target["tipo"], target["id"]),
        }

    async def _expand(self, record: dict[str, Any]) -> dict[str, Any]:
        author = await self._summary(COLLECTION_USERS, record.get("usuarioId"), ("nombre",))
        return {**record, "usuario": author}

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data["estado"] = ReviewStatus.PENDIENTE.value
        return data

    async def by_entity(self, entity_type: str, entity_id: str) -> list[dict[str, Any]]:
        """Approved reviews of one building/office/space, newest first."""
        return await self.find_cached(
            self._entity_key(entity_type, entity_id),
            self._approved_filters(entity_type, entity_id),
            order_by="createdAt",
            descending=True,
        )

    async def by_user(self, user_id: str) -> list[dict[str, Any]]:
        return await self.by_axis(USER_AXIS, user_id)

    async def pending(self) -> list[dict[str, Any]]:
        return await self.by_axis(STATUS_AXIS, ReviewStatus.PENDIENTE.value)

    def _approved_filters(self, entity_type: str, entity_id: str) -> list[FieldFilter]:
        return [
            FieldFilter("entidad.tipo", "==", entity_type),
            FieldFilter("entidad.id", "==", entity_id),
            FieldFilter("estado", "==", ReviewStatus.APROBADA.value),
        ]

    async def compute_rating(self, entity_type: str, entity_id: str) -> dict[str, Any]:
        """Aggregate approved reviews straight from the store (no cache)."""
        result = await self.store.aggregate(
            self.collection,
            self._approved_filters(entity_type, entity_id),
            average_fields=("calificacion", *(f"aspectos.{a}" for a in ASPECTS)),
        )
        averages = result["averages"]

        def rounded(value: Any) -> float:
            return round(float(value), 2) if value is not None else 0.0

        return {
            "entidad": {"tipo": entity_type, "id": entity_id},
            "promedio": rounded(averages.get("calificacion")),
            "total": result["count"],
            "aspectos": {a: rounded(averages.get(f"aspectos.{a}")) for a in ASPECTS},
        }

    async def rating_summary(self, entity_type: str, entity_id: str) -> dict[str, Any]:
        """Cached rating summary: {entidad, promedio, total, aspectos}."""
        return await self._read_through(
            self._rating_key(entity_type, entity_id),
            lambda: self.compute_rating(entity_type, entity_id),
        )

    async def moderate(
        self, entity_id: str, status: str, reason: str | None = None
    ) -> tuple[dict[str, Any], dict[str, Any]] | None:
        """Approve or reject a pending review; returns (before, after) or None if missing."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        check_transition(REVIEW_MODERATION_TRANSITIONS, "reseña", current.get("estado"), status)
        changes: dict[str, Any] = {"estado": status, "fechaModeracion": utc_now_iso()}
        if status == ReviewStatus.RECHAZADA.value:
            changes["motivoRechazo"] = reason
        return await self._update_raw(entity_id, changes)

    async def update_with_image(
        self, entity_id: str, changes: dict[str, Any]
    ) -> tuple[dict[str, Any], dict[str, Any]] | None:
        """Update returning (before, after) so callers can tell whether calificacion changed."""
        return await self._update_raw(entity_id, changes)

    async def delete_returning(self, entity_id: str) -> dict[str, Any] | None:
        """Hard delete returning the removed record (None if it did not exist)."""
        before = await self.store.get(self.collection, entity_id)
        if before is None:
            return None
        if not await self.store.delete(self.collection, entity_id):
            return None
        await self._on_after_delete(before)
        return before
