"""Notification (notificacion) repository."""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import COLLECTION_NOTIFICATIONS, PARENT_USER
from app.domain.enums import NotificationPriority
from app.infrastructure.cache.keys import field_key, ref_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.datetime import utc_now_iso

USER_AXIS = Axis("usuarioId", parent=PARENT_USER)
TYPE_AXIS = Axis("tipo")


class NotificationRepository(CachedRepository):
    """Notificaciones. Hard delete; per-user unread lists have their own key."""

    collection = COLLECTION_NOTIFICATIONS
    axes = (USER_AXIS, TYPE_AXIS)
    filter_map = {
        "entidadTipo": ("entidadRelacionada.tipo", "=="),
        "entidadId": ("entidadRelacionada.id", "=="),
    }

    def _unread_key(self, user_id: str) -> str:
        return field_key(self.entity, "no-leidas", user_id)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        keys = set()
        if record.get("usuarioId"):
            keys.add(self._unread_key(record["usuarioId"]))
        related = record.get("entidadRelacionada") or {}
        if related.get("tipo") and related.get("id"):
            keys.add(ref_key(self.entity, related["tipo"], related["id"]))
        return keys

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data["leido"] = False
        data["fechaLectura"] = None
        data.setdefault("prioridad", NotificationPriority.MEDIA.value)
        return data

    async def by_user(self, user_id: str, unread_only: bool = False) -> list[dict[str, Any]]:
        """A user's notifications, newest first; unread_only restricts to leido=false."""
        filters = [FieldFilter("usuarioId", "==", user_id)]
        key = USER_AXIS.key_for(self.entity, user_id)
        if unread_only:
            filters.append(FieldFilter("leido", "==", False))
            key = self._unread_key(user_id)
        return await self.find_cached(key, filters, order_by="createdAt", descending=True)

    async def by_type(self, notification_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(TYPE_AXIS, notification_type)

    async def by_entity(self, entity_type: str, entity_id: str) -> list[dict[str, Any]]:
        return await self.find_cached(
            ref_key(self.entity, entity_type, entity_id),
            [
                FieldFilter("entidadRelacionada.tipo", "==", entity_type),
                FieldFilter("entidadRelacionada.id", "==", entity_id),
            ],
        )

    async def mark_read(self, entity_id: str) -> dict[str, Any] | None:
        return await self.update(entity_id, {"leido": True, "fechaLectura": utc_now_iso()})

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of a user as read; returns how many changed."""
        unread = await self.store.find(
            self.collection,
            [FieldFilter("usuarioId", "==", user_id), FieldFilter("leido", "==", False)],
        )
        for notification in unread:
            await self.mark_read(notification["id"])
        return len(unread)
