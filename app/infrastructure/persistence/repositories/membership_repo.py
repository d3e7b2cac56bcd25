"""Membership plan (membresia) repository."""

from __future__ import annotations

from typing import Any

from app.core.constants import ACTIVE_FIELD, COLLECTION_MEMBERSHIPS
from app.domain.rules import DEFAULT_MEMBERSHIP_DAYS
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository

TYPE_AXIS = Axis("tipo")
ACTIVE_AXIS = Axis(ACTIVE_FIELD)


class MembershipRepository(CachedRepository):
    """Membresias. Soft delete; duracion is the plan length in days."""

    collection = COLLECTION_MEMBERSHIPS
    soft_deletable = True
    axes = (TYPE_AXIS,)
    filter_map = {
        "precioMax": ("precio.valor", "<="),
        "periodicidad": ("precio.periodicidad", "=="),
    }

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("duracion", DEFAULT_MEMBERSHIP_DAYS)
        data.setdefault("beneficios", [])
        return data

    async def by_type(self, membership_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(TYPE_AXIS, membership_type)

    async def active(self) -> list[dict[str, Any]]:
        return await self.by_axis(ACTIVE_AXIS, True)
