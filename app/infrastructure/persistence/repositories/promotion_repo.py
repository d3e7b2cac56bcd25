"""Promotion (promocion) repository: unique upper-case code, validity windows, usage counter."""

from __future__ import annotations

from datetime import date
from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import ACTIVE_FIELD, CACHE_KEY_SEP, COLLECTION_PROMOTIONS
from app.domain.exceptions import ConflictException, DuplicateValueException
from app.domain.rules import has_capacity
from app.infrastructure.cache.keys import field_key, range_key, ref_key
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.shared.utils.datetime import add_days, today_iso

CODE_AXIS = Axis("codigo")
TYPE_AXIS = Axis("tipo")
TARGET_AXIS = Axis("aplicableA.entidad", name="entidad")

CURRENT_FAMILY = "vigentes"
EXPIRING_FAMILY = "proximas-expirar"


def normalize_code(code: str) -> str:
    return code.strip().upper()


class PromotionRepository(CachedRepository):
    """Promociones. Soft delete; date families are keyed by the day they were computed."""

    collection = COLLECTION_PROMOTIONS
    soft_deletable = True
    axes = (CODE_AXIS, TYPE_AXIS, TARGET_AXIS)
    range_axes = ("fechas",)
    filter_map = {
        "entidad": ("aplicableA.entidad", "=="),
        "fechaInicioDesde": ("fechaInicio", ">="),
        "fechaFinHasta": ("fechaFin", "<="),
    }

    def _target_key(self, target: str, target_id: str) -> str:
        return ref_key(self.entity, target, target_id)

    def _extra_keys(self, record: dict[str, Any]) -> set[str]:
        applicable = record.get("aplicableA") or {}
        target = applicable.get("entidad")
        if not target:
            return set()
        return {self._target_key(target, i) for i in applicable.get("ids") or [] if i}

    def _extra_prefixes(
        self, before: dict[str, Any] | None, after: dict[str, Any] | None
    ) -> set[str]:
        return {
            field_key(self.entity, CURRENT_FAMILY, ""),
            field_key(self.entity, EXPIRING_FAMILY, ""),
        }

    async def _ensure_unique_code(self, code: str, exclude_id: str | None = None) -> None:
        existing = await self.store.find_one(self.collection, [FieldFilter("codigo", "==", code)])
        if existing is not None and existing["id"] != exclude_id:
            raise DuplicateValueException("promoción", "codigo", code)

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data["codigo"] = normalize_code(data["codigo"])
        data.setdefault("usosActuales", 0)
        data.setdefault("limiteUsuario", 1)
        return data

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a promotion; a taken code fails before any store or cache write."""
        await self._ensure_unique_code(normalize_code(data["codigo"]))
        return await super().create(data)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        if changes.get("codigo") is not None:
            changes = {**changes, "codigo": normalize_code(changes["codigo"])}
            await self._ensure_unique_code(changes["codigo"], exclude_id=entity_id)
        return await super().update(entity_id, changes)

    async def by_code(self, code: str) -> dict[str, Any] | None:
        code = normalize_code(code)

        async def load() -> dict[str, Any] | None:
            return await self.store.find_one(self.collection, [FieldFilter("codigo", "==", code)])

        return await self._read_through(CODE_AXIS.key_for(self.entity, code), load)

    async def current(self, day: str | None = None) -> list[dict[str, Any]]:
        """Active promotions whose window contains day (default today), ending soonest first."""
        day = day or today_iso()

        async def load() -> list[dict[str, Any]]:
            rows = await self.store.find(
                self.collection,
                [FieldFilter(ACTIVE_FIELD, "==", True), FieldFilter("fechaFin", ">=", day)],
                order_by="fechaFin",
            )
            return [r for r in rows if r.get("fechaInicio", "") <= day]

        return await self._read_through(field_key(self.entity, CURRENT_FAMILY, day), load)

    async def by_type(self, promotion_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(TYPE_AXIS, promotion_type)

    async def by_target(self, target: str, target_id: str | None = None) -> list[dict[str, Any]]:
        """Active promotions for an entity kind, optionally restricted to one entity id."""
        if target_id is None:
            return await self.by_axis(TARGET_AXIS, target)
        return await self.find_cached(
            self._target_key(target, target_id),
            [
                FieldFilter("aplicableA.entidad", "==", target),
                FieldFilter("aplicableA.ids", "array-contains", target_id),
                FieldFilter(ACTIVE_FIELD, "==", True),
            ],
        )

    async def by_date_range(self, start: str, end: str) -> list[dict[str, Any]]:
        """Active promotions whose window intersects [start, end]."""
        return await self.find_cached(
            range_key(self.entity, "fechas", start, end),
            [
                FieldFilter(ACTIVE_FIELD, "==", True),
                FieldFilter("fechaInicio", "<=", end),
                FieldFilter("fechaFin", ">=", start),
            ],
        )

    async def expiring(self, days: int = 7, today: date | str | None = None) -> list[dict[str, Any]]:
        """Active promotions ending within the next days days."""
        start = today_iso() if today is None else str(today)
        limit_day = add_days(start, days)
        return await self.find_cached(
            f"{field_key(self.entity, EXPIRING_FAMILY, start)}{CACHE_KEY_SEP}{days}",
            [
                FieldFilter(ACTIVE_FIELD, "==", True),
                FieldFilter("fechaFin", ">=", start),
                FieldFilter("fechaFin", "<=", limit_day),
            ],
            order_by="fechaFin",
        )

    async def increment_uses(self, entity_id: str) -> dict[str, Any] | None:
        """Count one use; a promotion at its cap raises ConflictException."""
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        if not has_capacity(current):
            raise ConflictException(
                "Esta promoción ha alcanzado su límite de usos",
                {"limiteCupos": current.get("limiteCupos")},
            )
        return await super().update(
            entity_id, {"usosActuales": (current.get("usosActuales") or 0) + 1}
        )

    async def update_applicability(
        self, entity_id: str, target: str, target_ids: list[str]
    ) -> dict[str, Any] | None:
        return await super().update(
            entity_id, {"aplicableA": {"entidad": target, "ids": target_ids}}
        )
