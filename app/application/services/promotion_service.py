"""Promotion validation: is a code usable right now for a given entity?"""

from __future__ import annotations

from datetime import date
from typing import Any

from app.core.constants import ACTIVE_FIELD
from app.domain.rules import has_capacity, in_window
from app.shared.utils.datetime import today_iso

MSG_INVALID = "Código de promoción inválido o expirado"
MSG_WRONG_TYPE = "Esta promoción no aplica para este tipo de reserva"
MSG_WRONG_ENTITY = "Esta promoción no aplica para esta entidad específica"
MSG_EXHAUSTED = "Esta promoción ha alcanzado su límite de usos"
MSG_VALID = "Promoción válida"


class PromotionService:
    """Evaluate promotion codes against activo, the date window, the usage cap and applicability."""

    def __init__(self, promotion_repo: Any) -> None:
        self._promotions = promotion_repo

    async def validate(
        self,
        code: str,
        entity_type: str | None = None,
        entity_id: str | None = None,
        today: str | date | None = None,
    ) -> dict[str, Any]:
        """Return {valido, mensaje, promocion?}; promocion is present only when valido."""
        day = str(today) if today is not None else today_iso()
        promotion = await self._promotions.by_code(code)
        if promotion is None or not promotion.get(ACTIVE_FIELD) or not in_window(promotion, day):
            return {"valido": False, "mensaje": MSG_INVALID}

        applicable = promotion.get("aplicableA") or {}
        if applicable.get("entidad"):
            if applicable["entidad"] != entity_type:
                return {"valido": False, "mensaje": MSG_WRONG_TYPE}
            ids = applicable.get("ids") or []
            if ids and entity_id not in ids:
                return {"valido": False, "mensaje": MSG_WRONG_ENTITY}

        if not has_capacity(promotion):
            return {"valido": False, "mensaje": MSG_EXHAUSTED}

        return {"valido": True, "mensaje": MSG_VALID, "promocion": promotion}
