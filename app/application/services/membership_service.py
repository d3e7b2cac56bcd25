"""Membership subscription service: writes the membresia snapshot onto the user."""

from __future__ import annotations

from datetime import date
from typing import Any

from app.core.constants import ACTIVE_FIELD
from app.domain.exceptions import ConflictException, ResourceNotFoundException
from app.domain.rules import DEFAULT_MEMBERSHIP_DAYS
from app.shared.utils.datetime import add_days, parse_date, today_iso, utc_now_iso


class MembershipService:
    """Subscribe users to plans, cancel subscriptions, read a user's membership."""

    def __init__(self, membership_repo: Any, user_repo: Any) -> None:
        self._memberships = membership_repo
        self._users = user_repo

    async def _require_user(self, user_id: str) -> dict[str, Any]:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("usuario", user_id)
        return user

    async def subscribe(
        self,
        user_id: str,
        membership_id: str,
        start: str | date | None = None,
        auto_renew: bool = False,
        payment_method_id: str | None = None,
        promo_code: str | None = None,
    ) -> dict[str, Any]:
        """Subscribe a user; fechaVencimiento = fechaInicio + duracion days. Returns the user."""
        await self._require_user(user_id)
        membership = await self._memberships.get_by_id(membership_id)
        if membership is None:
            raise ResourceNotFoundException("membresía", membership_id)
        if membership.get(ACTIVE_FIELD) is False:
            raise ConflictException(
                "La membresía no está activa",
                {"membresiaId": membership_id},
                field="membresiaId",
            )
        start_day = parse_date(start).isoformat() if start else today_iso()
        duration = membership.get("duracion") or DEFAULT_MEMBERSHIP_DAYS
        snapshot: dict[str, Any] = {
            "membresiaId": membership_id,
            "tipo": membership.get("tipo"),
            "fechaInicio": start_day,
            "fechaVencimiento": add_days(start_day, duration),
            "renovacionAutomatica": auto_renew,
            "metodoPagoId": payment_method_id,
        }
        if promo_code:
            snapshot["codigoPromocional"] = promo_code
        updated = await self._users.set_membership(user_id, snapshot)
        if updated is None:
            raise ResourceNotFoundException("usuario", user_id)
        return updated

    async def cancel(
        self,
        user_id: str,
        membership_id: str,
        reason: str | None = None,
        cancelled_on: str | date | None = None,
        partial_refund: bool = False,
    ) -> dict[str, Any]:
        """Mark the user's current subscription cancelled (the snapshot stays, with metadata)."""
        user = await self._require_user(user_id)
        current = user.get("membresia") or {}
        if current.get("membresiaId") != membership_id:
            raise ConflictException(
                "El usuario no está suscrito a esta membresía",
                {"usuarioId": user_id, "membresiaId": membership_id},
                field="membresiaId",
            )
        snapshot = {
            **current,
            "renovacionAutomatica": False,
            "cancelada": True,
            "fechaCancelacion": (
                parse_date(cancelled_on).isoformat() if cancelled_on else utc_now_iso()
            ),
            "motivoCancelacion": reason,
            "reembolsoParcial": partial_refund,
        }
        updated = await self._users.set_membership(user_id, snapshot)
        if updated is None:
            raise ResourceNotFoundException("usuario", user_id)
        return updated

    async def user_membership(self, user_id: str) -> dict[str, Any]:
        """Return {usuarioId, membresia (snapshot or None), plan (current plan record or None)}."""
        user = await self._require_user(user_id)
        snapshot = user.get("membresia")
        plan = None
        if snapshot and snapshot.get("membresiaId"):
            plan = await self._memberships.get_by_id(snapshot["membresiaId"])
        return {"usuarioId": user_id, "membresia": snapshot, "plan": plan}
