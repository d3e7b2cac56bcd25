"""Tests for MembershipService: subscribe, cancel and the user's membership view."""

import pytest

from app.application.services import MembershipService
from app.domain.exceptions import ConflictException, ResourceNotFoundException
from app.infrastructure.persistence.container import Repositories


async def setup(repos: Repositories, **plan) -> tuple[dict, dict]:
    user = await repos.users.create(
        {"username": "lucia", "email": "lucia@example.com", "password": "Secreta123", "nombre": "Lucía"}
    )
    membership = await repos.memberships.create(
        {
            "nombre": "Plan Premium",
            "tipo": "premium",
            "descripcion": "Acceso total",
            "precio": {"valor": 200, "periodicidad": "mensual"},
            "duracion": 30,
            **plan,
        }
    )
    return user, membership


@pytest.fixture
def service(repos: Repositories) -> MembershipService:
    return MembershipService(repos.memberships, repos.users)


async def test_subscribe_computes_expiry(repos: Repositories, service: MembershipService) -> None:
    """2024-01-01 plus a 30-day plan expires on 2024-01-31."""
    user, membership = await setup(repos)
    updated = await service.subscribe(user["id"], membership["id"], "2024-01-01", auto_renew=True)
    snapshot = updated["membresia"]
    assert snapshot["membresiaId"] == membership["id"]
    assert snapshot["tipo"] == "premium"
    assert snapshot["fechaInicio"] == "2024-01-01"
    assert snapshot["fechaVencimiento"] == "2024-01-31"
    assert snapshot["renovacionAutomatica"] is True


async def test_subscribe_to_inactive_plan_conflicts(
    repos: Repositories, service: MembershipService
) -> None:
    user, membership = await setup(repos)
    await repos.memberships.soft_delete(membership["id"])
    with pytest.raises(ConflictException):
        await service.subscribe(user["id"], membership["id"], "2024-01-01")


async def test_subscribe_unknown_user_or_plan(repos: Repositories, service: MembershipService) -> None:
    user, membership = await setup(repos)
    with pytest.raises(ResourceNotFoundException):
        await service.subscribe("nobody", membership["id"])
    with pytest.raises(ResourceNotFoundException):
        await service.subscribe(user["id"], "noplan")


async def test_cancel_keeps_snapshot_with_metadata(
    repos: Repositories, service: MembershipService
) -> None:
    user, membership = await setup(repos)
    await service.subscribe(user["id"], membership["id"], "2024-01-01", auto_renew=True)
    updated = await service.cancel(
        user["id"], membership["id"], "Cambio de ciudad", "2024-01-15", partial_refund=True
    )
    snapshot = updated["membresia"]
    assert snapshot["cancelada"] is True
    assert snapshot["renovacionAutomatica"] is False
    assert snapshot["fechaCancelacion"] == "2024-01-15"
    assert snapshot["motivoCancelacion"] == "Cambio de ciudad"
    assert snapshot["reembolsoParcial"] is True
    assert snapshot["fechaVencimiento"] == "2024-01-31"


async def test_cancel_other_plan_conflicts(repos: Repositories, service: MembershipService) -> None:
    user, membership = await setup(repos)
    with pytest.raises(ConflictException):
        await service.cancel(user["id"], membership["id"])


async def test_user_membership_includes_plan(repos: Repositories, service: MembershipService) -> None:
    user, membership = await setup(repos)
    empty = await service.user_membership(user["id"])
    assert empty == {"usuarioId": user["id"], "membresia": None, "plan": None}
    await service.subscribe(user["id"], membership["id"], "2024-02-01")
    view = await service.user_membership(user["id"])
    assert view["plan"]["id"] == membership["id"]
    assert view["membresia"]["fechaVencimiento"] == "2024-03-02"
