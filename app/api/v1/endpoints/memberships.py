"""Membership (membresia) API: plans plus user subscription via MembershipService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    CurrentPrincipal,
    PaginationDep,
    ensure_self_or_admin,
    get_membership_repo,
    get_membership_service,
)
from app.api.v1.endpoints._common import found, with_message
from app.application.services import MembershipService
from app.core.limiter import limit_writes
from app.domain.enums import MembershipType
from app.infrastructure.persistence.repositories import MembershipRepository
from app.schemas.common import MessageResponse
from app.schemas.membership import (
    CancelSubscriptionRequest,
    MembershipCreate,
    MembershipMessage,
    MembershipResponse,
    MembershipUpdate,
    SubscribeRequest,
    UserMembership,
)
from app.schemas.user import UserMessage

router = APIRouter()

Repo = Annotated[MembershipRepository, Depends(get_membership_repo)]
Service = Annotated[MembershipService, Depends(get_membership_service)]

RESOURCE = "membresía"


@router.get("", response_model=list[MembershipResponse])
async def list_memberships(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/activas", response_model=list[MembershipResponse])
async def active_memberships(repo: Repo):
    return await repo.active()


@router.get("/tipo/{tipo}", response_model=list[MembershipResponse])
async def memberships_by_type(tipo: MembershipType, repo: Repo):
    return await repo.by_type(tipo.value)


@router.get("/usuario/{user_id}", response_model=UserMembership)
async def user_membership(user_id: str, service: Service, principal: CurrentPrincipal):
    """The user's membership snapshot and the plan it points at."""
    ensure_self_or_admin(principal, user_id, resource="membresía")
    return await service.user_membership(user_id)


@router.post("/suscribir", response_model=UserMessage)
@limit_writes
async def subscribe(
    request: Request, body: SubscribeRequest, service: Service, principal: CurrentPrincipal
):
    """Subscribe a user; fechaVencimiento = fechaInicio + plan duracion days."""
    ensure_self_or_admin(principal, body.usuarioId, resource="membresía")
    user = await service.subscribe(
        body.usuarioId,
        body.membresiaId,
        start=body.fechaInicio,
        auto_renew=body.renovacionAutomatica,
        payment_method_id=body.metodoPagoId,
        promo_code=body.codigoPromocional,
    )
    return with_message("Suscripción realizada exitosamente", usuario=user)


@router.post("/cancelar", response_model=UserMessage)
async def cancel_subscription(
    body: CancelSubscriptionRequest, service: Service, principal: CurrentPrincipal
):
    ensure_self_or_admin(principal, body.usuarioId, resource="membresía")
    user = await service.cancel(
        body.usuarioId,
        body.membresiaId,
        reason=body.motivo,
        cancelled_on=body.fechaCancelacion,
        partial_refund=body.reembolsoParcial,
    )
    return with_message("Suscripción cancelada exitosamente", usuario=user)


@router.get("/{membership_id}", response_model=MembershipResponse)
async def get_membership(membership_id: str, repo: Repo):
    return found(await repo.get_by_id(membership_id), RESOURCE, membership_id)


@router.post("", response_model=MembershipMessage, status_code=201)
@limit_writes
async def create_membership(request: Request, body: MembershipCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Membresía creada exitosamente", membresia=created)


@router.put("/{membership_id}", response_model=MembershipMessage)
async def update_membership(membership_id: str, body: MembershipUpdate, repo: Repo):
    updated = found(
        await repo.update(membership_id, body.to_document()), RESOURCE, membership_id
    )
    return with_message("Membresía actualizada exitosamente", membresia=updated)


@router.delete("/{membership_id}", response_model=MessageResponse)
async def delete_membership(membership_id: str, repo: Repo):
    found(await repo.soft_delete(membership_id), RESOURCE, membership_id)
    return with_message("Membresía eliminada exitosamente")


@router.put("/{membership_id}/activar", response_model=MembershipMessage)
async def activate_membership(membership_id: str, repo: Repo):
    activated = found(await repo.activate(membership_id), RESOURCE, membership_id)
    return with_message("Membresía activada exitosamente", membresia=activated)
