"""Notification (notificacion) API: thin routes over NotificationRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    CurrentPrincipal,
    PaginationDep,
    ensure_self_or_admin,
    get_notification_repo,
)
from app.api.v1.endpoints._common import found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import NotificationPriority, NotificationType
from app.infrastructure.persistence.repositories import NotificationRepository
from app.schemas.common import MessageResponse
from app.schemas.notification import (
    MarkAllReadResponse,
    NotificationCreate,
    NotificationMessage,
    NotificationResponse,
    NotificationUpdate,
)

router = APIRouter()

Repo = Annotated[NotificationRepository, Depends(get_notification_repo)]

RESOURCE = "notificación"


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    repo: Repo,
    page: PaginationDep,
    usuarioId: str | None = None,
    tipo: NotificationType | None = None,
    prioridad: NotificationPriority | None = None,
    leido: bool | None = None,
):
    filters = {
        "usuarioId": usuarioId,
        "tipo": tipo.value if tipo else None,
        "prioridad": prioridad.value if prioridad else None,
        "leido": leido,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/usuario/{user_id}", response_model=list[NotificationResponse])
async def notifications_by_user(user_id: str, repo: Repo, noLeidas: bool = False):
    """A user's notifications, newest first; noLeidas=true keeps only unread ones."""
    return await repo.by_user(user_id, unread_only=noLeidas)


@router.put("/usuario/{user_id}/leer-todas", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(user_id: str, repo: Repo, principal: CurrentPrincipal):
    ensure_self_or_admin(principal, user_id, resource="notificaciones")
    count = await repo.mark_all_read(user_id)
    return with_message("Notificaciones marcadas como leídas", actualizadas=count)


@router.get("/tipo/{tipo}", response_model=list[NotificationResponse])
async def notifications_by_type(tipo: NotificationType, repo: Repo):
    return await repo.by_type(tipo.value)


@router.get("/entidad/{tipo}/{entity_id}", response_model=list[NotificationResponse])
async def notifications_by_entity(tipo: str, entity_id: str, repo: Repo):
    return await repo.by_entity(tipo, entity_id)


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(notification_id: str, repo: Repo):
    return found(await repo.get_by_id(notification_id), RESOURCE, notification_id)


@router.post("", response_model=NotificationMessage, status_code=201)
@limit_writes
async def create_notification(request: Request, body: NotificationCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Notificación creada exitosamente", notificacion=created)


@router.put("/{notification_id}", response_model=NotificationMessage)
async def update_notification(notification_id: str, body: NotificationUpdate, repo: Repo):
    updated = found(
        await repo.update(notification_id, body.to_document()), RESOURCE, notification_id
    )
    return with_message("Notificación actualizada exitosamente", notificacion=updated)


@router.put("/{notification_id}/leer", response_model=NotificationMessage)
async def mark_notification_read(notification_id: str, repo: Repo):
    updated = found(await repo.mark_read(notification_id), RESOURCE, notification_id)
    return with_message("Notificación marcada como leída", notificacion=updated)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(notification_id: str, repo: Repo):
    if not await repo.delete(notification_id):
        found(None, RESOURCE, notification_id)
    return with_message("Notificación eliminada exitosamente")
