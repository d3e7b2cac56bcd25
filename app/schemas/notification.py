"""Notification (notificacion) API schemas."""

from pydantic import Field

from app.domain.enums import NotificationPriority, NotificationType
from app.schemas.common import (
    EntityRef,
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class NotificationCreate(SanitizedModel):
    """Request body for POST /notificaciones. New notifications are unread."""

    usuarioId: Identifier
    tipo: NotificationType
    titulo: str = Field(..., min_length=1, max_length=200)
    mensaje: str = Field(..., min_length=3, max_length=500)
    prioridad: NotificationPriority = NotificationPriority.MEDIA
    entidadRelacionada: EntityRef | None = None


class NotificationUpdate(UpdateModel):
    titulo: str | None = Field(default=None, min_length=1, max_length=200)
    mensaje: str | None = Field(default=None, min_length=3, max_length=500)
    prioridad: NotificationPriority | None = None
    leido: bool | None = None


class NotificationResponse(RecordResponse):
    usuarioId: str
    tipo: NotificationType
    titulo: str
    mensaje: str
    prioridad: NotificationPriority
    leido: bool
    fechaLectura: str | None


class NotificationMessage(MessageResponse):
    notificacion: NotificationResponse


class MarkAllReadResponse(MessageResponse):
    actualizadas: int
