"""Review (resena) API schemas."""

from pydantic import BaseModel, Field

from app.domain.enums import ReviewedEntityType, ReviewStatus
from app.schemas.common import (
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class ReviewedEntity(BaseModel):
    tipo: ReviewedEntityType
    id: Identifier


class Aspects(BaseModel):
    limpieza: int | None = Field(default=None, ge=1, le=5)
    ubicacion: int | None = Field(default=None, ge=1, le=5)
    servicios: int | None = Field(default=None, ge=1, le=5)
    relacionCalidadPrecio: int | None = Field(default=None, ge=1, le=5)


class ReviewCreate(SanitizedModel):
    """Request body for POST /resenas. New reviews start as pendiente."""

    usuarioId: Identifier
    entidad: ReviewedEntity
    calificacion: int = Field(..., ge=1, le=5)
    aspectos: Aspects | None = None
    comentario: str = Field(..., min_length=5, max_length=500)


class ReviewUpdate(UpdateModel):
    """estado is accepted only to be rejected: moderation goes through /moderar."""

    nullable = frozenset({"aspectos"})

    calificacion: int | None = Field(default=None, ge=1, le=5)
    aspectos: Aspects | None = None
    comentario: str | None = Field(default=None, min_length=5, max_length=500)
    estado: ReviewStatus | None = None


class ModerationRequest(SanitizedModel):
    """Request body for PUT /resenas/{id}/moderar."""

    estado: ReviewStatus
    motivoRechazo: str | None = Field(default=None, max_length=500)


class ReviewResponse(RecordResponse):
    usuarioId: str
    entidad: dict
    calificacion: int
    comentario: str
    estado: ReviewStatus


class ReviewMessage(MessageResponse):
    """A rating refresh that failed after the write is reported in warning."""

    resena: ReviewResponse


class RatingSummary(BaseModel):
    """Approved-review aggregate of one entity (0.0 when it has none)."""

    entidad: dict
    promedio: float
    total: int
    aspectos: dict[str, float]
