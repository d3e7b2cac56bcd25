"""Space (espacio) API schemas."""

from pydantic import Field

from app.domain.enums import SpaceStatus, SpaceType
from app.schemas.common import (
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class SpaceCreate(SanitizedModel):
    """Request body for POST /espacios."""

    nombre: str = Field(..., min_length=3, max_length=100)
    tipo: SpaceType
    edificioId: Identifier
    usuarioId: Identifier | None = None
    empresaInmobiliariaId: Identifier | None = None
    descripcion: str | None = None
    capacidad: int = Field(..., gt=0)
    precioPorHora: float | None = Field(default=None, ge=0)
    precioPorDia: float | None = Field(default=None, ge=0)
    estado: SpaceStatus = SpaceStatus.DISPONIBLE
    amenidades: list[str] = Field(default_factory=list)
    activo: bool = True


class SpaceUpdate(UpdateModel):
    nullable = frozenset(
        {"usuarioId", "empresaInmobiliariaId", "descripcion", "precioPorHora", "precioPorDia"}
    )

    nombre: str | None = Field(default=None, min_length=3, max_length=100)
    tipo: SpaceType | None = None
    edificioId: Identifier | None = None
    usuarioId: Identifier | None = None
    empresaInmobiliariaId: Identifier | None = None
    descripcion: str | None = None
    capacidad: int | None = Field(default=None, gt=0)
    precioPorHora: float | None = Field(default=None, ge=0)
    precioPorDia: float | None = Field(default=None, ge=0)
    estado: SpaceStatus | None = None
    amenidades: list[str] | None = None
    activo: bool | None = None


class SpaceStatusChange(SanitizedModel):
    estado: SpaceStatus


class SpaceResponse(RecordResponse):
    nombre: str
    tipo: SpaceType
    edificioId: str
    capacidad: int
    estado: SpaceStatus
    amenidades: list[str]
    calificacionPromedio: float
    totalResenas: int
    activo: bool


class SpaceMessage(MessageResponse):
    espacio: SpaceResponse
