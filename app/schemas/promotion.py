"""Promotion (promocion) API schemas."""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from app.domain.enums import PromotionTarget, PromotionType
from app.schemas.common import (
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class Applicability(BaseModel):
    entidad: PromotionTarget | None = None
    ids: list[Identifier] = Field(default_factory=list)


class PromotionCreate(SanitizedModel):
    """Request body for POST /promociones. codigo is stored upper-cased and must be unique."""

    nombre: str = Field(..., min_length=1, max_length=200)
    descripcion: str = Field(..., min_length=1)
    codigo: str = Field(..., min_length=1, max_length=50)
    tipo: PromotionType
    valor: float = Field(..., ge=0)
    fechaInicio: date
    fechaFin: date
    limiteCupos: int | None = Field(default=None, ge=1)
    usosActuales: int = Field(default=0, ge=0)
    limiteUsuario: int = Field(default=1, ge=1)
    aplicableA: Applicability | None = None
    activo: bool = True

    @model_validator(mode="after")
    def _window_in_order(self) -> "PromotionCreate":
        if self.fechaFin < self.fechaInicio:
            raise ValueError("La fecha de fin debe ser posterior o igual a la fecha de inicio")
        return self


class PromotionUpdate(UpdateModel):
    nullable = frozenset({"limiteCupos", "aplicableA"})

    nombre: str | None = Field(default=None, min_length=1, max_length=200)
    descripcion: str | None = None
    codigo: str | None = Field(default=None, min_length=1, max_length=50)
    tipo: PromotionType | None = None
    valor: float | None = Field(default=None, ge=0)
    fechaInicio: date | None = None
    fechaFin: date | None = None
    limiteCupos: int | None = Field(default=None, ge=1)
    usosActuales: int | None = Field(default=None, ge=0)
    limiteUsuario: int | None = Field(default=None, ge=1)
    aplicableA: Applicability | None = None
    activo: bool | None = None


class ValidatePromotionRequest(SanitizedModel):
    """Request body for POST /promociones/validar."""

    codigo: str = Field(..., min_length=1)
    usuarioId: Identifier | None = None
    entidadTipo: PromotionTarget | None = None
    entidadId: Identifier | None = None
    fecha: date | None = None


class ApplicabilityUpdate(SanitizedModel):
    entidad: PromotionTarget
    ids: list[Identifier] = Field(default_factory=list)


class PromotionResponse(RecordResponse):
    nombre: str
    descripcion: str
    codigo: str
    tipo: PromotionType
    valor: float
    fechaInicio: str
    fechaFin: str
    usosActuales: int
    limiteUsuario: int
    activo: bool


class PromotionMessage(MessageResponse):
    promocion: PromotionResponse


class PromotionValidation(BaseModel):
    """promocion is present only when valido."""

    valido: bool
    mensaje: str
    promocion: PromotionResponse | None = None
