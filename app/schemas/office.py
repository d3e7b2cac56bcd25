"""Office (oficina) API schemas."""

from pydantic import BaseModel, Field

from app.domain.enums import OfficeStatus, OfficeType
from app.schemas.common import (
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class OfficePrices(BaseModel):
    porHora: float | None = Field(default=None, ge=0)
    porDia: float | None = Field(default=None, ge=0)
    porMes: float | None = Field(default=None, ge=0)


class OfficeCreate(SanitizedModel):
    """Request body for POST /oficinas. codigo must be unique."""

    codigo: str = Field(..., min_length=1, max_length=50)
    nombre: str = Field(..., min_length=3, max_length=100)
    tipo: OfficeType
    edificioId: Identifier
    usuarioId: Identifier | None = None
    piso: int | None = None
    capacidad: int = Field(..., gt=0)
    precios: OfficePrices = Field(default_factory=OfficePrices)
    estado: OfficeStatus = OfficeStatus.DISPONIBLE
    amenidades: list[str] = Field(default_factory=list)
    activo: bool = True


class OfficeUpdate(UpdateModel):
    nullable = frozenset({"usuarioId", "piso"})

    codigo: str | None = Field(default=None, min_length=1, max_length=50)
    nombre: str | None = Field(default=None, min_length=3, max_length=100)
    tipo: OfficeType | None = None
    edificioId: Identifier | None = None
    usuarioId: Identifier | None = None
    piso: int | None = None
    capacidad: int | None = Field(default=None, gt=0)
    precios: OfficePrices | None = None
    estado: OfficeStatus | None = None
    amenidades: list[str] | None = None
    activo: bool | None = None


class OfficeStatusChange(SanitizedModel):
    estado: OfficeStatus


class OfficeResponse(RecordResponse):
    codigo: str
    nombre: str
    tipo: OfficeType
    edificioId: str
    capacidad: int
    precios: dict
    estado: OfficeStatus
    amenidades: list[str]
    calificacionPromedio: float
    totalResenas: int
    activo: bool


class OfficeMessage(MessageResponse):
    oficina: OfficeResponse
