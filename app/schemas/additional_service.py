"""Additional service (servicio adicional) API schemas."""

from pydantic import BaseModel, Field

from app.domain.enums import PriceUnit, ServiceType
from app.schemas.common import (
    DayOfWeek,
    Hour,
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class Availability(BaseModel):
    diasDisponibles: list[DayOfWeek] = Field(default_factory=list)
    horaInicio: Hour | None = None
    horaFin: Hour | None = None


class AdditionalServiceCreate(SanitizedModel):
    """Request body for POST /servicios-adicionales."""

    nombre: str = Field(..., min_length=1, max_length=200)
    descripcion: str = Field(..., min_length=1)
    tipo: ServiceType
    precio: float = Field(..., ge=0)
    unidadPrecio: PriceUnit = PriceUnit.POR_USO
    disponibilidad: Availability | None = None
    tiempoAnticipacion: int = Field(default=0, ge=0)
    requiereAprobacion: bool = False
    imagen: str | None = None
    proveedorId: Identifier | None = None
    activo: bool = True
    espaciosDisponibles: list[Identifier] = Field(default_factory=list)


class AdditionalServiceUpdate(UpdateModel):
    nullable = frozenset({"disponibilidad", "imagen", "proveedorId"})

    nombre: str | None = Field(default=None, min_length=1, max_length=200)
    descripcion: str | None = None
    tipo: ServiceType | None = None
    precio: float | None = Field(default=None, ge=0)
    unidadPrecio: PriceUnit | None = None
    disponibilidad: Availability | None = None
    tiempoAnticipacion: int | None = Field(default=None, ge=0)
    requiereAprobacion: bool | None = None
    imagen: str | None = None
    proveedorId: Identifier | None = None
    activo: bool | None = None
    espaciosDisponibles: list[Identifier] | None = None


class SpaceLink(SanitizedModel):
    espacioId: Identifier


class AdditionalServiceResponse(RecordResponse):
    nombre: str
    descripcion: str
    tipo: ServiceType
    precio: float
    unidadPrecio: PriceUnit
    requiereAprobacion: bool
    espaciosDisponibles: list[str]
    activo: bool


class AdditionalServiceMessage(MessageResponse):
    servicio: AdditionalServiceResponse
