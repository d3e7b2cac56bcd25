"""Service reservation (reserva de servicio) API schemas."""

from datetime import date

from pydantic import Field

from app.domain.enums import ServiceReservationStatus
from app.schemas.common import (
    Hour,
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class ServiceReservationCreate(SanitizedModel):
    """Request body for POST /reservas-servicio. precioTotal defaults to precio x cantidad."""

    usuarioId: Identifier
    servicioId: Identifier
    reservaEspacioId: Identifier | None = None
    fecha: date
    horaInicio: Hour | None = None
    horaFin: Hour | None = None
    cantidad: int = Field(default=1, ge=1)
    instrucciones: str | None = Field(default=None, max_length=1000)
    precioTotal: float | None = Field(default=None, ge=0)
    pagoId: Identifier | None = None


class ServiceReservationUpdate(UpdateModel):
    """Status is changed through the confirm/cancel/complete/estado routes."""

    nullable = frozenset({"reservaEspacioId", "horaInicio", "horaFin", "instrucciones"})

    reservaEspacioId: Identifier | None = None
    fecha: date | None = None
    horaInicio: Hour | None = None
    horaFin: Hour | None = None
    cantidad: int | None = Field(default=None, ge=1)
    instrucciones: str | None = Field(default=None, max_length=1000)
    precioTotal: float | None = Field(default=None, ge=0)


class ServiceReservationStatusChange(SanitizedModel):
    estado: ServiceReservationStatus
    motivo: str | None = Field(default=None, max_length=500)


class ServiceReservationCancel(SanitizedModel):
    motivo: str | None = Field(default=None, max_length=500)


class ServicePaymentLink(SanitizedModel):
    pagoId: Identifier


class ServiceReservationResponse(RecordResponse):
    usuarioId: str
    servicioId: str
    fecha: str
    cantidad: int
    estado: ServiceReservationStatus


class ServiceReservationMessage(MessageResponse):
    reservaServicio: ServiceReservationResponse
