"""Reservation (reserva) API schemas."""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from app.domain.enums import ReservableEntityType, ReservationKind, ReservationStatus
from app.schemas.common import (
    DayOfWeek,
    Hour,
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class ReservedEntity(BaseModel):
    tipo: ReservableEntityType
    id: Identifier


class Discount(BaseModel):
    porcentaje: float | None = Field(default=None, ge=0, le=100)
    codigo: str | None = None
    motivo: str | None = None


class Approval(BaseModel):
    necesitaAprobacion: bool = False
    usuarioId: Identifier | None = None
    fechaAprobacion: str | None = None
    notas: str | None = None


class Recurrence(BaseModel):
    frecuencia: str | None = None
    diasSemana: list[DayOfWeek] = Field(default_factory=list)
    fechaFinRecurrencia: date | None = None


class ReservationCreate(SanitizedModel):
    """Request body for POST /reservas. Overlapping bookings are rejected by the repository."""

    usuarioId: Identifier
    clienteId: Identifier | None = None
    entidadReservada: ReservedEntity
    fechaInicio: date
    fechaFin: date
    horaInicio: Hour | None = None
    horaFin: Hour | None = None
    tipoReserva: ReservationKind = ReservationKind.DIA
    cantidadPersonas: int = Field(default=1, ge=1)
    proposito: str | None = Field(default=None, max_length=500)
    precioTotal: float = Field(..., ge=0)
    descuento: Discount | None = None
    aprobador: Approval | None = None
    esRecurrente: bool = False
    recurrencia: Recurrence | None = None
    serviciosAdicionales: list[Identifier] = Field(default_factory=list)

    @model_validator(mode="after")
    def _dates_in_order(self) -> "ReservationCreate":
        if self.fechaFin < self.fechaInicio:
            raise ValueError("La fecha de fin debe ser posterior o igual a la fecha de inicio")
        return self


class ReservationUpdate(UpdateModel):
    """Status is changed through PUT /reservas/{id}/estado, not here."""

    nullable = frozenset(
        {"clienteId", "horaInicio", "horaFin", "proposito", "descuento", "recurrencia"}
    )

    clienteId: Identifier | None = None
    entidadReservada: ReservedEntity | None = None
    fechaInicio: date | None = None
    fechaFin: date | None = None
    horaInicio: Hour | None = None
    horaFin: Hour | None = None
    tipoReserva: ReservationKind | None = None
    cantidadPersonas: int | None = Field(default=None, ge=1)
    proposito: str | None = Field(default=None, max_length=500)
    precioTotal: float | None = Field(default=None, ge=0)
    descuento: Discount | None = None
    esRecurrente: bool | None = None
    recurrencia: Recurrence | None = None
    serviciosAdicionales: list[Identifier] | None = None


class ReservationStatusChange(SanitizedModel):
    estado: ReservationStatus


class ReservationApproval(SanitizedModel):
    notas: str | None = Field(default=None, max_length=500)


class PaymentAttachment(SanitizedModel):
    pagoId: Identifier
    precioFinalPagado: float | None = Field(default=None, ge=0)


class ReservationResponse(RecordResponse):
    usuarioId: str
    entidadReservada: dict
    fechaInicio: str
    fechaFin: str
    estado: ReservationStatus
    precioTotal: float
    cantidadPersonas: int
    esRecurrente: bool
    serviciosAdicionales: list[str]


class ReservationMessage(MessageResponse):
    reserva: ReservationResponse


class ClientStatistics(BaseModel):
    clienteId: str
    total: int
    porEstado: dict[str, int]
    montoTotal: float
    montoPagado: float
