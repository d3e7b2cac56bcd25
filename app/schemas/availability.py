"""Availability (disponibilidad) API schemas."""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from app.domain.enums import SlotEntityType
from app.domain.rules import minutes_of_day
from app.schemas.common import (
    Hour,
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class Slot(BaseModel):
    """One franja of a day calendar. Overlaps within a day are rejected by the repository."""

    horaInicio: Hour
    horaFin: Hour
    disponible: bool = True
    bloqueado: bool = False
    reservaId: Identifier | None = None
    motivo: str | None = Field(default=None, max_length=300)


class AvailabilityCreate(SanitizedModel):
    """Request body for POST /disponibilidades: one calendar per entity and day."""

    entidadId: Identifier
    tipoEntidad: SlotEntityType
    fecha: date
    franjas: list[Slot] = Field(default_factory=list)


class AvailabilityUpdate(UpdateModel):
    entidadId: Identifier | None = None
    tipoEntidad: SlotEntityType | None = None
    fecha: date | None = None
    franjas: list[Slot] | None = None


class SlotWindow(SanitizedModel):
    """Entity, day and [horaInicio, horaFin) window targeted by a slot operation."""

    entidadId: Identifier
    tipoEntidad: SlotEntityType
    fecha: date
    horaInicio: Hour
    horaFin: Hour

    @model_validator(mode="after")
    def _hours_in_order(self) -> "SlotWindow":
        if minutes_of_day(self.horaFin) <= minutes_of_day(self.horaInicio):
            raise ValueError("La hora de fin debe ser posterior a la hora de inicio")
        return self


class SlotReservation(SlotWindow):
    reservaId: Identifier


class SlotRelease(SlotWindow):
    reservaId: Identifier | None = None


class SlotBlock(SlotWindow):
    motivo: str | None = Field(default=None, max_length=300)


class DailyAvailabilityCreate(SanitizedModel):
    """Request body for POST /disponibilidades/crear-diaria."""

    entidadId: Identifier
    tipoEntidad: SlotEntityType
    fechaInicio: date
    fechaFin: date
    franjas: list[Slot] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _dates_in_order(self) -> "DailyAvailabilityCreate":
        if self.fechaFin < self.fechaInicio:
            raise ValueError("La fecha de fin debe ser posterior o igual a la fecha de inicio")
        return self


class AvailabilityResponse(RecordResponse):
    entidadId: str
    tipoEntidad: SlotEntityType
    fecha: str
    franjas: list[Slot]


class AvailabilityMessage(MessageResponse):
    disponibilidad: AvailabilityResponse


class DailyAvailabilityResult(MessageResponse):
    creadas: list[AvailabilityResponse]
    omitidas: list[str]
