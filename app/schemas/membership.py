"""Membership (membresia) API schemas, including subscribe/cancel bodies."""

from datetime import date

from pydantic import BaseModel, Field

from app.domain.enums import MembershipType, Periodicity
from app.schemas.common import (
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class Benefit(BaseModel):
    tipo: str = Field(..., min_length=1)
    descripcion: str = Field(..., min_length=1)
    valor: str | None = None


class MembershipPrice(BaseModel):
    valor: float = Field(..., ge=0)
    periodicidad: Periodicity = Periodicity.MENSUAL


class MembershipCreate(SanitizedModel):
    """Request body for POST /membresias."""

    nombre: str = Field(..., min_length=1, max_length=200)
    tipo: MembershipType
    descripcion: str = Field(..., min_length=1)
    beneficios: list[Benefit] = Field(default_factory=list)
    precio: MembershipPrice
    duracion: int = Field(default=30, ge=1, description="Duración del plan en días")
    activo: bool = True
    restricciones: str | None = None


class MembershipUpdate(UpdateModel):
    nullable = frozenset({"restricciones"})

    nombre: str | None = Field(default=None, min_length=1, max_length=200)
    tipo: MembershipType | None = None
    descripcion: str | None = None
    beneficios: list[Benefit] | None = None
    precio: MembershipPrice | None = None
    duracion: int | None = Field(default=None, ge=1)
    activo: bool | None = None
    restricciones: str | None = None


class SubscribeRequest(SanitizedModel):
    """Request body for POST /membresias/suscribir."""

    usuarioId: Identifier
    membresiaId: Identifier
    fechaInicio: date | None = None
    metodoPagoId: str | None = None
    renovacionAutomatica: bool = False
    codigoPromocional: str | None = None


class CancelSubscriptionRequest(SanitizedModel):
    """Request body for POST /membresias/cancelar."""

    usuarioId: Identifier
    membresiaId: Identifier
    motivo: str | None = Field(default=None, max_length=500)
    fechaCancelacion: date | None = None
    reembolsoParcial: bool = False


class MembershipResponse(RecordResponse):
    nombre: str
    tipo: MembershipType
    descripcion: str
    precio: dict
    duracion: int
    beneficios: list[dict]
    activo: bool


class MembershipMessage(MessageResponse):
    membresia: MembershipResponse


class UserMembership(BaseModel):
    """Snapshot held on the user plus the current plan record (None when unknown)."""

    usuarioId: str
    membresia: dict | None
    plan: MembershipResponse | None
