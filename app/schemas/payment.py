"""Payment (pago) API schemas."""

from datetime import date

from pydantic import Field

from app.domain.enums import PaymentConcept, PaymentMethod, PaymentStatus
from app.schemas.common import (
    EntityRef,
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class PaymentCreate(SanitizedModel):
    """Request body for POST /pagos. New payments start as pendiente."""

    usuarioId: Identifier
    monto: float = Field(..., gt=0)
    moneda: str = Field(default="COP", min_length=3, max_length=3)
    fecha: date | None = None
    metodo: PaymentMethod
    concepto: PaymentConcept = PaymentConcept.OTRO
    entidadRelacionada: EntityRef | None = None
    referenciaExterna: str | None = Field(default=None, max_length=200)
    descripcion: str | None = Field(default=None, max_length=500)


class PaymentUpdate(UpdateModel):
    """Status is changed through PUT /pagos/{id}/estado."""

    nullable = frozenset({"entidadRelacionada", "referenciaExterna", "descripcion"})

    monto: float | None = Field(default=None, gt=0)
    moneda: str | None = Field(default=None, min_length=3, max_length=3)
    fecha: date | None = None
    metodo: PaymentMethod | None = None
    concepto: PaymentConcept | None = None
    entidadRelacionada: EntityRef | None = None
    referenciaExterna: str | None = Field(default=None, max_length=200)
    descripcion: str | None = Field(default=None, max_length=500)


class PaymentStatusChange(SanitizedModel):
    estado: PaymentStatus


class PaymentResponse(RecordResponse):
    usuarioId: str
    monto: float
    moneda: str
    fecha: str
    metodo: PaymentMethod
    concepto: PaymentConcept
    estado: PaymentStatus


class PaymentMessage(MessageResponse):
    pago: PaymentResponse
