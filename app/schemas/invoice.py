"""Invoice (factura) API schemas."""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from app.domain.enums import InvoiceIssuerType, InvoiceStatus, PaymentMethod
from app.schemas.common import (
    Identifier,
    MessageResponse,
    RecordResponse,
    SanitizedModel,
    UpdateModel,
)


class InvoiceConcept(BaseModel):
    """Invoice line; impuesto and descuento are percentages of cantidad * precioUnitario."""

    descripcion: str = Field(..., min_length=1, max_length=300)
    cantidad: int = Field(..., ge=1)
    precioUnitario: float = Field(..., ge=0)
    impuesto: float = Field(default=0, ge=0, le=100)
    descuento: float = Field(default=0, ge=0, le=100)


class InvoiceCreate(SanitizedModel):
    """Request body for POST /facturas. Totals are computed from conceptos."""

    numeroFactura: str | None = Field(default=None, min_length=1, max_length=50)
    usuarioId: Identifier
    emisorId: str = Field(..., min_length=1, max_length=64)
    tipoEmisor: InvoiceIssuerType
    fechaEmision: date | None = None
    fechaVencimiento: date
    conceptos: list[InvoiceConcept] = Field(..., min_length=1)
    metodoPago: PaymentMethod | None = None
    pdfUrl: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _dates_in_order(self) -> "InvoiceCreate":
        if self.fechaEmision and self.fechaVencimiento < self.fechaEmision:
            raise ValueError(
                "La fecha de vencimiento debe ser posterior o igual a la fecha de emisión"
            )
        return self


class InvoiceUpdate(UpdateModel):
    """Status changes go through PUT /facturas/{id}/estado and /cancelar."""

    nullable = frozenset({"metodoPago", "pdfUrl"})

    numeroFactura: str | None = Field(default=None, min_length=1, max_length=50)
    fechaEmision: date | None = None
    fechaVencimiento: date | None = None
    conceptos: list[InvoiceConcept] | None = Field(default=None, min_length=1)
    metodoPago: PaymentMethod | None = None
    pdfUrl: str | None = Field(default=None, max_length=500)


class InvoiceStatusChange(SanitizedModel):
    estado: InvoiceStatus


class InvoiceCancellation(SanitizedModel):
    motivo: str | None = Field(default=None, max_length=500)


class InvoicePayment(SanitizedModel):
    pagoId: Identifier


class InvoicePdf(SanitizedModel):
    pdfUrl: str = Field(..., min_length=1, max_length=500)


class InvoiceResponse(RecordResponse):
    numeroFactura: str
    usuarioId: str
    emisorId: str
    tipoEmisor: InvoiceIssuerType
    fechaEmision: str
    fechaVencimiento: str
    conceptos: list[dict]
    subtotal: float
    impuestosTotal: float
    descuentoTotal: float
    total: float
    estado: InvoiceStatus
    pagosIds: list[str]


class InvoiceMessage(MessageResponse):
    factura: InvoiceResponse


class StatusTotals(BaseModel):
    cantidad: int
    total: float
    promedio: float


class InvoiceStatistics(BaseModel):
    fechaInicio: str
    fechaFin: str
    cantidad: int
    montoTotal: float
    porEstado: dict[str, StatusTotals]
