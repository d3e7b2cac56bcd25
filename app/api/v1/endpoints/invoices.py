"""Invoice (factura) API: thin routes over InvoiceRepository."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import PaginationDep, get_invoice_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import InvoiceIssuerType, InvoiceStatus
from app.infrastructure.persistence.repositories import InvoiceRepository
from app.schemas.common import MessageResponse
from app.schemas.invoice import (
    InvoiceCancellation,
    InvoiceCreate,
    InvoiceMessage,
    InvoicePayment,
    InvoicePdf,
    InvoiceResponse,
    InvoiceStatistics,
    InvoiceStatusChange,
    InvoiceUpdate,
)

router = APIRouter()

Repo = Annotated[InvoiceRepository, Depends(get_invoice_repo)]

RESOURCE = "factura"


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[InvoiceResponse])
async def filter_invoices(
    repo: Repo,
    page: PaginationDep,
    usuarioId: str | None = None,
    estado: InvoiceStatus | None = None,
    tipoEmisor: InvoiceIssuerType | None = None,
    emisorId: str | None = None,
    totalMin: Annotated[float | None, Query(ge=0)] = None,
    totalMax: Annotated[float | None, Query(ge=0)] = None,
    fechaDesde: date | None = None,
    fechaHasta: date | None = None,
):
    check_range(totalMin, totalMax, "total")
    check_range(fechaDesde, fechaHasta, "fechaEmision")
    filters = {
        "usuarioId": usuarioId,
        "estado": estado.value if estado else None,
        "tipoEmisor": tipoEmisor.value if tipoEmisor else None,
        "emisorId": emisorId,
        "totalMin": totalMin,
        "totalMax": totalMax,
        "fechaDesde": fechaDesde.isoformat() if fechaDesde else None,
        "fechaHasta": fechaHasta.isoformat() if fechaHasta else None,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/vencidas", response_model=list[InvoiceResponse])
async def overdue_invoices(repo: Repo):
    """Pending invoices past fechaVencimiento."""
    return await repo.overdue()


@router.get("/fechas", response_model=list[InvoiceResponse])
async def invoices_by_date_range(repo: Repo, fechaInicio: date, fechaFin: date):
    check_range(fechaInicio, fechaFin, "fechaFin")
    return await repo.by_date_range(fechaInicio.isoformat(), fechaFin.isoformat())


@router.get("/montos", response_model=list[InvoiceResponse])
async def invoices_by_amount(
    repo: Repo,
    min: Annotated[float, Query(ge=0)] = 0,
    max: Annotated[float, Query(ge=0)] = 1_000_000_000,
):
    check_range(min, max, "total")
    return await repo.by_amount(min, max)


@router.get("/estadisticas", response_model=InvoiceStatistics)
async def invoice_statistics(repo: Repo, fechaInicio: date, fechaFin: date):
    check_range(fechaInicio, fechaFin, "fechaFin")
    return await repo.statistics(fechaInicio.isoformat(), fechaFin.isoformat())


@router.get("/numero/{number}", response_model=InvoiceResponse)
async def invoice_by_number(number: str, repo: Repo):
    return found(await repo.by_number(number), RESOURCE, number)


@router.get("/usuario/{user_id}", response_model=list[InvoiceResponse])
async def invoices_by_user(user_id: str, repo: Repo):
    return await repo.by_user(user_id)


@router.get("/estado/{estado}", response_model=list[InvoiceResponse])
async def invoices_by_status(estado: InvoiceStatus, repo: Repo):
    return await repo.by_status(estado.value)


@router.get("/emisor/{tipo}/{issuer_id}", response_model=list[InvoiceResponse])
async def invoices_by_issuer(tipo: InvoiceIssuerType, issuer_id: str, repo: Repo):
    return await repo.by_issuer(tipo.value, issuer_id)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: str, repo: Repo):
    return found(await repo.get_by_id(invoice_id), RESOURCE, invoice_id)


@router.post("", response_model=InvoiceMessage, status_code=201)
@limit_writes
async def create_invoice(request: Request, body: InvoiceCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Factura creada exitosamente", factura=created)


@router.put("/{invoice_id}", response_model=InvoiceMessage)
async def update_invoice(invoice_id: str, body: InvoiceUpdate, repo: Repo):
    updated = found(await repo.update(invoice_id, body.to_document()), RESOURCE, invoice_id)
    return with_message("Factura actualizada exitosamente", factura=updated)


@router.delete("/{invoice_id}", response_model=MessageResponse)
async def delete_invoice(invoice_id: str, repo: Repo):
    if not await repo.delete(invoice_id):
        found(None, RESOURCE, invoice_id)
    return with_message("Factura eliminada exitosamente")


@router.put("/{invoice_id}/estado", response_model=InvoiceMessage)
async def change_invoice_status(invoice_id: str, body: InvoiceStatusChange, repo: Repo):
    """pendiente -> pagada|vencida|cancelada, vencida -> pagada|cancelada; others answer 400."""
    updated = found(
        await repo.change_status(invoice_id, body.estado.value), RESOURCE, invoice_id
    )
    return with_message("Estado de la factura actualizado exitosamente", factura=updated)


@router.put("/{invoice_id}/cancelar", response_model=InvoiceMessage)
async def cancel_invoice(invoice_id: str, body: InvoiceCancellation, repo: Repo):
    updated = found(await repo.cancel(invoice_id, body.motivo), RESOURCE, invoice_id)
    return with_message("Factura cancelada exitosamente", factura=updated)


@router.post("/{invoice_id}/pago", response_model=InvoiceMessage)
async def add_invoice_payment(invoice_id: str, body: InvoicePayment, repo: Repo):
    updated = found(await repo.add_payment(invoice_id, body.pagoId), RESOURCE, invoice_id)
    return with_message("Pago agregado a la factura exitosamente", factura=updated)


@router.put("/{invoice_id}/pdf", response_model=InvoiceMessage)
async def set_invoice_pdf(invoice_id: str, body: InvoicePdf, repo: Repo):
    updated = found(await repo.set_pdf_url(invoice_id, body.pdfUrl), RESOURCE, invoice_id)
    return with_message("PDF de la factura actualizado exitosamente", factura=updated)
