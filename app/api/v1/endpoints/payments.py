"""Payment (pago) API: thin routes over PaymentRepository."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import PaginationDep, get_payment_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import PaymentConcept, PaymentMethod, PaymentStatus
from app.infrastructure.persistence.repositories import PaymentRepository
from app.schemas.common import MessageResponse
from app.schemas.payment import (
    PaymentCreate,
    PaymentMessage,
    PaymentResponse,
    PaymentStatusChange,
    PaymentUpdate,
)

router = APIRouter()

Repo = Annotated[PaymentRepository, Depends(get_payment_repo)]

RESOURCE = "pago"


@router.get("", response_model=list[PaymentResponse])
async def list_payments(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[PaymentResponse])
async def filter_payments(
    repo: Repo,
    page: PaginationDep,
    usuarioId: str | None = None,
    estado: PaymentStatus | None = None,
    metodo: PaymentMethod | None = None,
    concepto: PaymentConcept | None = None,
    entidadTipo: str | None = None,
    entidadId: str | None = None,
    montoMin: Annotated[float | None, Query(ge=0)] = None,
    montoMax: Annotated[float | None, Query(ge=0)] = None,
    fechaDesde: date | None = None,
    fechaHasta: date | None = None,
):
    check_range(montoMin, montoMax, "monto")
    check_range(fechaDesde, fechaHasta, "fecha")
    filters = {
        "usuarioId": usuarioId,
        "estado": estado.value if estado else None,
        "metodo": metodo.value if metodo else None,
        "concepto": concepto.value if concepto else None,
        "entidadTipo": entidadTipo,
        "entidadId": entidadId,
        "montoMin": montoMin,
        "montoMax": montoMax,
        "fechaDesde": fechaDesde.isoformat() if fechaDesde else None,
        "fechaHasta": fechaHasta.isoformat() if fechaHasta else None,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/montos", response_model=list[PaymentResponse])
async def payments_by_amount(
    repo: Repo,
    min: Annotated[float, Query(ge=0)] = 0,
    max: Annotated[float, Query(ge=0)] = 1_000_000_000,
):
    check_range(min, max, "monto")
    return await repo.by_amount(min, max)


@router.get("/fechas", response_model=list[PaymentResponse])
async def payments_by_date_range(repo: Repo, fechaInicio: date, fechaFin: date):
    check_range(fechaInicio, fechaFin, "fechaFin")
    return await repo.by_date_range(fechaInicio.isoformat(), fechaFin.isoformat())


@router.get("/usuario/{user_id}", response_model=list[PaymentResponse])
async def payments_by_user(user_id: str, repo: Repo):
    return await repo.by_user(user_id)


@router.get("/estado/{estado}", response_model=list[PaymentResponse])
async def payments_by_status(estado: PaymentStatus, repo: Repo):
    return await repo.by_status(estado.value)


@router.get("/entidad/{tipo}/{entity_id}", response_model=list[PaymentResponse])
async def payments_by_entity(tipo: str, entity_id: str, repo: Repo):
    return await repo.by_entity(tipo, entity_id)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: str, repo: Repo):
    return found(await repo.get_by_id(payment_id), RESOURCE, payment_id)


@router.post("", response_model=PaymentMessage, status_code=201)
@limit_writes
async def create_payment(request: Request, body: PaymentCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Pago creado exitosamente", pago=created)


@router.put("/{payment_id}", response_model=PaymentMessage)
async def update_payment(payment_id: str, body: PaymentUpdate, repo: Repo):
    updated = found(await repo.update(payment_id, body.to_document()), RESOURCE, payment_id)
    return with_message("Pago actualizado exitosamente", pago=updated)


@router.delete("/{payment_id}", response_model=MessageResponse)
async def delete_payment(payment_id: str, repo: Repo):
    if not await repo.delete(payment_id):
        found(None, RESOURCE, payment_id)
    return with_message("Pago eliminado exitosamente")


@router.put("/{payment_id}/estado", response_model=PaymentMessage)
async def change_payment_status(payment_id: str, body: PaymentStatusChange, repo: Repo):
    """pendiente -> completado|fallido, completado -> reembolsado; anything else answers 400."""
    updated = found(
        await repo.change_status(payment_id, body.estado.value), RESOURCE, payment_id
    )
    return with_message("Estado del pago actualizado exitosamente", pago=updated)
