"""Reservation (reserva) API: thin routes over ReservationRepository."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentPrincipal, PaginationDep, get_reservation_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import ReservableEntityType, ReservationStatus
from app.infrastructure.persistence.repositories import ReservationRepository
from app.schemas.common import MessageResponse
from app.schemas.reservation import (
    ClientStatistics,
    PaymentAttachment,
    ReservationApproval,
    ReservationCreate,
    ReservationMessage,
    ReservationResponse,
    ReservationStatusChange,
    ReservationUpdate,
)

router = APIRouter()

Repo = Annotated[ReservationRepository, Depends(get_reservation_repo)]

RESOURCE = "reserva"
SERVICE_APPROVER = "servicio"


@router.get("", response_model=list[ReservationResponse])
async def list_reservations(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[ReservationResponse])
async def filter_reservations(
    repo: Repo,
    page: PaginationDep,
    estado: ReservationStatus | None = None,
    usuarioId: str | None = None,
    clienteId: str | None = None,
    entidadTipo: ReservableEntityType | None = None,
    entidadId: str | None = None,
    fechaDesde: date | None = None,
    fechaHasta: date | None = None,
    esRecurrente: bool | None = None,
):
    check_range(fechaDesde, fechaHasta, "fecha")
    filters = {
        "estado": estado.value if estado else None,
        "usuarioId": usuarioId,
        "clienteId": clienteId,
        "entidadTipo": entidadTipo.value if entidadTipo else None,
        "entidadId": entidadId,
        "fechaDesde": fechaDesde.isoformat() if fechaDesde else None,
        "fechaHasta": fechaHasta.isoformat() if fechaHasta else None,
        "esRecurrente": esRecurrente,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/pendientes", response_model=list[ReservationResponse])
async def pending_reservations(repo: Repo):
    return await repo.pending()


@router.get("/recurrentes", response_model=list[ReservationResponse])
async def recurring_reservations(repo: Repo):
    return await repo.recurring()


@router.get("/fecha", response_model=list[ReservationResponse])
async def reservations_by_date_range(repo: Repo, fechaInicio: date, fechaFin: date):
    """Reservations whose date span intersects [fechaInicio, fechaFin]."""
    check_range(fechaInicio, fechaFin, "fechaFin")
    return await repo.by_date_range(fechaInicio.isoformat(), fechaFin.isoformat())


@router.get("/usuario/{user_id}", response_model=list[ReservationResponse])
async def reservations_by_user(user_id: str, repo: Repo):
    return await repo.by_user(user_id)


@router.get("/cliente/{client_id}", response_model=list[ReservationResponse])
async def reservations_by_client(client_id: str, repo: Repo):
    return await repo.by_client(client_id)


@router.get("/cliente/{client_id}/estadisticas", response_model=ClientStatistics)
async def client_reservation_statistics(client_id: str, repo: Repo):
    return await repo.client_statistics(client_id)


@router.get("/entidad/{tipo}/{entity_id}", response_model=list[ReservationResponse])
async def reservations_by_entity(tipo: ReservableEntityType, entity_id: str, repo: Repo):
    return await repo.by_entity(tipo.value, entity_id)


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(reservation_id: str, repo: Repo):
    return found(await repo.get_by_id(reservation_id), RESOURCE, reservation_id)


@router.post("", response_model=ReservationMessage, status_code=201)
@limit_writes
async def create_reservation(request: Request, body: ReservationCreate, repo: Repo):
    """Create a pending reservation; an overlapping pending/confirmed booking answers 400."""
    created = await repo.create(body.to_document())
    return with_message("Reserva creada exitosamente", reserva=created)


@router.put("/{reservation_id}", response_model=ReservationMessage)
async def update_reservation(reservation_id: str, body: ReservationUpdate, repo: Repo):
    updated = found(
        await repo.update(reservation_id, body.to_document()), RESOURCE, reservation_id
    )
    return with_message("Reserva actualizada exitosamente", reserva=updated)


@router.delete("/{reservation_id}", response_model=MessageResponse)
async def delete_reservation(reservation_id: str, repo: Repo):
    if not await repo.delete(reservation_id):
        found(None, RESOURCE, reservation_id)
    return with_message("Reserva eliminada exitosamente")


@router.put("/{reservation_id}/estado", response_model=ReservationMessage)
async def change_reservation_status(
    reservation_id: str, body: ReservationStatusChange, repo: Repo
):
    """Apply a status transition; illegal transitions answer 400 and change nothing."""
    updated = found(
        await repo.change_status(reservation_id, body.estado.value), RESOURCE, reservation_id
    )
    return with_message("Estado de la reserva actualizado exitosamente", reserva=updated)


@router.put("/{reservation_id}/aprobar", response_model=ReservationMessage)
async def approve_reservation(
    reservation_id: str,
    body: ReservationApproval,
    repo: Repo,
    principal: CurrentPrincipal,
):
    """Record the caller as approver and confirm the reservation."""
    approver = principal.id or SERVICE_APPROVER
    updated = found(
        await repo.approve(reservation_id, approver, body.notas), RESOURCE, reservation_id
    )
    return with_message("Reserva aprobada exitosamente", reserva=updated)


@router.put("/{reservation_id}/pago", response_model=ReservationMessage)
async def attach_reservation_payment(
    reservation_id: str, body: PaymentAttachment, repo: Repo
):
    updated = found(
        await repo.attach_payment(reservation_id, body.pagoId, body.precioFinalPagado),
        RESOURCE,
        reservation_id,
    )
    return with_message("Pago asociado a la reserva exitosamente", reserva=updated)
