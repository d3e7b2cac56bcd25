"""Service reservation (reserva de servicio) API: thin routes over ServiceReservationRepository."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import PaginationDep, get_service_reservation_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import ServiceReservationStatus
from app.infrastructure.persistence.repositories import ServiceReservationRepository
from app.schemas.common import MessageResponse
from app.schemas.service_reservation import (
    ServicePaymentLink,
    ServiceReservationCancel,
    ServiceReservationCreate,
    ServiceReservationMessage,
    ServiceReservationResponse,
    ServiceReservationStatusChange,
    ServiceReservationUpdate,
)
from app.shared.utils.datetime import today_iso

router = APIRouter()

Repo = Annotated[ServiceReservationRepository, Depends(get_service_reservation_repo)]

RESOURCE = "reserva de servicio"


@router.get("", response_model=list[ServiceReservationResponse])
async def list_service_reservations(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[ServiceReservationResponse])
async def filter_service_reservations(
    repo: Repo,
    page: PaginationDep,
    estado: ServiceReservationStatus | None = None,
    usuarioId: str | None = None,
    servicioId: str | None = None,
    reservaEspacioId: str | None = None,
    fechaDesde: date | None = None,
    fechaHasta: date | None = None,
):
    check_range(fechaDesde, fechaHasta, "fecha")
    filters = {
        "estado": estado.value if estado else None,
        "usuarioId": usuarioId,
        "servicioId": servicioId,
        "reservaEspacioId": reservaEspacioId,
        "fechaDesde": fechaDesde.isoformat() if fechaDesde else None,
        "fechaHasta": fechaHasta.isoformat() if fechaHasta else None,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/estado/{estado}", response_model=list[ServiceReservationResponse])
async def service_reservations_by_status(estado: ServiceReservationStatus, repo: Repo):
    return await repo.by_status(estado.value)


@router.get("/fechas", response_model=list[ServiceReservationResponse])
async def service_reservations_by_date_range(repo: Repo, fechaInicio: date, fechaFin: date):
    check_range(fechaInicio, fechaFin, "fechaFin")
    return await repo.by_date_range(fechaInicio.isoformat(), fechaFin.isoformat())


@router.get("/pendientes", response_model=list[ServiceReservationResponse])
async def pending_service_reservations(repo: Repo, fecha: date | None = None):
    """Pending bookings for one day (today when fecha is omitted)."""
    day = fecha.isoformat() if fecha else today_iso()
    return await repo.pending_for_date(day)


@router.get("/usuario/{user_id}", response_model=list[ServiceReservationResponse])
async def service_reservations_by_user(user_id: str, repo: Repo):
    return await repo.by_user(user_id)


@router.get("/servicio/{service_id}", response_model=list[ServiceReservationResponse])
async def service_reservations_by_service(service_id: str, repo: Repo):
    return await repo.by_service(service_id)


@router.get("/reserva/{reservation_id}", response_model=list[ServiceReservationResponse])
async def service_reservations_by_space_reservation(reservation_id: str, repo: Repo):
    return await repo.by_space_reservation(reservation_id)


@router.get("/{booking_id}", response_model=ServiceReservationResponse)
async def get_service_reservation(booking_id: str, repo: Repo):
    return found(await repo.get_by_id(booking_id), RESOURCE, booking_id)


@router.post("", response_model=ServiceReservationMessage, status_code=201)
@limit_writes
async def create_service_reservation(
    request: Request, body: ServiceReservationCreate, repo: Repo
):
    """Book an active additional service (404 unknown service, 400 inactive one)."""
    created = await repo.create(body.to_document())
    return with_message("Reserva de servicio creada exitosamente", reservaServicio=created)


@router.put("/{booking_id}", response_model=ServiceReservationMessage)
async def update_service_reservation(
    booking_id: str, body: ServiceReservationUpdate, repo: Repo
):
    updated = found(await repo.update(booking_id, body.to_document()), RESOURCE, booking_id)
    return with_message("Reserva de servicio actualizada exitosamente", reservaServicio=updated)


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_service_reservation(booking_id: str, repo: Repo):
    if not await repo.delete(booking_id):
        found(None, RESOURCE, booking_id)
    return with_message("Reserva de servicio eliminada exitosamente")


@router.put("/{booking_id}/confirmar", response_model=ServiceReservationMessage)
async def confirm_service_reservation(booking_id: str, repo: Repo):
    updated = found(await repo.confirm(booking_id), RESOURCE, booking_id)
    return with_message("Reserva de servicio confirmada exitosamente", reservaServicio=updated)


@router.put("/{booking_id}/cancelar", response_model=ServiceReservationMessage)
async def cancel_service_reservation(
    booking_id: str, body: ServiceReservationCancel, repo: Repo
):
    updated = found(await repo.cancel(booking_id, body.motivo), RESOURCE, booking_id)
    return with_message("Reserva de servicio cancelada exitosamente", reservaServicio=updated)


@router.put("/{booking_id}/completar", response_model=ServiceReservationMessage)
async def complete_service_reservation(booking_id: str, repo: Repo):
    updated = found(await repo.complete(booking_id), RESOURCE, booking_id)
    return with_message("Reserva de servicio completada exitosamente", reservaServicio=updated)


@router.put("/{booking_id}/estado", response_model=ServiceReservationMessage)
async def change_service_reservation_status(
    booking_id: str, body: ServiceReservationStatusChange, repo: Repo
):
    extra = None
    if body.estado is ServiceReservationStatus.CANCELADO:
        extra = {"motivoCancelacion": body.motivo}
    updated = found(
        await repo.change_status(booking_id, body.estado.value, extra), RESOURCE, booking_id
    )
    return with_message(
        "Estado de la reserva de servicio actualizado exitosamente", reservaServicio=updated
    )


@router.put("/{booking_id}/pago", response_model=ServiceReservationMessage)
async def link_service_reservation_payment(
    booking_id: str, body: ServicePaymentLink, repo: Repo
):
    updated = found(await repo.link_payment(booking_id, body.pagoId), RESOURCE, booking_id)
    return with_message("Pago asociado exitosamente", reservaServicio=updated)
