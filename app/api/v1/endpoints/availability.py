"""Availability (disponibilidad) API: day calendars and slot operations."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import PaginationDep, get_availability_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import SlotEntityType
from app.infrastructure.persistence.repositories import AvailabilityRepository
from app.schemas.availability import (
    AvailabilityCreate,
    AvailabilityMessage,
    AvailabilityResponse,
    AvailabilityUpdate,
    DailyAvailabilityCreate,
    DailyAvailabilityResult,
    Slot,
    SlotBlock,
    SlotRelease,
    SlotReservation,
    SlotWindow,
)
from app.schemas.common import MessageResponse

router = APIRouter()

Repo = Annotated[AvailabilityRepository, Depends(get_availability_repo)]

RESOURCE = "disponibilidad"


def _calendar_id(window: SlotWindow) -> str:
    """Identifier used in 404s for a day calendar: {tipo}/{id}/{fecha}."""
    return f"{window.tipoEntidad.value}/{window.entidadId}/{window.fecha.isoformat()}"


@router.get("", response_model=list[AvailabilityResponse])
async def list_availability(
    repo: Repo,
    page: PaginationDep,
    tipoEntidad: SlotEntityType | None = None,
    entidadId: str | None = None,
    fechaDesde: date | None = None,
    fechaHasta: date | None = None,
):
    check_range(fechaDesde, fechaHasta, "fechaHasta")
    filters = {
        "tipoEntidad": tipoEntidad.value if tipoEntidad else None,
        "entidadId": entidadId,
        "fechaDesde": fechaDesde.isoformat() if fechaDesde else None,
        "fechaHasta": fechaHasta.isoformat() if fechaHasta else None,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/entidad/{tipo}/{entity_id}", response_model=list[AvailabilityResponse])
async def availability_by_entity(tipo: SlotEntityType, entity_id: str, repo: Repo):
    return await repo.by_entity(tipo.value, entity_id)


@router.get("/fecha", response_model=AvailabilityResponse)
async def availability_by_date(
    repo: Repo, tipoEntidad: SlotEntityType, entidadId: str, fecha: date
):
    day = fecha.isoformat()
    return found(
        await repo.by_date(tipoEntidad.value, entidadId, day),
        RESOURCE,
        f"{tipoEntidad.value}/{entidadId}/{day}",
    )


@router.get("/rango", response_model=list[AvailabilityResponse])
async def availability_in_range(
    repo: Repo,
    tipoEntidad: SlotEntityType,
    entidadId: str,
    fechaInicio: date,
    fechaFin: date,
):
    check_range(fechaInicio, fechaFin, "fechaFin")
    return await repo.in_range(
        tipoEntidad.value, entidadId, fechaInicio.isoformat(), fechaFin.isoformat()
    )


@router.get("/franjas", response_model=list[Slot])
async def free_slots(repo: Repo, tipoEntidad: SlotEntityType, entidadId: str, fecha: date):
    """Slots neither reserved nor blocked; empty when the entity has no calendar that day."""
    return await repo.free_slots(tipoEntidad.value, entidadId, fecha.isoformat())


@router.post("/reservar", response_model=AvailabilityMessage)
async def reserve_slot(body: SlotReservation, repo: Repo):
    updated = await repo.reserve_slot(
        body.tipoEntidad.value,
        body.entidadId,
        body.fecha.isoformat(),
        body.horaInicio,
        body.horaFin,
        body.reservaId,
    )
    return with_message(
        "Franja reservada exitosamente",
        disponibilidad=found(updated, RESOURCE, _calendar_id(body)),
    )


@router.post("/liberar", response_model=AvailabilityMessage)
async def release_slot(body: SlotRelease, repo: Repo):
    updated = await repo.release_slot(
        body.tipoEntidad.value,
        body.entidadId,
        body.fecha.isoformat(),
        body.horaInicio,
        body.horaFin,
        body.reservaId,
    )
    return with_message(
        "Franja liberada exitosamente",
        disponibilidad=found(updated, RESOURCE, _calendar_id(body)),
    )


@router.post("/bloquear", response_model=AvailabilityMessage)
async def block_slot(body: SlotBlock, repo: Repo):
    """Creates the day calendar when the entity has none."""
    updated = await repo.block_slot(
        body.tipoEntidad.value,
        body.entidadId,
        body.fecha.isoformat(),
        body.horaInicio,
        body.horaFin,
        body.motivo,
    )
    return with_message("Franja bloqueada exitosamente", disponibilidad=updated)


@router.post("/desbloquear", response_model=AvailabilityMessage)
async def unblock_slot(body: SlotWindow, repo: Repo):
    updated = await repo.unblock_slot(
        body.tipoEntidad.value,
        body.entidadId,
        body.fecha.isoformat(),
        body.horaInicio,
        body.horaFin,
    )
    return with_message(
        "Franja desbloqueada exitosamente",
        disponibilidad=found(updated, RESOURCE, _calendar_id(body)),
    )


@router.post("/crear-diaria", response_model=DailyAvailabilityResult, status_code=201)
@limit_writes
async def create_daily_availability(request: Request, body: DailyAvailabilityCreate, repo: Repo):
    result = await repo.create_daily(
        body.tipoEntidad.value,
        body.entidadId,
        body.fechaInicio.isoformat(),
        body.fechaFin.isoformat(),
        [slot.model_dump(mode="json", exclude_none=True) for slot in body.franjas],
    )
    return with_message("Disponibilidad diaria creada exitosamente", **result)


@router.get("/{availability_id}", response_model=AvailabilityResponse)
async def get_availability(availability_id: str, repo: Repo):
    return found(await repo.get_by_id(availability_id), RESOURCE, availability_id)


@router.post("", response_model=AvailabilityMessage, status_code=201)
@limit_writes
async def create_availability(request: Request, body: AvailabilityCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Disponibilidad creada exitosamente", disponibilidad=created)


@router.put("/{availability_id}", response_model=AvailabilityMessage)
async def update_availability(availability_id: str, body: AvailabilityUpdate, repo: Repo):
    updated = found(
        await repo.update(availability_id, body.to_document()), RESOURCE, availability_id
    )
    return with_message("Disponibilidad actualizada exitosamente", disponibilidad=updated)


@router.delete("/{availability_id}", response_model=MessageResponse)
async def delete_availability(availability_id: str, repo: Repo):
    if not await repo.delete(availability_id):
        found(None, RESOURCE, availability_id)
    return with_message("Disponibilidad eliminada exitosamente")
