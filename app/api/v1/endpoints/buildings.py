"""Building (edificio) API: thin routes over BuildingRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import PaginationDep, get_building_repo
from app.api.v1.endpoints._common import found, with_message
from app.core.limiter import limit_writes
from app.infrastructure.persistence.repositories import BuildingRepository
from app.schemas.building import (
    Amenity,
    BuildingCreate,
    BuildingMessage,
    BuildingResponse,
    BuildingUpdate,
    RatingUpdate,
    Schedule,
)
from app.schemas.common import MessageResponse

router = APIRouter()

Repo = Annotated[BuildingRepository, Depends(get_building_repo)]

RESOURCE = "edificio"


@router.get("", response_model=list[BuildingResponse])
async def list_buildings(repo: Repo, page: PaginationDep):
    """Active buildings, paginated."""
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[BuildingResponse])
async def filter_buildings(
    repo: Repo,
    page: PaginationDep,
    ciudad: str | None = None,
    pais: str | None = None,
    amenidad: str | None = None,
    calificacionMin: Annotated[float | None, Query(ge=0, le=5)] = None,
    usuarioId: str | None = None,
    empresaInmobiliariaId: str | None = None,
    accesibilidad: bool | None = None,
    estacionamiento: bool | None = None,
    activo: bool | None = None,
):
    filters = {
        "ciudad": ciudad,
        "pais": pais,
        "amenidad": amenidad,
        "calificacionMin": calificacionMin,
        "usuarioId": usuarioId,
        "empresaInmobiliariaId": empresaInmobiliariaId,
        "accesibilidad": accesibilidad,
        "estacionamiento": estacionamiento,
        "activo": activo,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/ciudad/{ciudad}", response_model=list[BuildingResponse])
async def buildings_by_city(ciudad: str, repo: Repo):
    return await repo.by_city(ciudad)


@router.get("/pais/{pais}", response_model=list[BuildingResponse])
async def buildings_by_country(pais: str, repo: Repo):
    return await repo.by_country(pais)


@router.get("/propietario/{user_id}", response_model=list[BuildingResponse])
async def buildings_by_owner(user_id: str, repo: Repo):
    return await repo.by_owner(user_id)


@router.get("/empresa/{company_id}", response_model=list[BuildingResponse])
async def buildings_by_company(company_id: str, repo: Repo):
    return await repo.by_company(company_id)


@router.get("/amenidad/{tipo}", response_model=list[BuildingResponse])
async def buildings_with_amenity(tipo: str, repo: Repo):
    return await repo.with_amenity(tipo)


@router.get("/cercanos", response_model=list[BuildingResponse])
async def nearby_buildings(
    repo: Repo,
    lat: Annotated[float, Query(ge=-90, le=90)],
    lng: Annotated[float, Query(ge=-180, le=180)],
    radio: Annotated[float, Query(gt=0, le=500, description="Radio en km")] = 5.0,
):
    """Active buildings within radio km of (lat, lng), nearest first."""
    return await repo.nearby(lat, lng, radio)


@router.get("/{building_id}", response_model=BuildingResponse)
async def get_building(building_id: str, repo: Repo):
    return found(await repo.get_by_id(building_id), RESOURCE, building_id)


@router.post("", response_model=BuildingMessage, status_code=201)
@limit_writes
async def create_building(request: Request, body: BuildingCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Edificio creado exitosamente", edificio=created)


@router.put("/{building_id}", response_model=BuildingMessage)
async def update_building(building_id: str, body: BuildingUpdate, repo: Repo):
    updated = found(await repo.update(building_id, body.to_document()), RESOURCE, building_id)
    return with_message("Edificio actualizado exitosamente", edificio=updated)


@router.delete("/{building_id}", response_model=MessageResponse)
async def delete_building(building_id: str, repo: Repo):
    """Soft delete: the building leaves active listings but stays readable by id."""
    found(await repo.soft_delete(building_id), RESOURCE, building_id)
    return with_message("Edificio eliminado exitosamente")


@router.put("/{building_id}/activar", response_model=BuildingMessage)
async def activate_building(building_id: str, repo: Repo):
    activated = found(await repo.activate(building_id), RESOURCE, building_id)
    return with_message("Edificio activado exitosamente", edificio=activated)


@router.put("/{building_id}/calificacion", response_model=BuildingMessage)
async def set_building_rating(building_id: str, body: RatingUpdate, repo: Repo):
    updated = found(
        await repo.update_aggregate_rating(
            building_id, body.calificacionPromedio, body.totalResenas
        ),
        RESOURCE,
        building_id,
    )
    return with_message("Calificación actualizada exitosamente", edificio=updated)


@router.put("/{building_id}/horario", response_model=BuildingMessage)
async def update_building_schedule(building_id: str, body: Schedule, repo: Repo):
    updated = found(
        await repo.update_schedule(building_id, body.to_document()), RESOURCE, building_id
    )
    return with_message("Horario actualizado exitosamente", edificio=updated)


@router.post("/{building_id}/amenidad", response_model=BuildingMessage, status_code=201)
@limit_writes
async def add_building_amenity(request: Request, building_id: str, body: Amenity, repo: Repo):
    updated = found(
        await repo.add_amenity(building_id, body.to_document()), RESOURCE, building_id
    )
    return with_message("Amenidad agregada exitosamente", edificio=updated)


@router.delete("/{building_id}/amenidad/{amenity_id}", response_model=BuildingMessage)
async def remove_building_amenity(building_id: str, amenity_id: str, repo: Repo):
    updated = found(await repo.remove_amenity(building_id, amenity_id), RESOURCE, building_id)
    return with_message("Amenidad eliminada exitosamente", edificio=updated)
