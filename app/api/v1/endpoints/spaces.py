"""Space (espacio) API: thin routes over SpaceRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import PaginationDep, get_space_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import SpaceStatus, SpaceType
from app.infrastructure.persistence.repositories import SpaceRepository
from app.schemas.building import RatingUpdate
from app.schemas.common import MessageResponse
from app.schemas.space import (
    SpaceCreate,
    SpaceMessage,
    SpaceResponse,
    SpaceStatusChange,
    SpaceUpdate,
)

router = APIRouter()

Repo = Annotated[SpaceRepository, Depends(get_space_repo)]

RESOURCE = "espacio"


@router.get("", response_model=list[SpaceResponse])
async def list_spaces(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[SpaceResponse])
async def filter_spaces(
    repo: Repo,
    page: PaginationDep,
    tipo: SpaceType | None = None,
    estado: SpaceStatus | None = None,
    edificioId: str | None = None,
    usuarioId: str | None = None,
    empresaInmobiliariaId: str | None = None,
    capacidadMin: Annotated[int | None, Query(ge=0)] = None,
    capacidadMax: Annotated[int | None, Query(ge=0)] = None,
    precioHoraMax: Annotated[float | None, Query(ge=0)] = None,
    amenidad: str | None = None,
    activo: bool | None = None,
):
    check_range(capacidadMin, capacidadMax, "capacidad")
    filters = {
        "tipo": tipo.value if tipo else None,
        "estado": estado.value if estado else None,
        "edificioId": edificioId,
        "usuarioId": usuarioId,
        "empresaInmobiliariaId": empresaInmobiliariaId,
        "capacidadMin": capacidadMin,
        "capacidadMax": capacidadMax,
        "precioHoraMax": precioHoraMax,
        "amenidad": amenidad,
        "activo": activo,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/disponibles", response_model=list[SpaceResponse])
async def available_spaces(repo: Repo):
    """Active spaces in estado disponible."""
    return await repo.available()


@router.get("/edificio/{building_id}", response_model=list[SpaceResponse])
async def spaces_by_building(building_id: str, repo: Repo):
    return await repo.by_building(building_id)


@router.get("/tipo/{tipo}", response_model=list[SpaceResponse])
async def spaces_by_type(tipo: SpaceType, repo: Repo):
    return await repo.by_type(tipo.value)


@router.get("/propietario/{user_id}", response_model=list[SpaceResponse])
async def spaces_by_owner(user_id: str, repo: Repo):
    return await repo.by_owner(user_id)


@router.get("/empresa/{company_id}", response_model=list[SpaceResponse])
async def spaces_by_company(company_id: str, repo: Repo):
    return await repo.by_company(company_id)


@router.get("/{space_id}", response_model=SpaceResponse)
async def get_space(space_id: str, repo: Repo):
    """One space with its building summary."""
    return found(await repo.get_by_id(space_id), RESOURCE, space_id)


@router.post("", response_model=SpaceMessage, status_code=201)
@limit_writes
async def create_space(request: Request, body: SpaceCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Espacio creado exitosamente", espacio=created)


@router.put("/{space_id}", response_model=SpaceMessage)
async def update_space(space_id: str, body: SpaceUpdate, repo: Repo):
    updated = found(await repo.update(space_id, body.to_document()), RESOURCE, space_id)
    return with_message("Espacio actualizado exitosamente", espacio=updated)


@router.delete("/{space_id}", response_model=MessageResponse)
async def delete_space(space_id: str, repo: Repo):
    found(await repo.soft_delete(space_id), RESOURCE, space_id)
    return with_message("Espacio eliminado exitosamente")


@router.put("/{space_id}/estado", response_model=SpaceMessage)
async def change_space_status(space_id: str, body: SpaceStatusChange, repo: Repo):
    updated = found(await repo.change_status(space_id, body.estado.value), RESOURCE, space_id)
    return with_message("Estado del espacio actualizado exitosamente", espacio=updated)


@router.put("/{space_id}/activar", response_model=SpaceMessage)
async def activate_space(space_id: str, repo: Repo):
    activated = found(await repo.activate(space_id), RESOURCE, space_id)
    return with_message("Espacio activado exitosamente", espacio=activated)


@router.put("/{space_id}/calificacion", response_model=SpaceMessage)
async def set_space_rating(space_id: str, body: RatingUpdate, repo: Repo):
    updated = found(
        await repo.update_aggregate_rating(space_id, body.calificacionPromedio, body.totalResenas),
        RESOURCE,
        space_id,
    )
    return with_message("Calificación actualizada exitosamente", espacio=updated)
