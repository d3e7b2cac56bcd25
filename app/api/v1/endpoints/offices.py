"""Office (oficina) API: thin routes over OfficeRepository."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import PaginationDep, get_office_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import OfficeStatus, OfficeType
from app.infrastructure.persistence.repositories import OfficeRepository
from app.schemas.building import RatingUpdate
from app.schemas.common import MessageResponse
from app.schemas.office import (
    OfficeCreate,
    OfficeMessage,
    OfficeResponse,
    OfficeStatusChange,
    OfficeUpdate,
)

router = APIRouter()

Repo = Annotated[OfficeRepository, Depends(get_office_repo)]

RESOURCE = "oficina"


@router.get("", response_model=list[OfficeResponse])
async def list_offices(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[OfficeResponse])
async def filter_offices(
    repo: Repo,
    page: PaginationDep,
    tipo: OfficeType | None = None,
    estado: OfficeStatus | None = None,
    edificioId: str | None = None,
    usuarioId: str | None = None,
    piso: int | None = None,
    capacidadMin: Annotated[int | None, Query(ge=0)] = None,
    capacidadMax: Annotated[int | None, Query(ge=0)] = None,
    activo: bool | None = None,
):
    check_range(capacidadMin, capacidadMax, "capacidad")
    filters = {
        "tipo": tipo.value if tipo else None,
        "estado": estado.value if estado else None,
        "edificioId": edificioId,
        "usuarioId": usuarioId,
        "piso": piso,
        "capacidadMin": capacidadMin,
        "capacidadMax": capacidadMax,
        "activo": activo,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/disponibles", response_model=list[OfficeResponse])
async def available_offices(repo: Repo):
    return await repo.available()


@router.get("/capacidad", response_model=list[OfficeResponse])
async def offices_by_capacity(
    repo: Repo,
    min: Annotated[int, Query(ge=0)] = 0,
    max: Annotated[int, Query(ge=0)] = 1000,
):
    check_range(min, max, "capacidad")
    return await repo.by_capacity(min, max)


@router.get("/precio", response_model=list[OfficeResponse])
async def offices_by_price(
    repo: Repo,
    min: Annotated[float, Query(ge=0)] = 0,
    max: Annotated[float, Query(ge=0)] = 1_000_000_000,
    periodo: Literal["porHora", "porDia", "porMes"] = "porDia",
):
    """Offices whose precios.{periodo} lies in [min, max]."""
    check_range(min, max, "precio")
    return await repo.by_price(min, max, periodo)


@router.get("/codigo/{codigo}", response_model=OfficeResponse)
async def get_office_by_code(codigo: str, repo: Repo):
    return found(await repo.by_code(codigo), RESOURCE, codigo)


@router.get("/edificio/{building_id}", response_model=list[OfficeResponse])
async def offices_by_building(building_id: str, repo: Repo):
    return await repo.by_building(building_id)


@router.get("/tipo/{tipo}", response_model=list[OfficeResponse])
async def offices_by_type(tipo: OfficeType, repo: Repo):
    return await repo.by_type(tipo.value)


@router.get("/propietario/{user_id}", response_model=list[OfficeResponse])
async def offices_by_owner(user_id: str, repo: Repo):
    return await repo.by_owner(user_id)


@router.get("/{office_id}", response_model=OfficeResponse)
async def get_office(office_id: str, repo: Repo):
    return found(await repo.get_by_id(office_id), RESOURCE, office_id)


@router.post("", response_model=OfficeMessage, status_code=201)
@limit_writes
async def create_office(request: Request, body: OfficeCreate, repo: Repo):
    """Create an office; a codigo already in use answers 400."""
    created = await repo.create(body.to_document())
    return with_message("Oficina creada exitosamente", oficina=created)


@router.put("/{office_id}", response_model=OfficeMessage)
async def update_office(office_id: str, body: OfficeUpdate, repo: Repo):
    updated = found(await repo.update(office_id, body.to_document()), RESOURCE, office_id)
    return with_message("Oficina actualizada exitosamente", oficina=updated)


@router.delete("/{office_id}", response_model=MessageResponse)
async def delete_office(office_id: str, repo: Repo):
    found(await repo.soft_delete(office_id), RESOURCE, office_id)
    return with_message("Oficina eliminada exitosamente")


@router.put("/{office_id}/estado", response_model=OfficeMessage)
async def change_office_status(office_id: str, body: OfficeStatusChange, repo: Repo):
    updated = found(await repo.change_status(office_id, body.estado.value), RESOURCE, office_id)
    return with_message("Estado de la oficina actualizado exitosamente", oficina=updated)


@router.put("/{office_id}/activar", response_model=OfficeMessage)
async def activate_office(office_id: str, repo: Repo):
    activated = found(await repo.activate(office_id), RESOURCE, office_id)
    return with_message("Oficina activada exitosamente", oficina=activated)


@router.put("/{office_id}/calificacion", response_model=OfficeMessage)
async def set_office_rating(office_id: str, body: RatingUpdate, repo: Repo):
    updated = found(
        await repo.update_aggregate_rating(office_id, body.calificacionPromedio, body.totalResenas),
        RESOURCE,
        office_id,
    )
    return with_message("Calificación actualizada exitosamente", oficina=updated)
