"""Additional service (servicio adicional) API: thin routes over AdditionalServiceRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import PaginationDep, get_additional_service_repo
from app.api.v1.endpoints._common import check_range, found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import PriceUnit, ServiceType
from app.infrastructure.persistence.repositories import AdditionalServiceRepository
from app.schemas.additional_service import (
    AdditionalServiceCreate,
    AdditionalServiceMessage,
    AdditionalServiceResponse,
    AdditionalServiceUpdate,
    SpaceLink,
)
from app.schemas.common import MessageResponse

router = APIRouter()

Repo = Annotated[AdditionalServiceRepository, Depends(get_additional_service_repo)]

RESOURCE = "servicio adicional"


@router.get("", response_model=list[AdditionalServiceResponse])
async def list_services(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[AdditionalServiceResponse])
async def filter_services(
    repo: Repo,
    page: PaginationDep,
    tipo: ServiceType | None = None,
    unidadPrecio: PriceUnit | None = None,
    proveedorId: str | None = None,
    espacioId: str | None = None,
    requiereAprobacion: bool | None = None,
    precioMin: Annotated[float | None, Query(ge=0)] = None,
    precioMax: Annotated[float | None, Query(ge=0)] = None,
    activo: bool | None = None,
):
    check_range(precioMin, precioMax, "precio")
    filters = {
        "tipo": tipo.value if tipo else None,
        "unidadPrecio": unidadPrecio.value if unidadPrecio else None,
        "proveedorId": proveedorId,
        "espacioId": espacioId,
        "requiereAprobacion": requiereAprobacion,
        "precioMin": precioMin,
        "precioMax": precioMax,
        "activo": activo,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/aprobacion", response_model=list[AdditionalServiceResponse])
async def services_requiring_approval(repo: Repo):
    return await repo.requiring_approval()


@router.get("/precio", response_model=list[AdditionalServiceResponse])
async def services_by_price(
    repo: Repo,
    min: Annotated[float, Query(ge=0)] = 0,
    max: Annotated[float, Query(ge=0)] = 1_000_000_000,
):
    check_range(min, max, "precio")
    return await repo.by_price(min, max)


@router.get("/tipo/{tipo}", response_model=list[AdditionalServiceResponse])
async def services_by_type(tipo: ServiceType, repo: Repo):
    return await repo.by_type(tipo.value)


@router.get("/proveedor/{provider_id}", response_model=list[AdditionalServiceResponse])
async def services_by_provider(provider_id: str, repo: Repo):
    return await repo.by_provider(provider_id)


@router.get("/espacio/{space_id}", response_model=list[AdditionalServiceResponse])
async def services_by_space(space_id: str, repo: Repo):
    """Active services offered in a space."""
    return await repo.by_space(space_id)


@router.get("/{service_id}", response_model=AdditionalServiceResponse)
async def get_service(service_id: str, repo: Repo):
    return found(await repo.get_by_id(service_id), RESOURCE, service_id)


@router.post("", response_model=AdditionalServiceMessage, status_code=201)
@limit_writes
async def create_service(request: Request, body: AdditionalServiceCreate, repo: Repo):
    created = await repo.create(body.to_document())
    return with_message("Servicio adicional creado exitosamente", servicio=created)


@router.put("/{service_id}", response_model=AdditionalServiceMessage)
async def update_service(service_id: str, body: AdditionalServiceUpdate, repo: Repo):
    updated = found(await repo.update(service_id, body.to_document()), RESOURCE, service_id)
    return with_message("Servicio adicional actualizado exitosamente", servicio=updated)


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(service_id: str, repo: Repo):
    found(await repo.soft_delete(service_id), RESOURCE, service_id)
    return with_message("Servicio adicional eliminado exitosamente")


@router.put("/{service_id}/activar", response_model=AdditionalServiceMessage)
async def activate_service(service_id: str, repo: Repo):
    activated = found(await repo.activate(service_id), RESOURCE, service_id)
    return with_message("Servicio adicional activado exitosamente", servicio=activated)


@router.post("/{service_id}/espacio", response_model=AdditionalServiceMessage)
async def add_service_space(service_id: str, body: SpaceLink, repo: Repo):
    updated = found(await repo.add_space(service_id, body.espacioId), RESOURCE, service_id)
    return with_message("Espacio agregado al servicio exitosamente", servicio=updated)


@router.delete("/{service_id}/espacio/{space_id}", response_model=AdditionalServiceMessage)
async def remove_service_space(service_id: str, space_id: str, repo: Repo):
    updated = found(await repo.remove_space(service_id, space_id), RESOURCE, service_id)
    return with_message("Espacio eliminado del servicio exitosamente", servicio=updated)
