"""Promotion (promocion) API: CRUD, lookups and code validation."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import PaginationDep, get_promotion_repo, get_promotion_service
from app.api.v1.endpoints._common import check_range, found, with_message
from app.application.services import PromotionService
from app.core.limiter import limit_writes
from app.domain.enums import PromotionTarget, PromotionType
from app.infrastructure.persistence.repositories import PromotionRepository
from app.schemas.common import MessageResponse
from app.schemas.promotion import (
    ApplicabilityUpdate,
    PromotionCreate,
    PromotionMessage,
    PromotionResponse,
    PromotionUpdate,
    PromotionValidation,
    ValidatePromotionRequest,
)

router = APIRouter()

Repo = Annotated[PromotionRepository, Depends(get_promotion_repo)]
Service = Annotated[PromotionService, Depends(get_promotion_service)]

RESOURCE = "promoción"


@router.get("", response_model=list[PromotionResponse])
async def list_promotions(repo: Repo, page: PaginationDep):
    return await repo.get_all(None, page.skip, page.limit)


@router.get("/filtrar", response_model=list[PromotionResponse])
async def filter_promotions(
    repo: Repo,
    page: PaginationDep,
    tipo: PromotionType | None = None,
    entidad: PromotionTarget | None = None,
    fechaInicioDesde: date | None = None,
    fechaFinHasta: date | None = None,
    activo: bool | None = None,
):
    filters = {
        "tipo": tipo.value if tipo else None,
        "entidad": entidad.value if entidad else None,
        "fechaInicioDesde": fechaInicioDesde.isoformat() if fechaInicioDesde else None,
        "fechaFinHasta": fechaFinHasta.isoformat() if fechaFinHasta else None,
        "activo": activo,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/activas", response_model=list[PromotionResponse])
async def current_promotions(repo: Repo, fecha: date | None = None):
    """Active promotions whose date window contains fecha (default today)."""
    return await repo.current(fecha.isoformat() if fecha else None)


@router.get("/codigo/{codigo}", response_model=PromotionResponse)
async def get_promotion_by_code(codigo: str, repo: Repo):
    return found(await repo.by_code(codigo), RESOURCE, codigo)


@router.get("/tipo/{tipo}", response_model=list[PromotionResponse])
async def promotions_by_type(tipo: PromotionType, repo: Repo):
    return await repo.by_type(tipo.value)


@router.get("/entidad", response_model=list[PromotionResponse])
async def promotions_by_entity(
    repo: Repo, entidad: PromotionTarget, entidadId: str | None = None
):
    return await repo.by_target(entidad.value, entidadId)


@router.get("/fechas", response_model=list[PromotionResponse])
async def promotions_by_date_range(repo: Repo, fechaInicio: date, fechaFin: date):
    check_range(fechaInicio, fechaFin, "fechaFin")
    return await repo.by_date_range(fechaInicio.isoformat(), fechaFin.isoformat())


@router.get("/proximas-expirar", response_model=list[PromotionResponse])
async def expiring_promotions(
    repo: Repo, diasRestantes: Annotated[int, Query(ge=0, le=365)] = 7
):
    return await repo.expiring(diasRestantes)


@router.post(
    "/validar", response_model=PromotionValidation, response_model_exclude_unset=True
)
async def validate_promotion(body: ValidatePromotionRequest, service: Service):
    """Always 200: {valido, mensaje, promocion?}."""
    return await service.validate(
        body.codigo,
        body.entidadTipo.value if body.entidadTipo else None,
        body.entidadId,
        body.fecha,
    )


@router.get("/{promotion_id}", response_model=PromotionResponse)
async def get_promotion(promotion_id: str, repo: Repo):
    return found(await repo.get_by_id(promotion_id), RESOURCE, promotion_id)


@router.post("", response_model=PromotionMessage, status_code=201)
@limit_writes
async def create_promotion(request: Request, body: PromotionCreate, repo: Repo):
    """Create a promotion; a codigo already in use answers 400."""
    created = await repo.create(body.to_document())
    return with_message("Promoción creada exitosamente", promocion=created)


@router.put("/{promotion_id}", response_model=PromotionMessage)
async def update_promotion(promotion_id: str, body: PromotionUpdate, repo: Repo):
    updated = found(
        await repo.update(promotion_id, body.to_document()), RESOURCE, promotion_id
    )
    return with_message("Promoción actualizada exitosamente", promocion=updated)


@router.delete("/{promotion_id}", response_model=MessageResponse)
async def delete_promotion(promotion_id: str, repo: Repo):
    found(await repo.soft_delete(promotion_id), RESOURCE, promotion_id)
    return with_message("Promoción eliminada exitosamente")


@router.put("/{promotion_id}/activar", response_model=PromotionMessage)
async def activate_promotion(promotion_id: str, repo: Repo):
    activated = found(await repo.activate(promotion_id), RESOURCE, promotion_id)
    return with_message("Promoción activada exitosamente", promocion=activated)


@router.put("/{promotion_id}/incrementar-usos", response_model=PromotionMessage)
async def increment_promotion_uses(promotion_id: str, repo: Repo):
    updated = found(await repo.increment_uses(promotion_id), RESOURCE, promotion_id)
    return with_message("Usos de la promoción incrementados exitosamente", promocion=updated)


@router.put("/{promotion_id}/aplicabilidad", response_model=PromotionMessage)
async def update_promotion_applicability(
    promotion_id: str, body: ApplicabilityUpdate, repo: Repo
):
    updated = found(
        await repo.update_applicability(promotion_id, body.entidad.value, body.ids),
        RESOURCE,
        promotion_id,
    )
    return with_message(
        "Aplicabilidad de la promoción actualizada exitosamente", promocion=updated
    )
