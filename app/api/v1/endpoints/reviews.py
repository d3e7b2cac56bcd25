"""Review (resena) API.

Writes go through ReviewService so the reviewed entity's rating is recomputed;
when that push fails the write still succeeds and the body carries "warning".
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    AdminPrincipal,
    PaginationDep,
    get_review_repo,
    get_review_service,
)
from app.api.v1.endpoints._common import found, with_message
from app.application.services import ReviewService
from app.core.limiter import limit_writes
from app.domain.enums import ReviewedEntityType, ReviewStatus
from app.infrastructure.persistence.repositories import ReviewRepository
from app.schemas.common import MessageResponse
from app.schemas.review import (
    ModerationRequest,
    RatingSummary,
    ReviewCreate,
    ReviewMessage,
    ReviewResponse,
    ReviewUpdate,
)

router = APIRouter()

Repo = Annotated[ReviewRepository, Depends(get_review_repo)]
Service = Annotated[ReviewService, Depends(get_review_service)]

RESOURCE = "reseña"


def _with_warning(body: dict[str, Any], warning: str | None) -> dict[str, Any]:
    if warning:
        body["warning"] = warning
    return body


@router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    repo: Repo,
    page: PaginationDep,
    estado: ReviewStatus | None = None,
    usuarioId: str | None = None,
    entidadTipo: ReviewedEntityType | None = None,
    entidadId: str | None = None,
):
    filters = {
        "estado": estado.value if estado else None,
        "usuarioId": usuarioId,
        "entidadTipo": entidadTipo.value if entidadTipo else None,
        "entidadId": entidadId,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/pendientes", response_model=list[ReviewResponse])
async def pending_reviews(repo: Repo):
    """Reviews waiting for moderation."""
    return await repo.pending()


@router.get("/entidad/{tipo}/{entity_id}", response_model=list[ReviewResponse])
async def reviews_by_entity(tipo: ReviewedEntityType, entity_id: str, repo: Repo):
    """Approved reviews of one building, office or space."""
    return await repo.by_entity(tipo.value, entity_id)


@router.get("/entidad/{tipo}/{entity_id}/calificacion", response_model=RatingSummary)
async def entity_rating(tipo: ReviewedEntityType, entity_id: str, repo: Repo):
    """Average rating, review count and per-aspect averages over approved reviews."""
    return await repo.rating_summary(tipo.value, entity_id)


@router.get("/usuario/{user_id}", response_model=list[ReviewResponse])
async def reviews_by_user(user_id: str, repo: Repo):
    return await repo.by_user(user_id)


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: str, repo: Repo):
    return found(await repo.get_by_id(review_id), RESOURCE, review_id)


@router.post("", response_model=ReviewMessage, status_code=201)
@limit_writes
async def create_review(request: Request, body: ReviewCreate, service: Service):
    review, warning = await service.create(body.to_document())
    return _with_warning(with_message("Reseña creada exitosamente", resena=review), warning)


@router.put("/{review_id}", response_model=ReviewMessage)
async def update_review(review_id: str, body: ReviewUpdate, service: Service):
    review, warning = await service.update(review_id, body.to_document())
    return _with_warning(with_message("Reseña actualizada exitosamente", resena=review), warning)


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(review_id: str, service: Service):
    warning = await service.delete(review_id)
    return _with_warning(with_message("Reseña eliminada exitosamente"), warning)


@router.put("/{review_id}/moderar", response_model=ReviewMessage)
async def moderate_review(
    review_id: str, body: ModerationRequest, service: Service, _: AdminPrincipal
):
    """pendiente -> aprobada|rechazada (admins only); a moderated review answers 400."""
    review, warning = await service.moderate(review_id, body.estado.value, body.motivoRechazo)
    return _with_warning(with_message("Reseña moderada exitosamente", resena=review), warning)
