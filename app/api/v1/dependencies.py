"""Presentation-layer dependency injection (composition root).

Repositories are built once at startup (app.core.lifespan) and live on
app.state.repositories; routes get them and the application services through
the Depends() providers below, never by constructing infrastructure directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.services import (
    AuthService,
    MembershipService,
    PromotionService,
    ReviewService,
)
from app.core.config import get_settings
from app.core.constants import ACTIVE_FIELD
from app.domain.enums import UserRole
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    StoreNotConfiguredException,
)
from app.infrastructure.persistence.container import Repositories
from app.infrastructure.persistence.repositories import (
    AdditionalServiceRepository,
    AvailabilityRepository,
    BuildingRepository,
    InvoiceRepository,
    MembershipRepository,
    NotificationRepository,
    OfficeRepository,
    PaymentRepository,
    PromotionRepository,
    ReservationRepository,
    ReviewRepository,
    ServiceReservationRepository,
    SpaceRepository,
    UserRepository,
)
from app.infrastructure.security.jwt import (
    create_access_token,
    is_service_token,
    verify_token,
)

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


# ---- Repositories ----


def get_repositories(request: Request) -> Repositories:
    """Repository container built at startup; 500 when the store is not configured."""
    repositories = getattr(request.app.state, "repositories", None)
    if repositories is None:
        raise StoreNotConfiguredException()
    return repositories


RepositoriesDep = Annotated[Repositories, Depends(get_repositories)]


def get_building_repo(repos: RepositoriesDep) -> BuildingRepository:
    return repos.buildings


def get_space_repo(repos: RepositoriesDep) -> SpaceRepository:
    return repos.spaces


def get_office_repo(repos: RepositoriesDep) -> OfficeRepository:
    return repos.offices


def get_reservation_repo(repos: RepositoriesDep) -> ReservationRepository:
    return repos.reservations


def get_additional_service_repo(repos: RepositoriesDep) -> AdditionalServiceRepository:
    return repos.additional_services


def get_service_reservation_repo(repos: RepositoriesDep) -> ServiceReservationRepository:
    return repos.service_reservations


def get_membership_repo(repos: RepositoriesDep) -> MembershipRepository:
    return repos.memberships


def get_payment_repo(repos: RepositoriesDep) -> PaymentRepository:
    return repos.payments


def get_review_repo(repos: RepositoriesDep) -> ReviewRepository:
    return repos.reviews


def get_promotion_repo(repos: RepositoriesDep) -> PromotionRepository:
    return repos.promotions


def get_notification_repo(repos: RepositoriesDep) -> NotificationRepository:
    return repos.notifications


def get_user_repo(repos: RepositoriesDep) -> UserRepository:
    return repos.users


def get_availability_repo(repos: RepositoriesDep) -> AvailabilityRepository:
    return repos.availability


def get_invoice_repo(repos: RepositoriesDep) -> InvoiceRepository:
    return repos.invoices


# ---- Application services ----


def get_auth_service(repos: RepositoriesDep) -> AuthService:
    return AuthService(repos.users, create_access_token)


def get_review_service(repos: RepositoriesDep) -> ReviewService:
    """Review writes plus the rating hook over the rated-entity registry."""
    return ReviewService(repos.reviews, repos.rated)


def get_membership_service(repos: RepositoriesDep) -> MembershipService:
    return MembershipService(repos.memberships, repos.users)


def get_promotion_service(repos: RepositoriesDep) -> PromotionService:
    return PromotionService(repos.promotions)


# ---- Auth ----


@dataclass(frozen=True)
class Principal:
    """Authenticated caller: a user (from a JWT) or the trusted service token."""

    id: str | None
    rol: str
    is_service: bool = False

    @property
    def is_admin(self) -> bool:
        return self.is_service or self.rol in UserRole.admin_roles()


SERVICE_PRINCIPAL = Principal(id=None, rol=UserRole.SUPERADMIN.value, is_service=True)


async def get_current_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """Resolve the bearer token: shared service secret or a login JWT for an active user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("No autorizado - token no proporcionado")
    token = credentials.credentials
    if is_service_token(token):
        return SERVICE_PRINCIPAL
    try:
        payload = verify_token(token)
    except ValueError as e:
        logger.debug("Rejected bearer token: %s", e)
        raise AuthenticationException() from e
    user_id = payload.get("sub")
    user = await get_repositories(request).users.get_by_id(user_id)
    if user is None or user.get(ACTIVE_FIELD) is False:
        raise AuthenticationException("No autorizado - usuario inexistente o inactivo")
    return Principal(id=user["id"], rol=user.get("rol") or UserRole.USUARIO.value)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def require_admin(principal: CurrentPrincipal) -> Principal:
    """Only administrators (or the service token) pass."""
    if not principal.is_admin:
        raise AuthorizationException(message="Se requieren permisos de administrador")
    return principal


AdminPrincipal = Annotated[Principal, Depends(require_admin)]


def ensure_self_or_admin(principal: Principal, user_id: str, resource: str = "usuario") -> None:
    """Raise 403 unless the principal is user_id or an administrator."""
    if principal.is_admin or principal.id == user_id:
        return
    raise AuthorizationException(resource=resource, action="modificar")


# ---- Pagination ----


@dataclass(frozen=True)
class Pagination:
    skip: int
    limit: int


def get_pagination(
    skip: Annotated[int, Query(ge=0, description="Registros a omitir")] = 0,
    limit: Annotated[int, Query(ge=1, le=100, description="Máximo de registros")] = 10,
) -> Pagination:
    """skip >= 0 and 1 <= limit <= max_page_limit (default 10)."""
    settings = get_settings()
    return Pagination(skip=skip, limit=min(limit, settings.max_page_limit))


PaginationDep = Annotated[Pagination, Depends(get_pagination)]
