"""Auth API: login (public) and the current principal's user record."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentPrincipal, get_auth_service, get_user_repo
from app.application.services import AuthService
from app.core.limiter import limit_auth
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.persistence.repositories import UserRepository
from app.schemas.auth import LoginRequest, MeResponse, TokenResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    """Authenticate with username or email plus password; return a JWT and the public user."""
    return await auth.login(body.login, body.password)


@router.get("/me", response_model=MeResponse)
async def me(
    principal: CurrentPrincipal,
    repo: Annotated[UserRepository, Depends(get_user_repo)],
):
    if principal.id is None:
        return {"id": None, "rol": principal.rol, "servicio": True}
    user = await repo.get_by_id(principal.id)
    if user is None:
        raise ResourceNotFoundException("usuario", principal.id)
    return user
