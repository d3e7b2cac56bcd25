"""User (usuario) API.

Users may change only their own profile, payment methods and membership;
administrators may change anyone's, and only they change roles.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    AdminPrincipal,
    CurrentPrincipal,
    PaginationDep,
    ensure_self_or_admin,
    get_user_repo,
)
from app.api.v1.endpoints._common import found, with_message
from app.core.limiter import limit_writes
from app.domain.enums import UserRole, UserType
from app.domain.exceptions import AuthorizationException
from app.infrastructure.persistence.repositories import UserRepository
from app.schemas.common import MessageResponse
from app.schemas.user import (
    PaymentMethodIn,
    PaymentMethodsReplace,
    RoleChange,
    UserCreate,
    UserMembershipSnapshot,
    UserMessage,
    UserResponse,
    UserUpdate,
)

router = APIRouter()

Repo = Annotated[UserRepository, Depends(get_user_repo)]

RESOURCE = "usuario"


@router.get("", response_model=list[UserResponse])
async def list_users(
    repo: Repo,
    page: PaginationDep,
    tipoUsuario: UserType | None = None,
    rol: UserRole | None = None,
    activo: bool | None = None,
    ciudad: str | None = None,
    pais: str | None = None,
):
    filters = {
        "tipoUsuario": tipoUsuario.value if tipoUsuario else None,
        "rol": rol.value if rol else None,
        "activo": activo,
        "ciudad": ciudad,
        "pais": pais,
    }
    return await repo.get_all(filters, page.skip, page.limit)


@router.get("/tipo/{tipo}", response_model=list[UserResponse])
async def users_by_type(tipo: UserType, repo: Repo):
    return await repo.by_type(tipo.value)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, repo: Repo):
    return found(await repo.get_by_id(user_id), RESOURCE, user_id)


@router.post("", response_model=UserMessage, status_code=201)
@limit_writes
async def create_user(request: Request, body: UserCreate, repo: Repo, principal: CurrentPrincipal):
    """Create a user; a taken username or email answers 400."""
    if body.tipoUsuario is UserType.ADMINISTRADOR and not principal.is_admin:
        raise AuthorizationException(resource=RESOURCE, action="crear administrador")
    created = await repo.create(body.to_document())
    return with_message("Usuario creado exitosamente", usuario=created)


@router.put("/{user_id}", response_model=UserMessage)
async def update_user(
    user_id: str, body: UserUpdate, repo: Repo, principal: CurrentPrincipal
):
    """Partial update; a new password is re-hashed, username/email stay unique."""
    ensure_self_or_admin(principal, user_id)
    updated = found(await repo.update(user_id, body.to_document()), RESOURCE, user_id)
    return with_message("Usuario actualizado exitosamente", usuario=updated)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, repo: Repo, principal: CurrentPrincipal):
    ensure_self_or_admin(principal, user_id)
    if not await repo.delete(user_id):
        found(None, RESOURCE, user_id)
    return with_message("Usuario eliminado exitosamente")


@router.put("/{user_id}/metodos-pago", response_model=UserMessage)
async def replace_payment_methods(
    user_id: str, body: PaymentMethodsReplace, repo: Repo, principal: CurrentPrincipal
):
    """Replace the whole payment-method list (exactly one stays default)."""
    ensure_self_or_admin(principal, user_id)
    methods = [m.model_dump(mode="json", exclude_none=True) for m in body.metodoPago]
    updated = found(await repo.replace_payment_methods(user_id, methods), RESOURCE, user_id)
    return with_message("Métodos de pago actualizados exitosamente", usuario=updated)


@router.post("/{user_id}/metodos-pago", response_model=UserMessage, status_code=201)
@limit_writes
async def add_payment_method(
    request: Request,
    user_id: str,
    body: PaymentMethodIn,
    repo: Repo,
    principal: CurrentPrincipal,
):
    ensure_self_or_admin(principal, user_id)
    method = body.model_dump(mode="json", exclude_none=True)
    updated = found(await repo.add_payment_method(user_id, method), RESOURCE, user_id)
    return with_message("Método de pago agregado exitosamente", usuario=updated)


@router.delete("/{user_id}/metodos-pago/{method_id}", response_model=UserMessage)
async def remove_payment_method(
    user_id: str, method_id: str, repo: Repo, principal: CurrentPrincipal
):
    ensure_self_or_admin(principal, user_id)
    updated = found(await repo.remove_payment_method(user_id, method_id), RESOURCE, user_id)
    return with_message("Método de pago eliminado exitosamente", usuario=updated)


@router.put("/{user_id}/rol", response_model=UserMessage)
async def change_user_role(user_id: str, body: RoleChange, repo: Repo, _: AdminPrincipal):
    updated = found(await repo.change_role(user_id, body.rol.value), RESOURCE, user_id)
    return with_message("Rol actualizado exitosamente", usuario=updated)


@router.get("/{user_id}/membresia", response_model=UserMembershipSnapshot)
async def get_user_membership_snapshot(user_id: str, repo: Repo):
    user = found(await repo.get_by_id(user_id), RESOURCE, user_id)
    return {"usuarioId": user_id, "membresia": user.get("membresia")}


@router.delete("/{user_id}/membresia", response_model=UserMessage)
async def clear_user_membership(user_id: str, repo: Repo, principal: CurrentPrincipal):
    """Drop the membership snapshot from the user record."""
    ensure_self_or_admin(principal, user_id, resource="membresía")
    updated = found(await repo.set_membership(user_id, None), RESOURCE, user_id)
    return with_message("Membresía del usuario eliminada exitosamente", usuario=updated)
