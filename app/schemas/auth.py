"""Auth API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import SanitizedModel
from app.schemas.user import UserResponse


class LoginRequest(SanitizedModel):
    """Request body for login: username or email plus password."""

    raw_fields = frozenset({"password"})

    login: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")


class TokenResponse(BaseModel):
    """JWT token response with the public user record."""

    access_token: str
    token_type: str = "bearer"
    usuario: UserResponse


class MeResponse(BaseModel):
    """The caller's user record, or {id: null, rol, servicio: true} for a service token."""

    model_config = ConfigDict(extra="allow")

    id: str | None
    rol: str
