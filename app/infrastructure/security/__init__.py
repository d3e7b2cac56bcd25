"""Security: JWT, shared service token and password hashing."""

from app.infrastructure.security.jwt import (
    create_access_token,
    is_service_token,
    verify_token,
)
from app.infrastructure.security.password import (
    get_password_hash,
    hash_password_async,
    verify_password,
    verify_password_async,
)

__all__ = [
    "create_access_token",
    "get_password_hash",
    "hash_password_async",
    "is_service_token",
    "verify_password",
    "verify_password_async",
    "verify_token",
]
