"""Login: verify credentials against the user store and issue a JWT."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from app.domain.exceptions import AuthenticationException

INVALID_CREDENTIALS = "Credenciales inválidas"


class AuthService:
    """Authenticate by username or email and return an access token plus the public user."""

    def __init__(self, user_repo: Any, create_token: Callable[[dict[str, Any]], str]) -> None:
        self._users = user_repo
        self._create_token = create_token

    async def login(self, login: str, password: str) -> dict[str, Any]:
        user = await self._users.authenticate(login, password)
        if user is None:
            raise AuthenticationException(INVALID_CREDENTIALS)
        token = self._create_token(
            {"sub": user["id"], "rol": user.get("rol"), "username": user.get("username")}
        )
        return {"access_token": token, "token_type": "bearer", "usuario": user}
