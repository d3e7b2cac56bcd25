"""User (usuario) repository: unique username/email, password hashing, payment methods, membership snapshot.

The password hash lives only in the store. It is stripped from every value
this repository returns or caches; authenticate() reads the store directly.
"""

from __future__ import annotations

from typing import Any

from app.application.interfaces.document_store import FieldFilter
from app.core.constants import ACTIVE_FIELD, COLLECTION_USERS
from app.domain.enums import UserRole, UserType
from app.domain.exceptions import DuplicateValueException
from app.infrastructure.persistence.repositories.base import Axis, CachedRepository
from app.infrastructure.security.password import hash_password_async, verify_password_async
from app.shared.utils.generators import generate_cuid

TYPE_AXIS = Axis("tipoUsuario")
ROLE_AXIS = Axis("rol")
USERNAME_AXIS = Axis("username")
EMAIL_AXIS = Axis("email")
ACTIVE_AXIS = Axis(ACTIVE_FIELD)

SECRET_FIELDS = ("password",)


def normalize_payment_methods(methods: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Give every method an id and keep exactly one default (the first flagged, else the first)."""
    normalized = [{**m, "id": m.get("id") or generate_cuid()} for m in methods]
    if not normalized:
        return normalized
    default_index = next(
        (i for i, m in enumerate(normalized) if m.get("predeterminado")), 0
    )
    for i, method in enumerate(normalized):
        method["predeterminado"] = i == default_index
    return normalized


class UserRepository(CachedRepository):
    """Usuarios. Hard delete; activo is a plain classifying flag here."""

    collection = COLLECTION_USERS
    axes = (TYPE_AXIS, ROLE_AXIS, USERNAME_AXIS, EMAIL_AXIS, ACTIVE_AXIS)
    filter_map = {
        "ciudad": ("direccion.ciudad", "=="),
        "pais": ("direccion.pais", "=="),
    }

    def _public(self, record: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in record.items() if k not in SECRET_FIELDS}

    async def _ensure_unique(self, field: str, value: str, exclude_id: str | None = None) -> None:
        existing = await self.store.find_one(self.collection, [FieldFilter(field, "==", value)])
        if existing is not None and existing["id"] != exclude_id:
            raise DuplicateValueException("usuario", field, value)

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._prepare_create(data)
        data.setdefault("tipoUsuario", UserType.USUARIO.value)
        data.setdefault("rol", UserRole.USUARIO.value)
        data.setdefault(ACTIVE_FIELD, True)
        data.setdefault("verificado", False)
        data.setdefault("membresia", None)
        data["metodoPago"] = normalize_payment_methods(data.get("metodoPago") or [])
        return data

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a user; taken username/email raise DuplicateValueException before any write."""
        doc = dict(data)
        doc["email"] = doc["email"].lower()
        await self._ensure_unique("username", doc["username"])
        await self._ensure_unique("email", doc["email"])
        doc["password"] = await hash_password_async(doc["password"])
        return await super().create(doc)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        changes = dict(changes)
        if changes.get("username") is not None:
            await self._ensure_unique("username", changes["username"], exclude_id=entity_id)
        if changes.get("email") is not None:
            changes["email"] = changes["email"].lower()
            await self._ensure_unique("email", changes["email"], exclude_id=entity_id)
        if changes.get("password"):
            changes["password"] = await hash_password_async(changes["password"])
        else:
            changes.pop("password", None)
        if "metodoPago" in changes:
            changes["metodoPago"] = normalize_payment_methods(changes["metodoPago"] or [])
        return await super().update(entity_id, changes)

    async def by_type(self, user_type: str) -> list[dict[str, Any]]:
        return await self.by_axis(TYPE_AXIS, user_type)

    async def by_role(self, role: str) -> list[dict[str, Any]]:
        return await self.by_axis(ROLE_AXIS, role)

    async def by_username(self, username: str) -> dict[str, Any] | None:
        async def load() -> dict[str, Any] | None:
            found = await self.store.find_one(
                self.collection, [FieldFilter("username", "==", username)]
            )
            return self._public(found) if found else None

        return await self._read_through(USERNAME_AXIS.key_for(self.entity, username), load)

    async def by_email(self, email: str) -> dict[str, Any] | None:
        email = email.lower()

        async def load() -> dict[str, Any] | None:
            found = await self.store.find_one(self.collection, [FieldFilter("email", "==", email)])
            return self._public(found) if found else None

        return await self._read_through(EMAIL_AXIS.key_for(self.entity, email), load)

    async def authenticate(self, login: str, password: str) -> dict[str, Any] | None:
        """Return the public user for a username/email + password pair, or None."""
        field = "email" if "@" in login else "username"
        value = login.lower() if field == "email" else login
        user = await self.store.find_one(self.collection, [FieldFilter(field, "==", value)])
        if user is None or user.get(ACTIVE_FIELD) is False:
            return None
        if not await verify_password_async(password, user.get("password")):
            return None
        return self._public(user)

    async def add_payment_method(
        self, entity_id: str, method: dict[str, Any]
    ) -> dict[str, Any] | None:
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        existing = list(current.get("metodoPago") or [])
        new = {**method, "id": method.get("id") or generate_cuid()}
        if new.get("predeterminado"):
            existing = [{**m, "predeterminado": False} for m in existing]
            methods = [new, *existing]
        else:
            methods = [*existing, new]
        return await self.update(entity_id, {"metodoPago": methods})

    async def remove_payment_method(
        self, entity_id: str, method_id: str
    ) -> dict[str, Any] | None:
        current = await self.store.get(self.collection, entity_id)
        if current is None:
            return None
        methods = [m for m in current.get("metodoPago") or [] if m.get("id") != method_id]
        return await self.update(entity_id, {"metodoPago": methods})

    async def replace_payment_methods(
        self, entity_id: str, methods: list[dict[str, Any]]
    ) -> dict[str, Any] | None:
        return await self.update(entity_id, {"metodoPago": methods})

    async def change_role(self, entity_id: str, role: str) -> dict[str, Any] | None:
        return await self.update(entity_id, {"rol": role})

    async def set_membership(
        self, entity_id: str, snapshot: dict[str, Any] | None
    ) -> dict[str, Any] | None:
        """Overwrite (or clear with None) the denormalized membresia sub-object."""
        return await self.update(entity_id, {"membresia": snapshot})
