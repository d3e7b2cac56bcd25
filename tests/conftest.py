"""Pytest configuration and fixtures for the coworking API.

Env is set before app.main is imported: create_app() reads settings at import
time. HTTP tests run against app.main:app over ASGI with repositories built on
the in-memory store and cache from tests.fakes (the lifespan does not run
under ASGITransport, so the fixture assigns app.state.repositories itself).
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing-0123456789")
os.environ.setdefault("AUTH_SECRET_KEY", "test-service-token")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REDIS_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.infrastructure.persistence.container import Repositories, build_repositories  # noqa: E402
from app.infrastructure.security.jwt import create_access_token  # noqa: E402
from app.main import app  # noqa: E402
from tests.fakes import InMemoryCache, InMemoryDocumentStore  # noqa: E402

TEST_PASSWORD = "Contrasena123!"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def repos(store: InMemoryDocumentStore, cache: InMemoryCache) -> Repositories:
    """Every repository over the shared in-memory store and cache."""
    return build_repositories(store, cache, get_settings())


@pytest.fixture
async def client(repos: Repositories) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app.state.repositories = repos
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.repositories = None


@pytest.fixture
async def unconfigured_client() -> AsyncClient:
    """Client for an app whose document store is not configured."""
    app.state.repositories = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def make_user(repos: Repositories, username: str, rol: str | None = None) -> dict:
    """Create a user through the repository (hashes the password), optionally with a role."""
    user = await repos.users.create(
        {
            "username": username,
            "email": f"{username}@example.com",
            "password": TEST_PASSWORD,
            "nombre": username.capitalize(),
        }
    )
    if rol:
        user = await repos.users.change_role(user["id"], rol)
    return user


def bearer(user: dict) -> dict[str, str]:
    token = create_access_token({"sub": user["id"], "rol": user.get("rol")})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_user(repos: Repositories) -> dict:
    return await make_user(repos, "admin", rol="administrador")


@pytest.fixture
async def regular_user(repos: Repositories) -> dict:
    return await make_user(repos, "maria")


@pytest.fixture
def admin_headers(admin_user: dict) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def user_headers(regular_user: dict) -> dict[str, str]:
    return bearer(regular_user)


@pytest.fixture
def service_headers() -> dict[str, str]:
    """Bearer header carrying the shared service token (AUTH_SECRET_KEY)."""
    secret = get_settings().auth_secret_key
    assert secret is not None
    return {"Authorization": f"Bearer {secret.get_secret_value()}"}
