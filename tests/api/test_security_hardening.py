"""Security and middleware tests: headers, request ids, body limits, ids, error shapes."""

import os
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from app.core.config import Settings, get_settings
from app.middleware.request_logging import resolve_request_id


async def test_security_headers_present(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["cache-control"] == "no-store"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"


async def test_request_id_generated_when_absent(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert len(response.headers["x-request-id"]) == 32


def test_malformed_request_id_is_replaced() -> None:
    assert resolve_request_id("ok_id-1") == "ok_id-1"
    assert resolve_request_id("bad id\nINJECTED") != "bad id\nINJECTED"
    assert len(resolve_request_id("x" * 65)) == 32


async def test_oversized_body_returns_413(client: AsyncClient, admin_headers: dict) -> None:
    limit = get_settings().max_request_size
    response = await client.post(
        "/api/v1/notificaciones",
        headers={**admin_headers, "Content-Type": "application/json"},
        content=b"x" * (limit + 1),
    )
    assert response.status_code == 413
    assert response.json()["details"]["max_bytes"] == limit


async def test_malformed_id_returns_400(client: AsyncClient, admin_headers: dict) -> None:
    """Ids outside the store's format are rejected before any store call."""
    response = await client.get("/api/v1/edificios/bad.id", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Identificador inválido"


async def test_unknown_id_returns_404(client: AsyncClient, admin_headers: dict) -> None:
    response = await client.get("/api/v1/oficinas/doesnotexist", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "No se ha encontrado oficina con id: doesnotexist"


async def test_unknown_route_returns_json_404(client: AsyncClient) -> None:
    response = await client.get("/api/v1/no-existe")
    assert response.status_code == 404
    assert "message" in response.json()


async def test_store_not_configured_returns_500(
    unconfigured_client: AsyncClient, service_headers: dict
) -> None:
    response = await unconfigured_client.get("/api/v1/edificios", headers=service_headers)
    assert response.status_code == 500
    assert response.json()["message"] == "El almacén de documentos no está configurado"


async def test_pagination_limits(client: AsyncClient, admin_headers: dict) -> None:
    too_big = await client.get("/api/v1/pagos?limit=101", headers=admin_headers)
    negative = await client.get("/api/v1/pagos?skip=-1", headers=admin_headers)
    assert too_big.status_code == 400
    assert negative.status_code == 400


async def test_html_is_stripped_from_input(client: AsyncClient, admin_headers: dict, admin_user: dict) -> None:
    response = await client.post(
        "/api/v1/notificaciones",
        headers=admin_headers,
        json={
            "usuarioId": admin_user["id"],
            "tipo": "sistema",
            "titulo": "<script>alert(1)</script>Hola",
            "mensaje": "<b>Bienvenido</b>",
        },
    )
    assert response.status_code == 201
    notification = response.json()["notificacion"]
    assert "<" not in notification["titulo"]
    assert notification["mensaje"] == "Bienvenido"


def test_settings_require_secret_key() -> None:
    with patch.dict(os.environ, {"SECRET_KEY": ""}, clear=False):
        with pytest.raises(ValueError, match="SECRET_KEY"):
            Settings(_env_file=None)


def test_settings_reject_non_positive_ttl() -> None:
    with pytest.raises(ValueError, match="CACHE_TTL_DEFAULT"):
        Settings(_env_file=None, cache_ttl_default=0)
    settings = Settings(_env_file=None, cache_ttl_overrides={"notificaciones": 300})
    assert settings.cache_ttl_for("notificaciones") == 300
    assert settings.cache_ttl_for("edificios") == settings.cache_ttl_default
