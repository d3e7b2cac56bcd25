"""Health check endpoints (no auth): liveness and readiness."""

from fastapi import APIRouter, Request

from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Report whether the store is configured and the cache reachable.

    The API serves without the cache, so status is "ok" whenever the store is
    configured and "degraded" otherwise.
    """
    store_ready = getattr(request.app.state, "repositories", None) is not None
    cache = getattr(request.app.state, "cache", None)
    cache_ready = bool(cache is not None and cache.is_available())
    return ReadinessResponse(
        status="ok" if store_ready else "degraded",
        store=store_ready,
        cache=cache_ready,
    )
