"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready: store configured, cache reachable."""

    status: str = Field(default="ok", description="Readiness status")
    store: bool = Field(..., description="Document store configured")
    cache: bool = Field(..., description="Cache connected (the API also serves without it)")
