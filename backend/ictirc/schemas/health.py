"""Health check schemas."""

from typing import Literal

from pydantic import BaseModel


class ServiceStatus(BaseModel):
    """Status of an individual dependency."""

    status: Literal["healthy", "unhealthy"]
    message: str


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    version: str
    services: dict[str, ServiceStatus]
    timestamp: str
