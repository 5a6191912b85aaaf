"""Response model of GET /health."""

from typing import Any, Dict

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Service and dependency status, returned without the success envelope
    so load balancers can read it directly.
    """

    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    circuit_breakers: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="State of every outbound circuit breaker by service name"
    )
    uptime_seconds: float = Field(description="Seconds since service started")
