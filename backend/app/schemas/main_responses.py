"""Response models for the root and health endpoints."""

from pydantic import Field

from ._strict_base import StrictModel


class RootResponse(StrictModel):
    message: str = Field(description="Welcome message")
    version: str = Field(description="API version")
    docs: str = Field(description="Documentation URL")
    environment: str = Field(description="Environment name")


class HealthResponse(StrictModel):
    """Liveness plus a database round-trip."""

    status: str = Field(description="healthy or degraded")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    environment: str = Field(description="Environment name")
    database: str = Field(description="Database connectivity (ok/error)")
    timestamp: str = Field(description="UTC ISO8601Z timestamp of the health response")
