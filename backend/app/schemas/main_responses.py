"""
Response models for main application endpoints.

These models ensure consistent API responses for the root and health
check endpoints.
"""

from pydantic import Field

from ._strict_base import StrictModel


class RootResponse(StrictModel):
    """Response for root endpoint."""

    message: str = Field(description="Welcome message")
    version: str = Field(description="API version")
    docs: str = Field(description="Documentation URL")
    environment: str = Field(description="Environment name")


class HealthResponse(StrictModel):
    """Response for health check endpoint."""

    status: str = Field(description="Health status")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    environment: str = Field(description="Environment name")
    timestamp: str = Field(description="UTC ISO8601Z timestamp of the health response")
    database: str = Field(description="Database connectivity (ok/error)")


class HealthLiteResponse(StrictModel):
    """Response for lightweight health check endpoint."""

    status: str = Field(description="Health status (ok/error)")
