"""API response models."""

from pydantic import BaseModel
from typing import Optional


class HealthStatus(BaseModel):
    """Relay health status."""

    status: str = "healthy"
    timestamp: str
    environment: str
    port: int


class ConnectivityInfo(BaseModel):
    """Response of the /test endpoint."""

    message: str = "Proxy server is working!"
    environment: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Failure envelope returned by the proxy routes."""

    success: bool = False
    error: str
    details: Optional[str] = None
