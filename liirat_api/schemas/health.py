"""Pydantic models for health endpoints."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class PingResponse(BaseModel):
    message: str
    timestamp: str
    environment: str


class HealthCheckResponse(BaseModel):
    """Response model for service health checks."""

    status: str = "healthy"
    timestamp: str
    version: str
    environment: Dict[str, Any] = Field(default_factory=dict)
    endpoints: Dict[str, str] = Field(default_factory=dict)


class StatusCheck(BaseModel):
    status: str
    message: str
    statusCode: Optional[int] = None


class StatusResponse(BaseModel):
    timestamp: str
    service: str
    version: str
    environment: str
    checks: Dict[str, StatusCheck] = Field(default_factory=dict)
    overall: str = "ok"
