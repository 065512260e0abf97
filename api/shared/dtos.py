"""Shared DTOs for the support chat API."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class HealthCheckResponse(BaseDTO):
    """Health check response DTO."""
    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=_utcnow)
    service: Optional[str] = Field(default=None, description="Service name")
    environment: Optional[str] = Field(default=None, description="Deployment environment")


class ErrorResponse(BaseDTO):
    """Error response DTO."""
    error: str = Field(description="Short error label")
    message: Optional[str] = Field(default=None, description="Error message")
