"""
Pydantic Models and Schemas
===========================

Result, health and error models shared by the service and the API.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ImageSource(str, Enum):
    """Where the bytes of a served image came from."""
    CACHE = "cache"
    GENERATED = "generated"


class PortalImageResult(BaseModel):
    """Encoded portal image for one address."""
    address: str = Field(..., description="Portal address rendered in the image")
    png_data: bytes = Field(..., description="PNG binary data", exclude=True)
    width: int = Field(..., description="Image width")
    height: int = Field(..., description="Image height")
    file_size: int = Field(..., description="File size in bytes")
    source: ImageSource = Field(ImageSource.GENERATED, description="Cache hit or fresh render")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Generation metadata")

    @property
    def cache_hit(self) -> bool:
        return self.source is ImageSource.CACHE


class HealthStatus(BaseModel):
    """Health check status."""
    status: Literal["healthy", "unhealthy", "degraded"] = Field(..., description="Overall status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")

    # Component statuses
    font_loaded: bool = Field(..., description="Glyph font parsed and ready")
    cache_writable: bool = Field(..., description="Cache directory can be written")

    # Counters
    cache_entries: int = Field(0, ge=0, description="Images stored in the cache")
    in_flight: int = Field(0, ge=0, description="Generations currently running")
    cache_hits: int = Field(0, ge=0, description="Requests served from the cache")
    generated: int = Field(0, ge=0, description="Images rendered since startup")
    failures: int = Field(0, ge=0, description="Failed image requests since startup")


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
