"""
Error Taxonomy
==============

Exceptions raised along the generate-or-serve pipeline. Each kind carries the
error code and HTTP status the API maps it to.
"""

from pathlib import Path
from typing import Any, Dict, Optional


class PortalImageError(Exception):
    """Base class for portal image pipeline failures."""

    error_code = "PORTAL_IMAGE_ERROR"
    status_code = 500

    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message)
        self.address = address

    def to_details(self) -> Dict[str, Any]:
        return {"address": self.address} if self.address else {}


class InvalidAddressError(PortalImageError):
    """Address does not match the required length or alphabet."""

    error_code = "INVALID_ADDRESS"
    status_code = 404


class FontLoadError(PortalImageError):
    """Font resource is missing or unparsable."""

    error_code = "FONT_UNAVAILABLE"
    status_code = 503

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path

    def to_details(self) -> Dict[str, Any]:
        return {"path": str(self.path)} if self.path else {}


class RenderError(PortalImageError):
    """Glyph drawing failed for a validated address."""

    error_code = "RENDER_FAILED"


class EncodeError(PortalImageError):
    """Image to PNG encoding failed."""

    error_code = "ENCODE_FAILED"


class CacheIOError(PortalImageError):
    """Cache directory or file operation failed."""

    error_code = "CACHE_IO_FAILED"

    def __init__(self, message: str, path: Optional[Path] = None, address: Optional[str] = None):
        super().__init__(message, address=address)
        self.path = path

    def to_details(self) -> Dict[str, Any]:
        details = super().to_details()
        if self.path:
            details["path"] = str(self.path)
        return details


class GenerationTimeoutError(PortalImageError):
    """Request deadline expired before the image was available."""

    error_code = "GENERATION_TIMEOUT"
    status_code = 504
