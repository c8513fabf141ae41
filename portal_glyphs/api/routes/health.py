"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

from fastapi import APIRouter, Depends

from portal_glyphs.api.routes.portal import get_portal_service
from portal_glyphs.core.service import PortalImageService
from portal_glyphs.models.schemas import HealthStatus

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthStatus)
async def health_check(service: PortalImageService = Depends(get_portal_service)) -> HealthStatus:
    """
    Get application health status.

    The service is healthy when the font is loaded and the cache directory is
    writable; a writable cache with a font not loaded yet is reported as degraded.
    """
    font_loaded = service.font_provider.is_loaded
    cache_writable = service.cache_store.is_writable()

    if font_loaded and cache_writable:
        status = "healthy"
    elif cache_writable:
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthStatus(
        status=status,
        version=service.settings.app_version,
        font_loaded=font_loaded,
        cache_writable=cache_writable,
        cache_entries=service.cache_store.entry_count(),
        in_flight=service.in_flight,
        **service.stats,
    )
