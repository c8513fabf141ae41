"""
Portal Routes
=============

``GET /{address}.png``: the generate-or-serve image endpoint.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.convertors import Convertor, register_url_convertor

from portal_glyphs.config.logging import get_logger
from portal_glyphs.core.address import ADDRESS_REGEX
from portal_glyphs.core.service import PortalImageService

logger = get_logger(__name__)

PNG_MEDIA_TYPE = "image/png"


class AddressConvertor(Convertor):
    """Matches only well-formed portal addresses; other paths fall through."""

    regex = ADDRESS_REGEX

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


register_url_convertor("address", AddressConvertor())

router = APIRouter(tags=["Portal"])


def get_portal_service(request: Request) -> PortalImageService:
    """Dependency returning the application's image service."""
    return request.app.state.portal_service


@router.get(
    "/{address:address}.png",
    response_class=Response,
    responses={200: {"content": {PNG_MEDIA_TYPE: {}}, "description": "Portal glyph image"}},
)
async def get_portal_image(
    address: str, request: Request, service: PortalImageService = Depends(get_portal_service)
) -> Response:
    """
    Return the glyph image for a portal address, rendering it on first request.

    Pipeline errors propagate to the application's exception handlers, which
    map each kind to its status code.
    """
    result = await service.get_image(address)

    logger.info(
        "Portal image served",
        address=address,
        source=result.source.value,
        file_size=result.file_size,
        request_id=getattr(request.state, "request_id", None),
    )
    return Response(
        content=result.png_data,
        media_type=PNG_MEDIA_TYPE,
        headers={
            "X-Portal-Cache": "hit" if result.cache_hit else "miss",
            "Cache-Control": f"public, max-age={service.settings.cache_max_age}",
        },
    )
