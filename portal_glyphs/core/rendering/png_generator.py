"""
PNG Generator
=============

Pillow-based portal image generation: compose the canvas, draw the address and
encode the result to PNG exactly once.
"""

import io
import time
from typing import Any, Optional

from PIL import Image

from portal_glyphs.config.logging import get_logger
from portal_glyphs.config.settings import ImageSettings
from portal_glyphs.core.errors import EncodeError
from portal_glyphs.core.rendering.canvas import CanvasComposer
from portal_glyphs.core.rendering.font_provider import FontProvider
from portal_glyphs.core.rendering.text_renderer import TextRenderer
from portal_glyphs.models.schemas import ImageSource, PortalImageResult

logger = get_logger(__name__)


def encode_png(image: Image.Image, compress_level: int = 6) -> bytes:
    """
    Encode an image to PNG bytes.

    The output carries no timestamps, so equal images encode to equal bytes.

    Raises:
        EncodeError: If Pillow cannot encode the image
    """
    output = io.BytesIO()
    try:
        image.save(output, format="PNG", compress_level=compress_level)
    except (OSError, ValueError) as e:
        raise EncodeError(f"encoding image: {e}") from e
    return output.getvalue()


class PortalPNGGenerator:
    """Runs the font → canvas → text → PNG pipeline for one address."""

    def __init__(
        self,
        image_settings: ImageSettings,
        font_provider: FontProvider,
        composer: Optional[CanvasComposer] = None,
        renderer: Optional[TextRenderer] = None,
        compress_level: int = 6,
    ):
        self.image_settings = image_settings
        self.font_provider = font_provider
        self.composer = composer or CanvasComposer(image_settings)
        self.renderer = renderer or TextRenderer(image_settings)
        self.compress_level = compress_level
        self.logger: Any = logger.bind(component="png_generator")

    def generate(self, address: str) -> PortalImageResult:
        """
        Render ``address`` and return the encoded image.

        Raises:
            FontLoadError: If the font cannot be loaded
            RenderError: If drawing the glyphs fails
            EncodeError: If PNG encoding fails
        """
        start = time.perf_counter()
        font = self.font_provider.load()

        canvas = self.composer.create_blank_canvas()
        image = self.renderer.render_text(canvas, font, address)

        try:
            png_data = encode_png(image, self.compress_level)
        except EncodeError as e:
            e.address = address
            self.logger.error("PNG encoding failed", address=address, error=str(e))
            raise

        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        self.logger.info(
            "Portal image generated", address=address, file_size=len(png_data), elapsed_ms=elapsed_ms
        )
        return PortalImageResult(
            address=address,
            png_data=png_data,
            width=image.width,
            height=image.height,
            file_size=len(png_data),
            source=ImageSource.GENERATED,
            metadata={"generator": "pillow", "render_ms": elapsed_ms},
        )
