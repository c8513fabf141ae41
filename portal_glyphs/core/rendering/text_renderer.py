"""
Text Renderer
=============

Draws an address onto a canvas as one left-aligned line of glyphs.
"""

import math
from typing import Any

from PIL import Image, ImageDraw

from portal_glyphs.config.logging import get_logger
from portal_glyphs.config.settings import ImageSettings
from portal_glyphs.core.errors import RenderError
from portal_glyphs.core.rendering.font_provider import PortalFont

logger = get_logger(__name__)


class TextRenderer:
    """Renders glyph text with the configured color, size and baseline."""

    def __init__(self, image_settings: ImageSettings):
        self.image_settings = image_settings
        self.logger: Any = logger.bind(component="text_renderer")

    @property
    def baseline(self) -> int:
        return math.floor(self.image_settings.font_size_px) - self.image_settings.baseline_offset

    def render_text(self, canvas: Image.Image, font: PortalFont, address: str) -> Image.Image:
        """
        Draw ``address`` on ``canvas`` starting at x = 0 on the baseline.

        Text running past the right edge is clipped by the canvas bounds.

        Raises:
            RenderError: If the glyphs cannot be drawn
        """
        try:
            face = font.new_face()
            draw = ImageDraw.Draw(canvas)
            draw.text(
                (0, self.baseline),
                address,
                fill=self.image_settings.foreground_color,
                font=face,
                anchor="ls",
            )
        except (OSError, ValueError, UnicodeError) as e:
            self.logger.error("Drawing text failed", address=address, error=str(e))
            raise RenderError(f"drawing text: {e}", address=address) from e
        return canvas
