"""
Font Provider
=============

Loads the glyph font once per process and hands out per-render FreeType faces.
"""

import io
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from PIL import ImageFont

from portal_glyphs.config.logging import get_logger
from portal_glyphs.core.errors import FontLoadError

logger = get_logger(__name__)


@dataclass(frozen=True)
class PortalFont:
    """Parsed, read-only font resource shared by all renders."""

    path: Path
    font_bytes: bytes
    size_px: float

    def new_face(self) -> ImageFont.FreeTypeFont:
        """Build an independent face from the in-memory bytes for one render."""
        return _parse(self.font_bytes, self.size_px)


def _parse(font_bytes: bytes, size_px: float) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(
        io.BytesIO(font_bytes), size=size_px, layout_engine=ImageFont.Layout.BASIC
    )


class FontProvider:
    """Reads and parses the font resource, caching the result."""

    def __init__(self, font_path: Path, size_px: float):
        self.font_path = Path(font_path)
        self.size_px = size_px
        self._font: Optional[PortalFont] = None
        self._lock = threading.Lock()
        self.logger: Any = logger.bind(component="font_provider")

    @property
    def is_loaded(self) -> bool:
        return self._font is not None

    def load(self) -> PortalFont:
        """
        Return the parsed font, reading it from disk on first use.

        Raises:
            FontLoadError: If the file is missing, unreadable or not a font
        """
        if self._font is not None:
            return self._font

        with self._lock:
            if self._font is None:
                self._font = self._read()
        return self._font

    def _read(self) -> PortalFont:
        try:
            font_bytes = self.font_path.read_bytes()
        except OSError as e:
            self.logger.error("Reading font failed", path=str(self.font_path), error=str(e))
            raise FontLoadError(f"reading font: {e}", path=self.font_path) from e

        try:
            _parse(font_bytes, self.size_px)
        except (OSError, ValueError) as e:
            self.logger.error("Parsing font failed", path=str(self.font_path), error=str(e))
            raise FontLoadError(f"parsing font: {e}", path=self.font_path) from e

        self.logger.info(
            "Font loaded", path=str(self.font_path), size_px=self.size_px, bytes=len(font_bytes)
        )
        return PortalFont(path=self.font_path, font_bytes=font_bytes, size_px=self.size_px)
