"""
Test Helpers
============

Helper functions for common testing operations.
"""

import io
import time
from pathlib import Path
from typing import Any, Callable, Tuple

from PIL import Image

from portal_glyphs.config.settings import Settings

VALID_ADDRESS = "0123456789ABCDEF"
OTHER_ADDRESS = "FEDCBA9876543210"


def make_settings(tmp_path: Path, font_file: Path, **overrides: Any) -> Settings:
    """Build test settings with an isolated cache directory under ``tmp_path``."""
    values: dict = dict(
        environment="testing",
        cache_dir=tmp_path / "cache",
        font_path=font_file,
        cache_retry_backoff=0,
        request_timeout=10,
    )
    values.update(overrides)
    return Settings(**values)


def decode_png(png_data: bytes) -> Image.Image:
    """Decode PNG bytes into an RGBA image."""
    return Image.open(io.BytesIO(png_data)).convert("RGBA")


def count_pixels(image: Image.Image, color: Tuple[int, ...]) -> int:
    """Count pixels of exactly ``color``."""
    colors = image.getcolors(maxcolors=image.width * image.height) or []
    return sum(count for count, pixel in colors if tuple(pixel) == tuple(color))


def cache_entries(cache_dir: Path) -> list:
    """List files in a cache directory (empty if it does not exist)."""
    if not cache_dir.exists():
        return []
    return sorted(p.name for p in cache_dir.iterdir())


def slow(func: Callable, delay: float) -> Callable:
    """Wrap ``func`` so every call sleeps ``delay`` seconds first."""

    def wrapper(*args, **kwargs):
        time.sleep(delay)
        return func(*args, **kwargs)

    return wrapper
