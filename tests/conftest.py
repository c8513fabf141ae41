"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides isolated cache directories, a real TrueType font and a wired-up service.
"""

import os

os.environ.setdefault("PORTAL_ENVIRONMENT", "testing")
os.environ.setdefault("PORTAL_LOG_LEVEL", "DEBUG")

from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from PIL import ImageFont

from portal_glyphs.api.main import create_app
from portal_glyphs.config.settings import ImageSettings, Settings
from portal_glyphs.core.rendering.canvas import CanvasComposer
from portal_glyphs.core.rendering.font_provider import FontProvider
from portal_glyphs.core.rendering.png_generator import PortalPNGGenerator
from portal_glyphs.core.rendering.text_renderer import TextRenderer
from portal_glyphs.core.service import PortalImageService
from portal_glyphs.core.storage.cache_store import CacheStore

from tests.utils.helpers import make_settings


@pytest.fixture(scope="session")
def font_file(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """A real TrueType font on disk, taken from Pillow's bundled default font."""
    default_font = ImageFont.load_default(size=12)
    font_bytes = getattr(default_font, "font_bytes", None)
    if not isinstance(default_font, ImageFont.FreeTypeFont) or not font_bytes:
        pytest.skip("Pillow was built without FreeType support")

    path = tmp_path_factory.mktemp("fonts") / "portal-test.ttf"
    path.write_bytes(font_bytes)
    return path


@pytest.fixture
def image_settings() -> ImageSettings:
    """Reference image geometry."""
    return ImageSettings()


@pytest.fixture
def test_settings(tmp_path: Path, font_file: Path) -> Settings:
    """Settings pointing at a per-test cache directory and the test font."""
    return make_settings(tmp_path, font_file)


@pytest.fixture
def font_provider(test_settings: Settings) -> FontProvider:
    return FontProvider(test_settings.font_path, test_settings.image.font_size_px)


@pytest.fixture
def cache_store(test_settings: Settings) -> CacheStore:
    return CacheStore(test_settings.cache_dir)


@pytest.fixture
def png_generator(test_settings: Settings, font_provider: FontProvider) -> PortalPNGGenerator:
    return PortalPNGGenerator(
        test_settings.image,
        font_provider,
        CanvasComposer(test_settings.image),
        TextRenderer(test_settings.image),
    )


@pytest.fixture
def portal_service(test_settings: Settings) -> PortalImageService:
    return PortalImageService(test_settings)


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """FastAPI test client running the application lifespan."""
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client
