"""
Unit Tests for Canvas Composition
=================================

Canvas geometry, background fill and border coverage.
"""

import pytest

from portal_glyphs.config.settings import ImageSettings
from portal_glyphs.core.rendering.canvas import CanvasComposer

from tests.utils.helpers import count_pixels


def _on_border(x: int, y: int, cfg: ImageSettings) -> bool:
    b = cfg.border_width
    return x < b or x >= cfg.width - b or y < b or y >= cfg.height - b


class TestCanvasComposer:
    def test_reference_canvas_size(self, image_settings):
        canvas = CanvasComposer(image_settings).create_blank_canvas()

        assert canvas.size == (800, 45)
        assert canvas.mode == "RGBA"

    def test_reference_border_and_background(self, image_settings):
        canvas = CanvasComposer(image_settings).create_blank_canvas()
        fg = image_settings.foreground_color
        bg = image_settings.background_color

        for x in range(canvas.width):
            assert canvas.getpixel((x, 0)) == fg
            assert canvas.getpixel((x, canvas.height - 1)) == fg
        for y in range(canvas.height):
            assert canvas.getpixel((0, y)) == fg
            assert canvas.getpixel((canvas.width - 1, y)) == fg

        assert canvas.getpixel((1, 1)) == bg
        assert canvas.getpixel((400, 22)) == bg
        border_pixels = 2 * 800 + 2 * 45 - 4
        assert count_pixels(canvas, fg) == border_pixels
        assert count_pixels(canvas, bg) == 800 * 45 - border_pixels

    @pytest.mark.parametrize("border", [2, 3, 5])
    def test_every_pixel_within_border_is_border_color(self, border):
        cfg = ImageSettings(width=24, height=13, border_width=border)
        canvas = CanvasComposer(cfg).create_blank_canvas()

        for x in range(cfg.width):
            for y in range(cfg.height):
                expected = cfg.foreground_color if _on_border(x, y, cfg) else cfg.background_color
                assert canvas.getpixel((x, y)) == expected, (x, y)

    @pytest.mark.parametrize("border", [0, -1])
    def test_no_border_when_thickness_not_positive(self, border):
        cfg = ImageSettings(width=30, height=10, border_width=border)
        canvas = CanvasComposer(cfg).create_blank_canvas()

        assert canvas.size == (30, 10)
        assert count_pixels(canvas, cfg.foreground_color) == 0
        assert count_pixels(canvas, cfg.background_color) == 30 * 10

    def test_border_wider_than_canvas_covers_everything(self):
        cfg = ImageSettings(width=6, height=4, border_width=10)
        canvas = CanvasComposer(cfg).create_blank_canvas()

        assert count_pixels(canvas, cfg.foreground_color) == 6 * 4

    def test_returns_fresh_canvas_each_call(self, image_settings):
        composer = CanvasComposer(image_settings)

        first = composer.create_blank_canvas()
        first.putpixel((10, 10), (255, 0, 0, 255))
        second = composer.create_blank_canvas()

        assert second.getpixel((10, 10)) == image_settings.background_color
