"""
Canvas Composer
===============

Builds the blank background-plus-border canvas every portal image starts from.
"""

from PIL import Image

from portal_glyphs.config.settings import ImageSettings


class CanvasComposer:
    """Creates fixed-size canvases from the image settings."""

    def __init__(self, image_settings: ImageSettings):
        self.image_settings = image_settings

    def create_blank_canvas(self) -> Image.Image:
        """
        Create the canvas to draw the glyphs on.

        The whole canvas is filled with the background color. With a positive
        border width every pixel within that distance of an edge is then set
        to the foreground color.
        """
        cfg = self.image_settings
        canvas = Image.new("RGBA", cfg.size, cfg.background_color)

        border = cfg.border_width
        if border <= 0:
            return canvas

        w, h = cfg.size
        bx = min(border, w)
        by = min(border, h)
        for box in (
            (0, 0, bx, h),  # left
            (w - bx, 0, w, h),  # right
            (0, 0, w, by),  # top
            (0, h - by, w, h),  # bottom
        ):
            canvas.paste(cfg.foreground_color, box)
        return canvas
