"""
Rendering Module
===============

Portal image creation with Pillow.

Components:
- font_provider: Glyph font loading and per-render faces
- canvas: Background and border composition
- text_renderer: Address text drawing
- png_generator: Full pipeline with single PNG encoding
"""
