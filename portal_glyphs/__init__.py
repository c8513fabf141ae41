"""
Portal Glyph Server
===================

Renders 16-character portal addresses as glyph images and serves them over HTTP.

This package provides:
- Font loading, canvas composition and glyph text rendering with Pillow
- A disk cache of encoded PNG images keyed by address
- Single-flight generation so each address is rendered at most once at a time
- FastAPI endpoints for image and health access
"""

__version__ = "1.0.0"
