"""
FastAPI REST Endpoints
======================

HTTP access to portal glyph images.

Endpoints:
- GET /{address}.png: Portal glyph image, rendered on first request and cached
- GET /health: Health check endpoint
- GET /*: Static front-end
"""
