"""
Test Suite
==========

Test suite matching the portal_glyphs/ directory structure.

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP tests through the FastAPI application
"""
