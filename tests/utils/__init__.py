"""
Test Utilities
==============

Shared helpers and assertions for the test suite.
"""
