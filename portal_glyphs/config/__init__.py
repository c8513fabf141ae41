"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Application settings and the immutable image geometry
- logging: Structured logging configuration
"""
