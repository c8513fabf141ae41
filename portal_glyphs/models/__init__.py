"""
Data Models
===========

Pydantic models for image results, health status and error responses.
"""
