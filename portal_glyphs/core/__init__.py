"""
Core Business Logic
==================

Core modules for the generate-or-serve image pipeline.

Modules:
- address: Address grammar and validation
- rendering: Font loading, canvas composition, text rendering and PNG encoding
- storage: Disk cache of encoded images
- singleflight: Per-address deduplication of in-flight generations
- service: Orchestration of validation, cache lookup and generation
"""
