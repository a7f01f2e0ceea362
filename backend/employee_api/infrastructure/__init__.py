"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - All upstream calls wrapped with retry/timeout/error mapping
    - Singletons initialized by the FastAPI lifespan, never at import time
"""
