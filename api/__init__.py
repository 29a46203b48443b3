"""
============================================================================
FILE: __init__.py
LOCATION: api/__init__.py
============================================================================

PURPOSE:
    Package initialization for the Chirp API.

MODULES:
    - main: FastAPI application (uvicorn api.main:app)
    - auth_gate, auth: Request identity and private route protection
    - posts: posts.getAll / posts.create procedures
    - profiles: Author profile lookup against the identity provider
    - limiter: Per-IP and per-author rate limiting
============================================================================
"""
