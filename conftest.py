# conftest.py
# Pytest configuration for the Chirp test environment
#
# Sets test-mode environment flags before any api module is imported, so
# the app runs against in-memory SQLite, the mock identity provider and
# memory limiter storage.
#
# @see: api/config.py - Reads these variables at import time
# @note: Per-IP limiting is off so the suite is not throttled by itself

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("USE_REAL_FIREBASE", "false")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")
os.environ.setdefault("API_RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("POST_RATE_LIMIT", "3/minute")
os.environ.setdefault("SIGN_IN_URL", "http://testserver/sign-in")
os.environ.setdefault("LOG_LEVEL", "WARNING")
