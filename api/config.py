"""
============================================================================
FILE: config.py
LOCATION: api/config.py
============================================================================

PURPOSE:
    Centralized configuration for the database, the identity provider and
    the rate limiters.

ROLE IN PROJECT:
    Loads environment variables and initializes the Firebase Admin SDK for
    the API layer, supporting mock and real Firebase usage.

KEY COMPONENTS:
    - DATABASE_URL: SQLAlchemy URL for the post store
    - POST_RATE_LIMIT / RATE_LIMIT_*: Post creation admission policy
    - PUBLIC_ROUTES / SIGN_IN_URL: Auth gate configuration
    - get_auth: Returns mock or real Firebase auth client
    - init_firebase: Initializes Firebase Admin SDK

DEPENDENCIES:
    - External: firebase_admin, python-dotenv
    - Internal: mock_auth (optional)

USAGE:
    from api.config import get_auth, POST_RATE_LIMIT
============================================================================
"""

import os
from pathlib import Path

import dotenv
import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials


# Load environment variables from .env
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / ".env"
if DOTENV_PATH.exists():
    dotenv.load_dotenv(DOTENV_PATH, override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# Database Configuration
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{PROJECT_ROOT / 'database' / 'chirp.db'}",
)
DATABASE_ECHO = _env_flag("DATABASE_ECHO", "false")

# Feed Configuration
FEED_LIMIT = 100
PROFILE_LOOKUP_LIMIT = 100
POST_MAX_LENGTH = 280
DEFAULT_AVATAR_URL = os.getenv(
    "DEFAULT_AVATAR_URL",
    "https://www.gravatar.com/avatar/?d=mp",
)

# Rate Limit Configuration
# Sliding window per author; "10/10 seconds" is also a valid policy.
POST_RATE_LIMIT = os.getenv("POST_RATE_LIMIT", "3/minute")
RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")
RATE_LIMIT_PREFIX = os.getenv("RATE_LIMIT_PREFIX", "chirp:ratelimit")

# Per client IP, applied to every route by slowapi
API_RATE_LIMIT = os.getenv("API_RATE_LIMIT", "100/minute")
API_RATE_LIMIT_ENABLED = _env_flag("API_RATE_LIMIT_ENABLED", "true")

# Auth Gate Configuration
PUBLIC_ROUTES = _env_list(
    "PUBLIC_ROUTES",
    "/,/health,/docs,/redoc,/openapi.json,/api/trpc/posts.getAll",
)
SIGN_IN_URL = os.getenv("SIGN_IN_URL", "http://localhost:8501/")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "__session")

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = _env_flag("LOG_JSON", "false")

# Mock Identity Provider Configuration
USE_REAL_FIREBASE = _env_flag("USE_REAL_FIREBASE", "false")
USE_MOCK_AUTH = not USE_REAL_FIREBASE

# Global auth instance
_auth_instance = None


def _resolve_credentials_path():
    """Resolve the Firebase credentials file path.

    Returns:
        Path: Absolute path to the service account JSON file.
    """
    env_path = os.getenv("FIREBASE_CREDENTIALS")
    if env_path:
        path = Path(env_path)
        if not path.is_absolute():
            path = PROJECT_ROOT / env_path
        return path
    return PROJECT_ROOT / "serviceAccountKey.json"


def init_firebase():
    """Initialize Firebase Admin SDK.

    Raises:
        FileNotFoundError: If real Firebase credentials are missing.
    """
    if not firebase_admin._apps:
        key_path = _resolve_credentials_path()
        if not key_path.exists():
            raise FileNotFoundError(
                f"Firebase credentials not found: {key_path}",
            )
        cred = credentials.Certificate(str(key_path))
        firebase_admin.initialize_app(cred)


def get_auth():
    """Get Firebase auth module or mock auth.

    Returns:
        object: MockAuth instance or firebase_admin.auth module.
    """
    global _auth_instance
    if _auth_instance is None:
        if USE_MOCK_AUTH:
            from api.mock_auth import get_mock_auth

            _auth_instance = get_mock_auth()
        else:
            init_firebase()
            _auth_instance = firebase_auth
    return _auth_instance
