"""
============================================================================
FILE: auth.py
LOCATION: api/auth.py
============================================================================

PURPOSE:
    Firebase Authentication utilities for verifying ID tokens and exposing
    the caller's identity to procedures.

ROLE IN PROJECT:
    The auth gate middleware calls resolve_user_id() once per request and
    stores an AuthState on request.state. Procedures read it through the
    FastAPI dependencies defined here; private procedures depend on
    get_current_user_id().

KEY COMPONENTS:
    - AuthState: Per-request identity and route visibility
    - extract_token(): Bearer header or session cookie
    - verify_firebase_token(): Verify an ID token, raising UNAUTHORIZED
    - resolve_user_id(): Non-raising variant used by the gate
    - get_auth_state(): Dependency returning the request's AuthState
    - get_current_user_id(): Dependency for private procedures

DEPENDENCIES:
    - External: firebase_admin.auth, fastapi
    - Internal: config.py, errors.py

USAGE:
    from api.auth import get_current_user_id

    @router.post("/posts.create")
    def create(user_id: str = Depends(get_current_user_id)):
        ...
============================================================================
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from firebase_admin import auth

from api.config import SESSION_COOKIE_NAME, get_auth
from api.errors import RpcError
from api.logging_config import get_logger

logger = get_logger("auth")


@dataclass(frozen=True)
class AuthState:
    user_id: Optional[str]
    is_public_route: bool

    @property
    def is_signed_in(self) -> bool:
        return self.user_id is not None


def extract_token(request: Request) -> Optional[str]:
    """Return the ID token from the Authorization header or session cookie."""
    header = request.headers.get("Authorization")
    if header:
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    return cookie or None


def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token and return decoded claims.

    Args:
        token: The Firebase ID token (JWT)

    Returns:
        dict: Decoded token claims containing uid, email, etc.

    Raises:
        RpcError: UNAUTHORIZED if the token is invalid, expired or revoked
    """
    try:
        auth_client = get_auth()
        # Allow 10 seconds of clock skew to prevent "Token used too early" errors
        return auth_client.verify_id_token(token, clock_skew_seconds=10)
    except auth.ExpiredIdTokenError as exc:
        raise RpcError("UNAUTHORIZED", f"Authentication token has expired: {exc}")
    except auth.RevokedIdTokenError as exc:
        raise RpcError("UNAUTHORIZED", f"Authentication token has been revoked: {exc}")
    except auth.InvalidIdTokenError as exc:
        raise RpcError("UNAUTHORIZED", f"Invalid authentication token: {exc}")
    except Exception as exc:
        raise RpcError("UNAUTHORIZED", f"Authentication failed: {exc}")


def resolve_user_id(token: Optional[str]) -> Optional[str]:
    """Return the uid for token, or None when missing or not verifiable."""
    if not token:
        return None
    try:
        claims = verify_firebase_token(token)
    except RpcError as exc:
        logger.warning(f"Treating request as signed out: {exc.message}")
        return None
    return claims.get("uid") or None


def get_auth_state(request: Request) -> AuthState:
    """Dependency returning the AuthState attached by the auth gate."""
    state = getattr(request.state, "auth", None)
    if state is None:
        # Gate not installed (e.g. a bare router in tests): resolve directly
        state = AuthState(
            user_id=resolve_user_id(extract_token(request)),
            is_public_route=False,
        )
        request.state.auth = state
    return state


def get_current_user_id(state: AuthState = Depends(get_auth_state)) -> str:
    """Dependency that requires a signed-in caller."""
    if not state.is_signed_in:
        raise RpcError("UNAUTHORIZED", "You must be signed in to do this.")
    return state.user_id
