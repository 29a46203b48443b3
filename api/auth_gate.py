"""
============================================================================
FILE: auth_gate.py
LOCATION: api/auth_gate.py
============================================================================

PURPOSE:
    HTTP middleware that decides, per request, whether the caller may
    reach a route, and redirects signed-out users away from private ones.

ROLE IN PROJECT:
    Installed first in main.py so every request is classified before
    routing. The decision is attached to request.state.auth for the
    procedures (see auth.get_auth_state). Nothing is stored between
    requests.

KEY COMPONENTS:
    - RouteMatcher: Public route patterns and static-asset exclusions
    - AuthGateMiddleware: Resolves identity, redirects to sign-in
    - sign_in_redirect_url(): Sign-in URL carrying the return URL

DEPENDENCIES:
    - External: starlette (via fastapi)
    - Internal: auth.py, config.py, logging_config.py
============================================================================
"""

import re
from typing import Iterable, List
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from api.auth import AuthState, extract_token, resolve_user_id
from api.config import PUBLIC_ROUTES, SIGN_IN_URL
from api.logging_config import get_logger

logger = get_logger("auth_gate")

# Paths with a dot in them (files) or framework internals never hit the
# gate, except API and RPC paths which always do.
IGNORED_ROUTE = re.compile(r"^/(?!api|trpc)(?:.*\..*|_next.*|static/.*)$")


def _compile_pattern(pattern: str) -> re.Pattern:
    if "(" in pattern:
        # Already a regex, e.g. "/api/public(.*)"
        return re.compile(f"^{pattern}$")
    parts = [re.escape(part) for part in pattern.split("*")]
    return re.compile("^" + ".*".join(parts) + "$")


class RouteMatcher:
    """Classifies request paths as public, private or ignored."""

    def __init__(self, public_patterns: Iterable[str] = PUBLIC_ROUTES):
        self.public_patterns: List[str] = list(public_patterns)
        self._public = [_compile_pattern(p) for p in self.public_patterns]

    def is_public(self, path: str) -> bool:
        return any(pattern.match(path) for pattern in self._public)

    def is_ignored(self, path: str) -> bool:
        return IGNORED_ROUTE.match(path) is not None


def sign_in_redirect_url(return_url: str, sign_in_url: str = SIGN_IN_URL) -> str:
    separator = "&" if "?" in sign_in_url else "?"
    return f"{sign_in_url}{separator}{urlencode({'redirect_url': return_url})}"


class AuthGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, matcher: RouteMatcher = None, sign_in_url: str = None):
        super().__init__(app)
        self.matcher = matcher or RouteMatcher()
        self.sign_in_url = sign_in_url or SIGN_IN_URL

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if self.matcher.is_ignored(path):
            return await call_next(request)

        token = extract_token(request)
        # Token verification may fetch signing keys over the network
        user_id = await run_in_threadpool(resolve_user_id, token)
        state = AuthState(user_id=user_id, is_public_route=self.matcher.is_public(path))
        request.state.auth = state

        if not state.is_signed_in and not state.is_public_route:
            logger.debug(f"Redirecting signed-out request for {path} to sign-in")
            return RedirectResponse(
                sign_in_redirect_url(str(request.url), self.sign_in_url),
                status_code=307,
            )

        return await call_next(request)
