"""
============================================================================
FILE: mock_auth.py
LOCATION: api/mock_auth.py
============================================================================

PURPOSE:
    In-memory stand-in for the Firebase Authentication admin client.
    Mirrors the subset of firebase_admin.auth that the API uses so the
    backend runs locally and under test without a Firebase project.

ROLE IN PROJECT:
    - Returned by config.get_auth() when USE_REAL_FIREBASE is false
    - Accepts "mock-token-<uid>" ID tokens
    - Serves batched profile lookups for the feed

KEY COMPONENTS:
    - MockUserRecord: User data container (uid, display_name, photo_url)
    - MockGetUsersResult: Result of a batched lookup (users, not_found)
    - MockAuth: create_user, get_users, verify_id_token, reset

DEPENDENCIES:
    - External: None
    - Internal: None

USAGE:
    from api.mock_auth import get_mock_auth

    auth = get_mock_auth()
    auth.create_user(uid="alice", display_name="alice")
    claims = auth.verify_id_token("mock-token-alice")
============================================================================
"""
import threading
import uuid
from typing import Any, Dict, List, Optional

MOCK_TOKEN_PREFIX = "mock-token-"


class MockUserRecord:
    def __init__(
        self,
        uid,
        email=None,
        display_name=None,
        photo_url=None,
        disabled=False,
    ):
        self.uid = uid
        self.email = email
        self.display_name = display_name
        self.photo_url = photo_url
        self.disabled = disabled


class MockGetUsersResult:
    def __init__(self, users: List[MockUserRecord], not_found: List[Any]):
        self.users = users
        self.not_found = not_found


class MockAuthError(Exception):
    pass


class MockUidAlreadyExistsError(MockAuthError):
    pass


class MockInvalidIdTokenError(MockAuthError):
    pass


class MockAuth:
    # Mimic exception classes so callers can use auth.InvalidIdTokenError
    UidAlreadyExistsError = MockUidAlreadyExistsError
    InvalidIdTokenError = MockInvalidIdTokenError

    def __init__(self, auto_create_users: bool = True):
        self._users: Dict[str, MockUserRecord] = {}
        self._lock = threading.Lock()
        # Verifying a token for an unknown uid registers that user,
        # which is what a first sign-in does against the real provider.
        self.auto_create_users = auto_create_users

    def create_user(
        self,
        uid=None,
        email=None,
        display_name=None,
        photo_url=None,
        disabled=False,
        **kwargs,
    ):
        uid = uid or f"mock-user-{uuid.uuid4().hex[:12]}"
        with self._lock:
            if uid in self._users:
                raise self.UidAlreadyExistsError(f"User {uid} already exists")
            user = MockUserRecord(uid, email, display_name, photo_url, disabled)
            self._users[uid] = user
        return user

    def get_users(self, identifiers):
        """Batched lookup by UidIdentifier-like objects (anything with .uid)."""
        if len(identifiers) > 100:
            raise ValueError("`identifiers` parameter must have <= 100 entries.")
        users = []
        not_found = []
        for identifier in identifiers:
            uid = getattr(identifier, "uid", identifier)
            user = self._users.get(uid)
            if user is None:
                not_found.append(identifier)
            else:
                users.append(user)
        return MockGetUsersResult(users, not_found)

    def reset(self):
        with self._lock:
            self._users.clear()

    def verify_id_token(self, token, check_revoked=False, clock_skew_seconds=0):
        if not token or not token.startswith(MOCK_TOKEN_PREFIX):
            raise self.InvalidIdTokenError("Invalid mock token")
        uid = token[len(MOCK_TOKEN_PREFIX):]
        if not uid:
            raise self.InvalidIdTokenError("Mock token missing uid")
        if uid not in self._users:
            if not self.auto_create_users:
                raise self.InvalidIdTokenError(f"Unknown mock user {uid}")
            try:
                self.create_user(uid=uid, display_name=uid)
            except self.UidAlreadyExistsError:
                pass
        user = self._users[uid]
        if user.disabled:
            raise self.InvalidIdTokenError("User account is disabled")
        return {"uid": uid, "email": user.email, "name": user.display_name}


_mock_auth: Optional[MockAuth] = None


def get_mock_auth() -> MockAuth:
    """Return the process-wide mock auth client."""
    global _mock_auth
    if _mock_auth is None:
        _mock_auth = MockAuth()
    return _mock_auth
