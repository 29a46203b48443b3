"""
============================================================================
FILE: profiles.py
LOCATION: api/profiles.py
============================================================================

PURPOSE:
    Resolve post author IDs to public profiles through the identity
    provider (Firebase Authentication).

ROLE IN PROJECT:
    The feed never stores author names or avatars locally. posts.getAll
    asks the ProfileResolver for every distinct author in one batched call
    and joins the result onto the posts.

KEY COMPONENTS:
    - ProfileResolver: Interface consumed by the posts service
    - FirebaseProfileResolver: Batched lookup via auth.get_users()
    - filter_user_for_client: Strip a user record to public fields
    - get_profile_resolver: FastAPI dependency

DEPENDENCIES:
    - External: firebase_admin
    - Internal: config.py (get_auth, limits, default avatar)
============================================================================
"""

from typing import Iterable, List, Protocol

from firebase_admin import auth as firebase_auth

from api.config import DEFAULT_AVATAR_URL, PROFILE_LOOKUP_LIMIT, get_auth
from api.logging_config import get_logger
from api.posts.schemas import AuthorProfile

logger = get_logger("profiles")


class ProfileResolver(Protocol):
    def get_profiles(self, user_ids: Iterable[str]) -> List[AuthorProfile]:
        ...


def filter_user_for_client(user) -> AuthorProfile:
    """Keep only the fields safe to show next to a post."""
    return AuthorProfile(
        id=user.uid,
        username=user.display_name,
        profile_image_url=user.photo_url or DEFAULT_AVATAR_URL,
    )


class FirebaseProfileResolver:
    """Looks up users in Firebase Auth (or the mock client in dev/test)."""

    def __init__(self, auth_client=None, limit: int = PROFILE_LOOKUP_LIMIT):
        self._auth_client = auth_client
        self.limit = limit

    @property
    def auth_client(self):
        if self._auth_client is None:
            self._auth_client = get_auth()
        return self._auth_client

    def get_profiles(self, user_ids: Iterable[str]) -> List[AuthorProfile]:
        # dict.fromkeys keeps first-seen order while removing duplicates
        unique_ids = list(dict.fromkeys(uid for uid in user_ids if uid))
        if not unique_ids:
            return []
        if len(unique_ids) > self.limit:
            logger.warning(
                f"Profile lookup capped at {self.limit} of {len(unique_ids)} authors",
            )
            unique_ids = unique_ids[:self.limit]

        identifiers = [firebase_auth.UidIdentifier(uid) for uid in unique_ids]
        result = self.auth_client.get_users(identifiers)
        if result.not_found:
            logger.debug(f"{len(result.not_found)} author profiles not found")
        return [filter_user_for_client(user) for user in result.users]


def get_profile_resolver() -> ProfileResolver:
    """Dependency for getting a ProfileResolver instance."""
    return FirebaseProfileResolver()
