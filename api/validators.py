"""
============================================================================
FILE: validators.py
LOCATION: api/validators.py
============================================================================

PURPOSE:
    Validation utilities for post content.

ROLE IN PROJECT:
    Shared by the post input schema so that content is checked before any
    side effect (rate-limit tick or insert) happens.

KEY COMPONENTS:
    - EMOJI_PATTERN: Matches strings made only of emoji code points
    - is_emoji_only: Boolean check
    - validate_post_content: Length + emoji validation raising ValueError

DEPENDENCIES:
    - External: regex (Unicode emoji properties, unsupported by re)
    - Internal: config.py (POST_MAX_LENGTH)

USAGE:
    from api.validators import validate_post_content
============================================================================
"""

import regex

from api.config import POST_MAX_LENGTH

EMOJI_ERROR_MESSAGE = "Only emojis are allowed!"

# Pictographs plus the components that glue them together (ZWJ, variation
# selectors, skin tones, keycap bases, regional indicators, tags).
EMOJI_PATTERN = regex.compile(
    r"(?:\p{Extended_Pictographic}|\p{Emoji_Component})+",
)


def is_emoji_only(value: str) -> bool:
    """Return True if every code point of value belongs to an emoji."""
    return bool(value) and EMOJI_PATTERN.fullmatch(value) is not None


def validate_post_content(content: str) -> str:
    """Validate post content.

    Args:
        content: Raw content submitted by the author.

    Returns:
        str: The unchanged content.

    Raises:
        ValueError: If content is empty, too long, or not emoji-only.
    """
    if len(content) < 1:
        raise ValueError("Content must contain at least 1 character")
    if len(content) > POST_MAX_LENGTH:
        raise ValueError(
            f"Content must contain at most {POST_MAX_LENGTH} characters",
        )
    if not is_emoji_only(content):
        raise ValueError(EMOJI_ERROR_MESSAGE)
    return content
