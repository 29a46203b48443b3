"""
============================================================================
FILE: test_validators.py
LOCATION: tests/test_validators.py
============================================================================

PURPOSE:
    Tests for post content validation and the PostCreate schema.

USAGE:
    pytest tests/test_validators.py -v
============================================================================
"""

import pydantic
import pytest

from api.posts.schemas import PostCreate
from api.validators import EMOJI_ERROR_MESSAGE, is_emoji_only, validate_post_content


@pytest.mark.parametrize(
    "content",
    [
        "😀",
        "😀😂🎉",
        "🚀",
        "👍🏽",  # skin tone modifier
        "👨‍👩‍👧",  # ZWJ family sequence
        "🇯🇵",  # regional indicator pair
        "❤️",  # variation selector
    ],
)
def test_emoji_accepted(content: str) -> None:
    assert is_emoji_only(content)
    assert validate_post_content(content) == content


@pytest.mark.parametrize(
    "content",
    ["hello", "😀 ", " 😀", "😀a", "😀\n", "😀\n😀", "abc😀", "!"],
)
def test_non_emoji_rejected(content: str) -> None:
    assert not is_emoji_only(content)
    with pytest.raises(ValueError, match=EMOJI_ERROR_MESSAGE):
        validate_post_content(content)


def test_empty_rejected() -> None:
    assert not is_emoji_only("")
    with pytest.raises(ValueError, match="at least 1"):
        validate_post_content("")


def test_length_limit() -> None:
    assert validate_post_content("🎉" * 280) == "🎉" * 280
    with pytest.raises(ValueError, match="at most 280"):
        validate_post_content("🎉" * 281)


def test_length_counts_code_points() -> None:
    family = "👨‍👩‍👧"  # three people joined by two ZWJ
    assert len(family) == 5

    # 280 code points, 448 UTF-16 units
    assert validate_post_content(family * 56) == family * 56
    assert validate_post_content("😀" * 141) == "😀" * 141
    with pytest.raises(ValueError, match="at most 280"):
        validate_post_content(family * 57)


class TestPostCreateSchema:
    def test_valid(self) -> None:
        assert PostCreate(content="😀").content == "😀"

    def test_invalid_message(self) -> None:
        with pytest.raises(pydantic.ValidationError) as exc:
            PostCreate(content="nope")
        assert EMOJI_ERROR_MESSAGE in str(exc.value)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            PostCreate(content=123)
