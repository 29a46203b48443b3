# schemas.py
# Pydantic models for the posts procedures

# Field names are snake_case in Python and camelCase on the wire
# (authorId, createdAt, profileImageUrl) via alias generation.

# @see: router.py - Uses these models for FastAPI validation
# @see: service.py - Builds PostWithAuthor views

from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from api.validators import validate_post_content


T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PostCreate(CamelModel):
    """Input of posts.create."""
    content: str

    @field_validator("content")
    @classmethod
    def content_is_emoji(cls, value: str) -> str:
        return validate_post_content(value)


class PostOut(CamelModel):
    """A stored post."""
    id: str
    author_id: str
    content: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo; they are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class AuthorProfile(CamelModel):
    """Public profile of a post author, resolved from the identity provider."""
    id: str
    username: Optional[str] = None
    profile_image_url: str


class PostAuthor(AuthorProfile):
    """Author attached to a feed entry; username is always resolved."""
    username: str


class PostWithAuthor(CamelModel):
    post: PostOut
    author: PostAuthor


class RpcResult(BaseModel, Generic[T]):
    data: T


class RpcResponse(BaseModel, Generic[T]):
    """Success envelope: {"result": {"data": ...}}."""
    result: RpcResult[T]


FeedResponse = RpcResponse[List[PostWithAuthor]]
CreatePostResponse = RpcResponse[PostOut]
