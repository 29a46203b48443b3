# __init__.py
# Package exports for the posts procedures

# Usage: from api.posts import Post, PostCreate, PostWithAuthor
# The router and service are imported from their modules directly
# (api.posts.router, api.posts.service) since they depend on api.profiles,
# which itself imports the schemas below.

from .models import Post
from .schemas import (
    AuthorProfile,
    PostAuthor,
    PostCreate,
    PostOut,
    PostWithAuthor,
)

__all__ = [
    # ORM
    "Post",
    # Schemas
    "AuthorProfile",
    "PostAuthor",
    "PostCreate",
    "PostOut",
    "PostWithAuthor",
]
