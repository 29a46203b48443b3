# service.py
# Business logic for the posts procedures

# Provides PostService, which joins the post table with author profiles from
# the identity provider and gates post creation on the admission controller.
# The service owns no state: session, resolver and controller are injected.

# @see: router.py - FastAPI procedures that call this service
# @see: ../profiles.py - ProfileResolver
# @see: ../limiter.py - AdmissionController
# @note: A post whose author cannot be resolved fails the whole feed

from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from api.config import FEED_LIMIT
from api.errors import RpcError
from api.limiter import AdmissionController
from api.logging_config import get_logger
from api.profiles import ProfileResolver

from .models import Post
from .schemas import AuthorProfile, PostAuthor, PostOut, PostWithAuthor

logger = get_logger("posts")


class PostService:
    """Service for reading the feed and creating posts."""

    def __init__(
        self,
        session: Session,
        profiles: ProfileResolver,
        admission: AdmissionController,
    ):
        self.session = session
        self.profiles = profiles
        self.admission = admission

    def recent_posts(self, limit: int = FEED_LIMIT) -> List[Post]:
        stmt = (
            select(Post)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def get_all(self) -> List[PostWithAuthor]:
        """
        Return the newest posts joined with their authors.

        Raises:
            RpcError: INTERNAL_SERVER_ERROR if any post's author has no
                profile or no username
        """
        posts = self.recent_posts()
        if not posts:
            return []

        authors: Dict[str, AuthorProfile] = {
            profile.id: profile
            for profile in self.profiles.get_profiles(post.author_id for post in posts)
        }

        feed = []
        for post in posts:
            author = authors.get(post.author_id)
            if author is None or not author.username:
                logger.error(
                    f"Author {post.author_id} for post {post.id} could not be resolved",
                )
                raise RpcError("INTERNAL_SERVER_ERROR", "Author for post not found.")
            feed.append(
                PostWithAuthor(
                    post=PostOut.model_validate(post),
                    author=PostAuthor(**author.model_dump()),
                )
            )
        return feed

    def create(self, author_id: str, content: str) -> PostOut:
        """
        Insert a post for author_id if the admission controller allows it.

        Content must already be validated; nothing is written on denial.

        Raises:
            RpcError: TOO_MANY_REQUESTS if the author is over quota
        """
        # Adds a tick to the author's window, even if the insert below fails
        result = self.admission.limit(author_id)
        if not result.success:
            raise RpcError("TOO_MANY_REQUESTS", "You are posting too fast. Try again shortly.")

        post = Post(author_id=author_id, content=content)
        self.session.add(post)
        self.session.commit()
        logger.info(
            f"Post {post.id} created by {author_id}",
            extra={"extra_data": {"post_id": post.id, "author_id": author_id}},
        )
        return PostOut.model_validate(post)
