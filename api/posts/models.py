# models.py
# SQLAlchemy model for the post table

# Posts are immutable once written: id and created_at are assigned by the
# server at insert time, nothing updates or deletes rows.

# @see: service.py - Reads and writes Post rows
# @see: schemas.py - Pydantic views returned by the API

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from api.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Post(Base):
    """A single emoji post."""

    __tablename__ = "post"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    author_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        index=True,
    )

    def __repr__(self) -> str:
        return f"Post(id={self.id!r}, author_id={self.author_id!r})"
