"""
Inkpress Backend - Post SQLAlchemy Model
=========================================

What:  ORM model for the `posts` table (the content store).
Who:   PostService for create/update/list/get; Alembic for schema management.

Table Design:
    - author_id: FK to users.id, set from the verified session at creation and
      never changed afterwards
    - cover: upload path as served under /uploads; NULL when no cover
    - created_at: drives the "latest posts" listing, indexed DESC
    - updated_at: refreshed on every successful edit

    Index on created_at DESC:
        GET /post reads ORDER BY created_at DESC LIMIT 20 on every home page load.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpress.database import Base

if TYPE_CHECKING:
    from inkpress.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A blog post.

    Lifecycle:
        1. Created by an authenticated user, who becomes the author
        2. Edited only by that author (title, summary, content, cover)
        3. Never deleted through the API

    Query Patterns:
        - Latest posts: ORDER BY created_at DESC LIMIT 20 (idx_posts_created_at)
        - Single post:  WHERE id = :uuid (primary key)
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    cover: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
        comment="Path of the uploaded cover image",
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # lazy="raise": async sessions cannot lazy-load, queries opt in with selectinload
    author: Mapped["User"] = relationship(back_populates="posts", lazy="raise")

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', author_id={self.author_id})>"


Index("idx_posts_created_at", Post.created_at.desc())
