"""
Inkpress Backend - User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table (the credential store).
Who:   UserService for registration/login, PostService to embed author names.

Table Design:
    - UUID primary key, generated in Python so SQLite and PostgreSQL behave alike
    - username: unique index; registration also pre-checks for a friendlier error
    - password_hash: bcrypt hash only, the plaintext is never stored
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpress.database import Base

if TYPE_CHECKING:
    from inkpress.models.post import Post


class User(Base):
    """
    A registered account.

    Lifecycle: created once via POST /register; never updated or deleted.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        unique=True,
        index=True,
        comment="Login name, unique across all users",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Salted bcrypt hash of the password",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    posts: Mapped[List["Post"]] = relationship(back_populates="author", lazy="raise")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
