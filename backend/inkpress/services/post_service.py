"""
Inkpress Backend - Post Service (Content Store)
================================================

What:  Create, edit, list and fetch blog posts.
How:   Composes FileService (cover uploads) with async SQLAlchemy queries.
Who:   Called by the /post route handlers.

Cover file and post row stay in step:

    create:  store file ──▶ insert + commit ──▶ ok
                                 │ fails
                                 └──▶ cleanup(new file), re-raise

    update:  load post ──▶ author check ──▶ store file ──▶ update + commit ──▶ cleanup(old cover)
               │ 404          │ 400                           │ fails
               └──────────────┴── nothing stored              └──▶ cleanup(new file), re-raise

    Writes commit inside the service so that a failed commit is still seen
    here, while the uploaded file can be removed.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkpress.exceptions import (
    AuthorizationError,
    DatabaseError,
    InkpressError,
    InvalidTokenError,
    NotFoundError,
)
from inkpress.models.post import Post
from inkpress.models.user import User
from inkpress.schemas.post import PostDetailResponse, PostResponse
from inkpress.schemas.user import SessionClaims
from inkpress.services.file_service import FileService

logger = logging.getLogger(__name__)

# GET /post returns at most this many posts, newest first
LATEST_POSTS_LIMIT = 20


def _to_response(post: Post) -> PostResponse:
    return PostResponse(
        id=post.id,
        title=post.title,
        summary=post.summary,
        content=post.content,
        cover=post.cover,
        author=post.author_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _parse_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class PostService:
    """
    Business logic layer for posts.

    Responsibilities:
        - create(): upload cover + insert, author taken from the session
        - update(): author-only partial edit, optional cover replacement
        - list_latest(): newest posts with author usernames
        - get_by_id(): single post with author username, or None
    """

    def __init__(self, file_service: FileService):
        self.file_service = file_service

    async def create(
        self,
        db: AsyncSession,
        claims: SessionClaims,
        title: str,
        summary: str,
        content: str,
        upload: Optional[UploadFile],
    ) -> PostResponse:
        """
        Store the cover and persist a new post authored by the session user.

        Raises:
            InvalidTokenError: the session's user id is malformed or unknown (401)
            MissingFileError:  no cover uploaded (400)
            DatabaseError:     insert/commit failed; the cover has been removed (500)
        """
        author_id = _parse_uuid(claims.id)
        if author_id is None or await db.get(User, author_id) is None:
            logger.warning("Post rejected: session user %s does not exist", claims.id)
            raise InvalidTokenError(message="Unauthorized: Unknown user")

        cover = await self.file_service.store(upload)

        try:
            post = Post(
                title=title,
                summary=summary,
                content=content,
                cover=cover,
                author_id=author_id,
            )
            db.add(post)
            await db.commit()
        except Exception as e:
            await self.file_service.cleanup(cover)
            if isinstance(e, InkpressError):
                raise
            logger.error("Error creating post for %s: %s", claims.username, str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while saving your post. Please try again.",
                context={"original_error": type(e).__name__},
            )

        logger.info("Post %s created by %s", post.id, claims.username)
        return _to_response(post)

    async def update(
        self,
        db: AsyncSession,
        claims: SessionClaims,
        post_id: str,
        title: Optional[str] = None,
        summary: Optional[str] = None,
        content: Optional[str] = None,
        upload: Optional[UploadFile] = None,
    ) -> PostResponse:
        """
        Apply a partial edit. Only fields that are not None change; the cover
        changes only when a new file was uploaded.

        Raises:
            NotFoundError:      unknown or malformed post id (404)
            AuthorizationError: session user is not the post's author (400)
            DatabaseError:      commit failed; the new cover has been removed (500)
        """
        post_uuid = _parse_uuid(post_id)
        post = await db.get(Post, post_uuid) if post_uuid is not None else None
        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id or None)

        # Compared by value: the claim is a string, the column a UUID
        if str(post.author_id) != str(claims.id):
            logger.warning("User %s attempted to edit post %s they did not write", claims.username, post.id)
            raise AuthorizationError(context={"post_id": str(post.id)})

        new_cover = None
        if upload is not None and upload.filename:
            new_cover = await self.file_service.store(upload)
        previous_cover = post.cover

        try:
            if title is not None:
                post.title = title
            if summary is not None:
                post.summary = summary
            if content is not None:
                post.content = content
            if new_cover:
                post.cover = new_cover
            post.updated_at = datetime.now(timezone.utc)
            await db.commit()
        except Exception as e:
            if new_cover:
                await self.file_service.cleanup(new_cover)
            logger.error("Error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while saving your post. Please try again.",
                context={"original_error": type(e).__name__},
            )

        if new_cover and previous_cover:
            await self.file_service.cleanup(previous_cover)

        logger.info("Post %s updated by %s", post.id, claims.username)
        return _to_response(post)

    async def list_latest(self, db: AsyncSession, limit: int = LATEST_POSTS_LIMIT) -> List[PostDetailResponse]:
        """
        Newest posts first, each with its author's username.

        Query plan:
            SELECT ... FROM posts ORDER BY created_at DESC LIMIT 20
            + one SELECT ... FROM users WHERE id IN (...) for the authors
        """
        try:
            result = await db.execute(
                select(Post)
                .options(selectinload(Post.author))
                .order_by(desc(Post.created_at))
                .limit(limit)
            )
            posts = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [PostDetailResponse.model_validate(post) for post in posts]

    async def get_by_id(self, db: AsyncSession, post_id: uuid.UUID) -> Optional[PostDetailResponse]:
        """Single post with its author's username; None when the id is unknown."""
        try:
            result = await db.execute(
                select(Post).options(selectinload(Post.author)).where(Post.id == post_id)
            )
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"post_id": str(post_id)},
            )

        if post is None:
            return None
        return PostDetailResponse.model_validate(post)
