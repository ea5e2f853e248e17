"""
Inkpress Backend - Post Routes
===============================

What:  POST /post, PUT /post, GET /post, GET /post/{id}.
How:   Multipart forms for writes (text fields + `file`), JSON for reads.
       Writes require the session cookie, resolved by get_current_claims
       before the handler runs, so an unauthenticated write never touches
       the upload directory.

Caching:
    - Writes: no caching
    - GET /post: changes on every new post, served uncached
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import FormData

from inkpress.dependencies import get_current_claims, get_db_session, get_post_service
from inkpress.schemas.common import ErrorResponse
from inkpress.schemas.post import PostCreatedResponse, PostDetailResponse, PostResponse
from inkpress.schemas.user import SessionClaims
from inkpress.services.post_service import PostService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/post", tags=["Posts"])


def _sent_text(form: FormData, name: str) -> Optional[str]:
    """The field's text as sent ("" included), or None if it was not sent."""
    value = form.get(name)
    return value if isinstance(value, str) else None


@router.post(
    "",
    response_model=PostCreatedResponse,
    responses={
        400: {"description": "Cover file missing or too large", "model": ErrorResponse},
        401: {"description": "Token missing or invalid", "model": ErrorResponse},
    },
    summary="Publish a post with a cover image",
)
async def create_post(
    title: str = Form(default=""),
    summary: str = Form(default=""),
    content: str = Form(default=""),
    file: Optional[UploadFile] = File(default=None, description="Cover image"),
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db_session),
    post_service: PostService = Depends(get_post_service),
) -> PostCreatedResponse:
    try:
        post = await post_service.create(
            db,
            claims=claims,
            title=title,
            summary=summary,
            content=content,
            upload=file,
        )
    finally:
        if file is not None:
            await file.close()
    return PostCreatedResponse(post_doc=post)


@router.put(
    "",
    response_model=PostResponse,
    responses={
        400: {"description": "Not the author, or cover too large", "model": ErrorResponse},
        401: {"description": "Token missing or invalid", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Edit one of your posts",
)
async def update_post(
    request: Request,
    id: str = Form(default=""),
    title: Optional[str] = Form(default=None),
    summary: Optional[str] = Form(default=None),
    content: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None, description="Replacement cover image"),
    claims: SessionClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db_session),
    post_service: PostService = Depends(get_post_service),
) -> PostResponse:
    """
    Partial edit: omitted text fields keep their value, and the cover is
    replaced only when a new file is sent.

    FastAPI hands an empty form value over as the field default (None), so
    the text fields are re-read from the parsed form: a field sent as ""
    clears the stored value.
    """
    form = await request.form()
    try:
        return await post_service.update(
            db,
            claims=claims,
            post_id=id,
            title=_sent_text(form, "title"),
            summary=_sent_text(form, "summary"),
            content=_sent_text(form, "content"),
            upload=file,
        )
    finally:
        if file is not None:
            await file.close()


@router.get(
    "",
    response_model=List[PostDetailResponse],
    summary="Latest 20 posts, newest first",
)
async def list_posts(
    db: AsyncSession = Depends(get_db_session),
    post_service: PostService = Depends(get_post_service),
) -> List[PostDetailResponse]:
    return await post_service.list_latest(db)


@router.get(
    "/{post_id}",
    response_model=Optional[PostDetailResponse],
    summary="A single post, or null when the id is unknown",
)
async def get_post(
    post_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    post_service: PostService = Depends(get_post_service),
) -> Optional[PostDetailResponse]:
    return await post_service.get_by_id(db, post_id)
