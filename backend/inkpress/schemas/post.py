"""
Inkpress Backend - Post Request/Response Schemas
=================================================

What:  Pydantic models defining the post API contract.
How:   FastAPI serializes route return values through these models.

Two shapes of the same record:
    PostResponse        author is the author's id (create/update responses)
    PostDetailResponse  author is {id, username} (list/get responses)
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AuthorSummary(BaseModel):
    """The only author fields exposed next to a post."""
    id: uuid.UUID
    username: str

    model_config = {"from_attributes": True}


class PostResponse(BaseModel):
    """
    What:  A post as written, with the author reference unresolved.
    Who:   Returned by PUT /post and wrapped by POST /post.
    """
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str
    summary: str
    content: str
    cover: Optional[str] = Field(default=None, description="Path of the cover image under /uploads")
    author: uuid.UUID = Field(description="Author's user id")
    created_at: datetime
    updated_at: datetime


class PostCreatedResponse(BaseModel):
    """
    Returned by POST /post.

    The created post sits under a `postDoc` key, which clients already read.
    """
    post_doc: PostResponse = Field(alias="postDoc")

    model_config = {"populate_by_name": True}


class PostDetailResponse(BaseModel):
    """
    What:  A post with its author's username resolved.
    Who:   Returned by GET /post (as list items) and GET /post/{id}.
    """
    id: uuid.UUID
    title: str
    summary: str
    content: str
    cover: Optional[str] = None
    author: AuthorSummary
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
