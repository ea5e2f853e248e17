"""
Inkpress Backend - Account & Session Schemas
=============================================

What:  Pydantic models for /register, /login and /profile.
Why:   The ORM User row holds the password hash; response models list exactly
       what leaves the server.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Credentials(BaseModel):
    """
    Body of POST /register and POST /login.

    Nothing in the body is mandatory at this layer: absent, null or non-text
    values become None so that the services reply with the API's own 400
    message instead of FastAPI's 422. Numbers are kept as their text.
    """
    username: Optional[str] = Field(default=None, description="Login name")
    password: Optional[str] = Field(default=None, description="Plaintext password (never stored)")

    @field_validator("username", "password", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> Optional[str]:
        if isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return str(v)
        return v if isinstance(v, str) else None


class UserResponse(BaseModel):
    """Returned by POST /register. The password hash is deliberately absent."""
    id: uuid.UUID
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    """Returned by POST /login alongside the session cookie."""
    id: uuid.UUID
    username: str


class SessionClaims(BaseModel):
    """
    Identity claims embedded in the session token.

    `id` is kept as a string: it is compared by value against post authors
    and echoed back unchanged by GET /profile.
    """
    username: str
    id: str
