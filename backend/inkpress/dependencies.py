"""
Inkpress Backend - FastAPI Dependencies
========================================

What:  Accessors for the per-application components and the per-request
       database session, session claims and login credentials.
How:   create_app() stores Settings, Database and the services on app.state;
       these functions hand them to route handlers through Depends().
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inkpress.config import Settings
from inkpress.schemas.user import Credentials, SessionClaims
from inkpress.services.file_service import FileService
from inkpress.services.post_service import PostService
from inkpress.services.token_service import TokenService
from inkpress.services.user_service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_post_service(request: Request) -> PostService:
    return request.app.state.post_service


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a database session per request.

    How it works:
        1. Creates a new session from the application's factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises so the global handlers respond
        5. Always: closes the session (returns connection to pool)
    """
    async with request.app.state.db.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_current_claims(
    request: Request,
    settings: Settings = Depends(get_settings),
    token_service: TokenService = Depends(get_token_service),
) -> SessionClaims:
    """
    Claims of the session cookie.

    Raises MissingTokenError / InvalidTokenError (both 401) via TokenService.
    """
    return token_service.verify(request.cookies.get(settings.cookie_name))


async def get_credentials(request: Request) -> Credentials:
    """
    Credentials from a JSON request body.

    A missing, non-JSON or non-object body yields empty Credentials, which
    the services reject with a 400 like any other missing field.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return Credentials()
    return Credentials.model_validate(payload)
