"""
Inkpress Backend - Account & Session Routes
============================================

What:  POST /register, POST /login, GET /profile, POST /logout.
How:   Thin handlers: parse the body, call UserService / TokenService, set or
       clear the session cookie. Errors are raised and formatted by the
       global exception handlers.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from inkpress.config import Settings
from inkpress.dependencies import (
    get_credentials,
    get_current_claims,
    get_db_session,
    get_settings,
    get_token_service,
    get_user_service,
)
from inkpress.schemas.common import ErrorResponse
from inkpress.schemas.user import Credentials, LoginResponse, SessionClaims, UserResponse
from inkpress.services.token_service import TokenService
from inkpress.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

# Credentials are read by get_credentials, so the body schema is declared by hand
_CREDENTIALS_BODY = {
    "requestBody": {
        "content": {"application/json": {"schema": Credentials.model_json_schema()}},
    },
}


@router.post(
    "/register",
    response_model=UserResponse,
    responses={400: {"description": "Missing fields or username taken", "model": ErrorResponse}},
    summary="Create an account",
    openapi_extra=_CREDENTIALS_BODY,
)
async def register(
    credentials: Credentials = Depends(get_credentials),
    db: AsyncSession = Depends(get_db_session),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await user_service.register(db, credentials.username, credentials.password)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "User not found or incorrect password", "model": ErrorResponse},
        500: {"description": "Session could not be signed", "model": ErrorResponse},
    },
    summary="Log in and receive the session cookie",
    openapi_extra=_CREDENTIALS_BODY,
)
async def login(
    response: Response,
    credentials: Credentials = Depends(get_credentials),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    user_service: UserService = Depends(get_user_service),
    token_service: TokenService = Depends(get_token_service),
) -> LoginResponse:
    """
    Verify credentials and set the `token` cookie.

    The cookie is HttpOnly and has no Max-Age: it lives for the browser
    session, and the token inside it has no expiry of its own.
    """
    user = await user_service.authenticate(db, credentials.username, credentials.password)
    token = token_service.issue(SessionClaims(username=user.username, id=str(user.id)))

    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    logger.info("User logged in: %s", user.username)
    return LoginResponse(id=user.id, username=user.username)


@router.get(
    "/profile",
    response_model=SessionClaims,
    responses={401: {"description": "Token missing or invalid", "model": ErrorResponse}},
    summary="Identity of the current session",
)
async def profile(claims: SessionClaims = Depends(get_current_claims)) -> SessionClaims:
    logger.info("User profile accessed: %s", claims.username)
    return claims


@router.post("/logout", summary="Clear the session cookie")
async def logout(response: Response, settings: Settings = Depends(get_settings)) -> str:
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    logger.info("User logged out")
    return "ok"
