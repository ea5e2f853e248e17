"""
Inkpress Backend - Token Service (Session Issuer)
==================================================

What:  Signs and verifies the session token stored in the `token` cookie.
How:   python-jose HS256 JWTs carrying {"username", "id"}. Tokens have no
       expiry claim; logging out clears the cookie client-side.

Verified claims are trusted as-is: handlers do not re-read the user row on
every request. The only exception is post creation, which confirms the
author still exists before writing.
"""

import logging
from typing import Optional

from jose import JWTError, jwt
from jose.exceptions import JOSEError

from inkpress.exceptions import InvalidTokenError, MissingTokenError, TokenSigningError
from inkpress.schemas.user import SessionClaims

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and checks session tokens with one secret and algorithm."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def issue(self, claims: SessionClaims) -> str:
        """
        Sign the claims into a token.

        Raises:
            TokenSigningError: the signing backend rejected the key or payload (500)
        """
        try:
            return jwt.encode(claims.model_dump(), self.secret, algorithm=self.algorithm)
        except JOSEError as e:
            logger.error("Failed to sign session token for %s: %s", claims.username, str(e))
            raise TokenSigningError(context={"error_type": type(e).__name__})

    def verify(self, token: Optional[str]) -> SessionClaims:
        """
        Decode a token back into its claims.

        Raises:
            MissingTokenError: token is None or empty
            InvalidTokenError: bad signature, malformed token, or missing identity claims
        """
        if not token:
            logger.warning("Unauthorized: Token missing")
            raise MissingTokenError()

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning("Unauthorized: Invalid token (%s)", str(e))
            raise InvalidTokenError(context={"reason": str(e)})

        username = payload.get("username")
        user_id = payload.get("id")
        if not isinstance(username, str) or user_id is None:
            logger.warning("Unauthorized: token lacks identity claims")
            raise InvalidTokenError(context={"reason": "missing claims"})

        return SessionClaims(username=username, id=str(user_id))
