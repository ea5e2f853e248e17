"""
Inkpress Backend - User Service (Credential Store)
===================================================

What:  Registration, lookup and password checks for user accounts.
How:   passlib's CryptContext produces salted bcrypt hashes. Hashing is CPU
       bound and blocking, so it runs in Starlette's threadpool while the
       event loop keeps serving other requests.
Who:   Called by the /register and /login route handlers.

Usernames are unique: registration pre-checks for an existing account and
the unique index on users.username catches concurrent duplicates.
"""

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from inkpress.exceptions import DatabaseError, ValidationError
from inkpress.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for accounts.

    Responsibilities:
        - register(): validate, hash, persist a new user
        - find_by_username(): side-effect free lookup
        - authenticate(): resolve credentials to a user or a 400 error
    """

    def __init__(self, bcrypt_rounds: int = 10):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=bcrypt_rounds,
        )

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, password_hash: str) -> bool:
        return self.pwd_context.verify(plain_password, password_hash)

    async def find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user %s: %s", username, str(e))
            raise DatabaseError(context={"username": username})

    async def register(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> User:
        """
        Create a new account.

        Raises:
            ValidationError: username or password empty, username taken,
                             password not hashable (NUL bytes), or the insert
                             failed (all reported as 400)
        """
        if not username or not password:
            raise ValidationError(
                message="Username or password is missing",
                context={"username_present": bool(username), "password_present": bool(password)},
            )

        if await self.find_by_username(db, username) is not None:
            logger.warning("Registration rejected, username taken: %s", username)
            raise ValidationError(message="Username is already taken", field="username")

        try:
            password_hash = await run_in_threadpool(self.hash_password, password)
        except ValueError as e:
            # passlib's PasswordValueError, e.g. NUL bytes, which bcrypt rejects
            logger.warning("Registration rejected, unusable password for %s: %s", username, str(e))
            raise ValidationError(message="Password contains unsupported characters", field="password")

        user = User(username=username, password_hash=password_hash)
        db.add(user)

        try:
            await db.flush()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same name
            logger.warning("Registration rejected by unique index: %s", username)
            raise ValidationError(message="Username is already taken", field="username")
        except SQLAlchemyError as e:
            logger.error("Error registering user %s: %s", username, str(e))
            raise ValidationError(
                message="Failed to register user",
                context={"error_type": type(e).__name__},
            )

        logger.info("New user registered: %s (%s)", user.username, user.id)
        return user

    async def authenticate(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> User:
        """
        Resolve a username/password pair to a user.

        Unknown users and wrong passwords share the 400 status but carry
        different messages.
        """
        user = await self.find_by_username(db, username) if username else None
        if user is None:
            logger.warning("Login failed, user not found: %s", username)
            raise ValidationError(message="User not found", field="username")

        try:
            password_ok = await run_in_threadpool(self.verify_password, password or "", user.password_hash)
        except ValueError:
            # No stored hash can match a password bcrypt refuses to hash
            password_ok = False
        if not password_ok:
            logger.warning("Login failed, incorrect password for user: %s", username)
            raise ValidationError(message="Incorrect password", field="password")

        return user
