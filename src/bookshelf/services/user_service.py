"""User service — registration and login."""

import asyncio

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.auth.password import PasswordHasher
from bookshelf.db.models import User
from bookshelf.errors import (
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
)

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid username or password"


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    async def _find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def register(self, username: str, password: str) -> User:
        """Create a user account. Raises ConflictError if the username is taken.

        Learn: The pre-check gives a clean error in the common case; the
        UNIQUE constraint still catches two registrations racing for the
        same name, and that IntegrityError maps to the same ConflictError.
        """
        if await self._find_by_username(username):
            raise ConflictError("Username already exists")

        user = User(
            username=username,
            password_hash=await asyncio.to_thread(self.hasher.hash, password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Username already exists") from None
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("auth.register_store_error")
            raise InternalError() from None

        logger.info("auth.registered", user_id=user.id)
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """Check credentials. Unknown user and wrong password fail identically."""
        user = await self._find_by_username(username)

        if user is None:
            await asyncio.to_thread(self.hasher.dummy_verify, password)
            logger.info("auth.login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not await asyncio.to_thread(self.hasher.verify, password, user.password_hash):
            logger.info("auth.login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("auth.login_succeeded", user_id=user.id)
        return user

    async def get_user(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
