from __future__ import annotations

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db_handlers.base import BaseDBHandler, violates_constraint, with_session
from app.exceptions import DuplicateEmailError
from app.models.user import User
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")

DUPLICATE_EMAIL_INDEX = "ix_users_email"


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self, session_factory: async_sessionmaker):
        super().__init__(User, session_factory)

    @with_session
    async def create_user(
        self, *, name: str, email: str, hashed_password: str, db: AsyncSession = None
    ) -> User:
        """Insert a user; the unique email index turns a repeat into DuplicateEmailError."""
        try:
            user = await self.create(
                {"name": name, "email": email, "hashed_password": hashed_password},
                db=db,
            )
        except IntegrityError as e:
            if violates_constraint(e, DUPLICATE_EMAIL_INDEX):
                raise DuplicateEmailError() from e
            raise
        logger.info(f"Created user {user.id}")
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        return await self.get_by_attributes(email=email)

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        return await self.get(user_id)
