"""
Credential store operations: registration, login and profile lookup.

Passwords are hashed with bcrypt before they reach the user store and are
never logged. Login failures are uniform: an unknown email and a wrong
password raise the same InvalidCredentialsError and cost one bcrypt check
each.
"""

from uuid import UUID

from app.db_handlers.interfaces import UserStore
from app.exceptions import InvalidCredentialsError, NotFoundError
from app.models import User
from app.utils.auth import DEFAULT_BCRYPT_ROUNDS, get_password_hash, verify_password
from app.utils.logger import setup_logger

logger = setup_logger("credentials")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialService:
    def __init__(self, user_store: UserStore, *, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.user_store = user_store
        self.bcrypt_rounds = bcrypt_rounds
        # Compared against when the email is unknown so both failure paths hash once.
        self._dummy_hash = get_password_hash("not-a-real-password", rounds=bcrypt_rounds)

    async def register(self, name: str, email: str, password: str) -> User:
        """Create a user. Raises DuplicateEmailError if the email is registered."""
        hashed_password = get_password_hash(password, rounds=self.bcrypt_rounds)
        user = await self.user_store.create_user(
            name=name.strip(),
            email=normalize_email(email),
            hashed_password=hashed_password,
        )
        logger.info(f"Registered user {user.id}")
        return user

    async def verify_credentials(self, email: str, password: str) -> User:
        user = await self.user_store.get_user_by_email(normalize_email(email))
        if user is None:
            verify_password(password, self._dummy_hash)
            logger.info("Login rejected: unknown email")
            raise InvalidCredentialsError()
        if not verify_password(password, user.hashed_password):
            logger.info(f"Login rejected: wrong password for user {user.id}")
            raise InvalidCredentialsError()
        return user

    async def get_profile(self, user_id: UUID) -> User:
        user = await self.user_store.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
