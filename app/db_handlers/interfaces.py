"""
Store contracts used by the services and routes.

The SQLAlchemy handlers implement these; tests substitute in-memory
versions. Duplicate detection is part of the contract: ``create_user`` and
``create_city`` raise the taxonomy error themselves, callers never inspect
backend error codes.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from app.models import City, User


class UserStore(Protocol):
    async def create_user(
        self, *, name: str, email: str, hashed_password: str
    ) -> User:
        """Persist a user. Raises DuplicateEmailError if the email is taken."""
        ...

    async def get_user_by_email(self, email: str) -> User | None: ...

    async def get_user_by_id(self, user_id: UUID) -> User | None: ...


class CityStore(Protocol):
    async def create_city(
        self, owner_id: UUID, city_name: str, country: str | None = None
    ) -> City:
        """Persist a city. Raises DuplicateCityError for a repeated (owner, name)."""
        ...

    async def list_by_owner(self, owner_id: UUID) -> list[City]:
        """Return the owner's cities, most recently added first."""
        ...

    async def toggle_favorite(self, owner_id: UUID, city_id: UUID) -> City:
        """Flip ``favorite``. Raises NotFoundError unless the owner has this city."""
        ...

    async def delete_city(self, owner_id: UUID, city_id: UUID) -> None:
        """Remove the city. Raises NotFoundError unless the owner has this city."""
        ...
