from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, not_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db_handlers.base import BaseDBHandler, violates_constraint, with_session
from app.exceptions import DuplicateCityError, NotFoundError
from app.models.city import City
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.city")

CITY_NOT_FOUND = "City not found"
DUPLICATE_CITY_CONSTRAINT = "uq_cities_owner_city_name"


class CityDBHandler(BaseDBHandler[City]):
    """
    City persistence scoped by owner.

    Every read and write filters on owner_id, so a city belonging to another
    user behaves exactly like a missing one.
    """

    def __init__(self, session_factory: async_sessionmaker):
        super().__init__(City, session_factory)

    @with_session
    async def create_city(
        self,
        owner_id: UUID,
        city_name: str,
        country: str | None = None,
        *,
        db: AsyncSession = None,
    ) -> City:
        try:
            city = await self.create(
                {"owner_id": owner_id, "city_name": city_name, "country": country},
                db=db,
            )
        except IntegrityError as e:
            if violates_constraint(e, DUPLICATE_CITY_CONSTRAINT):
                raise DuplicateCityError() from e
            raise
        logger.info(f"Added city {city.id} ('{city_name}') for owner {owner_id}")
        return city

    async def list_by_owner(self, owner_id: UUID) -> list[City]:
        return await self.get_multi_by_attributes(
            owner_id=owner_id, order_by=[City.added_at.desc(), City.id]
        )

    @with_session
    async def toggle_favorite(
        self, owner_id: UUID, city_id: UUID, *, db: AsyncSession = None
    ) -> City:
        stmt = (
            update(City)
            .where(City.id == city_id, City.owner_id == owner_id)
            .values(favorite=not_(City.favorite))
            .returning(City)
            .execution_options(synchronize_session=False)
        )
        city = (await db.scalars(stmt)).one_or_none()
        if city is None:
            raise NotFoundError(CITY_NOT_FOUND)
        logger.info(f"City {city.id} favorite={city.favorite} for owner {owner_id}")
        return city

    @with_session
    async def delete_city(
        self, owner_id: UUID, city_id: UUID, *, db: AsyncSession = None
    ) -> None:
        stmt = (
            delete(City)
            .where(City.id == city_id, City.owner_id == owner_id)
            .returning(City.id)
        )
        deleted_id = (await db.execute(stmt)).scalar_one_or_none()
        if deleted_id is None:
            raise NotFoundError(CITY_NOT_FOUND)
        logger.info(f"Deleted city {deleted_id} for owner {owner_id}")
