import uuid

from fastapi import Path

from app.db_handlers.city import CITY_NOT_FOUND
from app.exceptions import NotFoundError


async def get_city_id(
    city_id: str = Path(..., description="The ID of the city"),
) -> uuid.UUID:
    """
    Parse the city id from the path.

    A malformed id cannot name any city, so it is reported the same way as
    a city that does not exist for the caller.
    """
    try:
        return uuid.UUID(city_id)
    except ValueError as e:
        raise NotFoundError(CITY_NOT_FOUND) from e
