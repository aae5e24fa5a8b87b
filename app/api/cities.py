"""
City API Routes - personal city list management with live weather.

Every route requires a verified token. The owner id passed to the store
always comes from the authenticated identity, never from the request body
or path.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.db_handlers.interfaces import CityStore
from app.dependencies.auth import AuthenticatedUser, get_current_identity
from app.dependencies.cities import get_city_id
from app.dependencies.services import get_city_aggregator, get_city_store
from app.schemas import (
    CityCreate,
    CityListing,
    CityResponse,
    ErrorResponse,
    MessageResponse,
)
from app.services.city_aggregator import CityReadAggregator

router = APIRouter(
    prefix="/cities",
    tags=["Cities"],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=CityResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_city(
    city_data: CityCreate,
    identity: AuthenticatedUser = Depends(get_current_identity),
    city_store: CityStore = Depends(get_city_store),
):
    """Add a city to the current user's list."""
    city = await city_store.create_city(
        identity.user_id, city_data.city_name, city_data.country or None
    )
    return CityResponse.from_model(city)


@router.get("", response_model=CityListing)
async def list_cities(
    identity: AuthenticatedUser = Depends(get_current_identity),
    aggregator: CityReadAggregator = Depends(get_city_aggregator),
):
    """
    List the current user's cities with current weather and forecast.

    Cities whose weather lookup fails are still listed, with a null
    temperature and an "unavailable" description.
    """
    return await aggregator.list_with_weather(identity.user_id)


@router.put(
    "/{city_id}/favorite",
    response_model=CityResponse,
    responses={404: {"model": ErrorResponse}},
)
async def toggle_favorite(
    identity: AuthenticatedUser = Depends(get_current_identity),
    city_id: UUID = Depends(get_city_id),
    city_store: CityStore = Depends(get_city_store),
):
    """Flip the favorite flag of one of the current user's cities."""
    city = await city_store.toggle_favorite(identity.user_id, city_id)
    return CityResponse.from_model(city)


@router.delete(
    "/{city_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_city(
    identity: AuthenticatedUser = Depends(get_current_identity),
    city_id: UUID = Depends(get_city_id),
    city_store: CityStore = Depends(get_city_store),
):
    """Remove one of the current user's cities."""
    await city_store.delete_city(identity.user_id, city_id)
    return MessageResponse(message="City removed")
