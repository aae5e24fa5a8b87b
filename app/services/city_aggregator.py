"""
City read path: joins the owner's stored cities with live weather.

Weather lookups fan out concurrently, one per city, each bounded by a
timeout. A branch that fails or times out yields the "unavailable"
placeholder instead of an exception, so one bad lookup never fails the
listing. Results keep the store order (most recently added first).
"""

import asyncio
from typing import Protocol
from uuid import UUID

from app.db_handlers.interfaces import CityStore
from app.exceptions import ProviderUnavailableError
from app.models import City
from app.schemas import CityListing, CityWithWeather, WeatherSnapshot, unavailable_weather
from app.utils.logger import setup_logger

logger = setup_logger("city_aggregator")


class WeatherProvider(Protocol):
    async def fetch_current_and_forecast(self, city_name: str) -> WeatherSnapshot: ...


class CityReadAggregator:
    def __init__(
        self,
        city_store: CityStore,
        weather_gateway: WeatherProvider,
        *,
        timeout: float = 10.0,
    ):
        self.city_store = city_store
        self.weather_gateway = weather_gateway
        self.timeout = timeout

    async def _weather_for(self, city: City) -> WeatherSnapshot:
        try:
            return await asyncio.wait_for(
                self.weather_gateway.fetch_current_and_forecast(city.city_name),
                timeout=self.timeout,
            )
        except ProviderUnavailableError as e:
            logger.warning(f"Weather unavailable for city {city.id}: {e.cause}")
        except TimeoutError:
            logger.warning(
                f"Weather lookup for city {city.id} exceeded {self.timeout}s"
            )
        except Exception as e:
            logger.error(
                f"Unexpected error fetching weather for city {city.id}: {e}",
                exc_info=True,
            )
        return unavailable_weather()

    async def _with_weather(self, city: City) -> CityWithWeather:
        weather = await self._weather_for(city)
        return CityWithWeather(
            id=city.id,
            city_name=city.city_name,
            country=city.country,
            is_favorite=city.favorite,
            current_weather=weather.current,
            forecast=weather.forecast,
        )

    async def list_with_weather(self, owner_id: UUID) -> CityListing:
        cities = await self.city_store.list_by_owner(owner_id)
        # gather preserves input order
        merged = await asyncio.gather(*(self._with_weather(city) for city in cities))
        merged = list(merged)
        favorites = [city for city in merged if city.is_favorite]
        logger.debug(
            f"Listed {len(merged)} cities ({len(favorites)} favorites) for owner {owner_id}"
        )
        return CityListing(favorites=favorites, cities=merged)
