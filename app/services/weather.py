"""
Weather gateway for the Visual Crossing timeline API.

One request per city returns current conditions and a multi-day forecast.
The gateway normalizes the payload into a WeatherSnapshot and reports every
failure (transport, timeout, HTTP status, malformed payload) as
ProviderUnavailableError. The provider's schema is consumed, not owned:
only the fields below are read.
"""

import math
import time
from typing import Any
from urllib.parse import quote

import httpx

from app.config import Settings
from app.exceptions import ProviderUnavailableError
from app.schemas import CurrentWeather, ForecastDay, WeatherSnapshot
from app.utils.logger import setup_logger

logger = setup_logger("weather_gateway")


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves rounding up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(float(value) + 0.5)


def parse_timeline_payload(payload: dict[str, Any], forecast_days: int = 5) -> WeatherSnapshot:
    """
    Build a snapshot from a timeline response.

    ``days[0]`` is today; the forecast is the ``forecast_days`` entries after
    it. Raises KeyError, TypeError or ValueError for payloads missing the
    expected fields, and OverflowError for non-finite temperatures.
    """
    current = payload["currentConditions"]
    current_weather = CurrentWeather(
        temperature=round_half_up(current["temp"]),
        description=str(current["conditions"]).lower(),
        feels_like=round_half_up(current["feelslike"]),
        humidity=current.get("humidity"),
        wind_speed=current.get("windspeed"),
    )

    forecast = [
        ForecastDay(
            date=day["datetime"],
            min_temp=round_half_up(day["tempmin"]),
            max_temp=round_half_up(day["tempmax"]),
            description=day["conditions"],
            icon=day.get("icon"),
        )
        for day in payload["days"][1 : forecast_days + 1]
    ]
    return WeatherSnapshot(current=current_weather, forecast=forecast)


class WeatherGateway:
    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str,
        timeout: float = 10.0,
        forecast_days: int = 5,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.forecast_days = forecast_days
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "WeatherGateway":
        return cls(
            settings.weather_api_key,
            base_url=settings.weather_api_base_url,
            timeout=settings.weather_api_timeout,
            forecast_days=settings.weather_forecast_days,
            http_client=http_client,
        )

    async def fetch_current_and_forecast(self, city_name: str) -> WeatherSnapshot:
        if not self.api_key:
            raise ProviderUnavailableError(city_name, "no API key configured")

        url = f"{self.base_url}/{quote(city_name, safe='')}"
        params = {"unitGroup": "metric", "key": self.api_key, "contentType": "json"}
        start_time = time.perf_counter()

        try:
            response = await self._client.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            snapshot = parse_timeline_payload(response.json(), self.forecast_days)
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Weather provider returned {e.response.status_code} for '{city_name}'"
            )
            raise ProviderUnavailableError(
                city_name, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            logger.warning(
                f"Weather provider timed out for '{city_name}' after {self.timeout}s"
            )
            raise ProviderUnavailableError(city_name, "timeout") from e
        except httpx.RequestError as e:
            logger.warning(
                f"Weather provider request failed for '{city_name}': {type(e).__name__}"
            )
            raise ProviderUnavailableError(city_name, type(e).__name__) from e
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            # ValueError covers invalid JSON and pydantic validation errors
            logger.warning(f"Malformed weather payload for '{city_name}': {e!r}")
            raise ProviderUnavailableError(city_name, "malformed payload") from e

        duration = time.perf_counter() - start_time
        logger.debug(f"Fetched weather for '{city_name}' in {duration:.3f}s")
        return snapshot

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
