"""
This file contains shared fixtures and configuration for the test suite.

Pytest will automatically discover and use the fixtures defined in this file.

The API tests run against in-memory user and city stores plus a stub weather
gateway injected through ``create_app``; no database or network is needed.
"""

import asyncio
import uuid
from collections.abc import Callable, Generator
from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.config import Settings
from app.exceptions import DuplicateCityError, DuplicateEmailError, NotFoundError, ProviderUnavailableError
from app.models import City, User
from app.schemas import CurrentWeather, ForecastDay, WeatherSnapshot


class InMemoryUserStore:
    def __init__(self) -> None:
        self._users: dict[uuid.UUID, User] = {}

    async def create_user(self, *, name: str, email: str, hashed_password: str) -> User:
        if any(user.email == email for user in self._users.values()):
            raise DuplicateEmailError()
        user = User(
            id=uuid.uuid4(),
            name=name,
            email=email,
            hashed_password=hashed_password,
            created_at=datetime.now(UTC),
        )
        self._users[user.id] = user
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    async def get_user_by_id(self, user_id: uuid.UUID) -> User | None:
        return self._users.get(user_id)

    def __len__(self) -> int:
        return len(self._users)


class InMemoryCityStore:
    def __init__(self) -> None:
        # Insertion order stands in for added_at ordering
        self._cities: list[City] = []

    async def create_city(
        self, owner_id: uuid.UUID, city_name: str, country: str | None = None
    ) -> City:
        if any(c.owner_id == owner_id and c.city_name == city_name for c in self._cities):
            raise DuplicateCityError()
        city = City(
            id=uuid.uuid4(),
            owner_id=owner_id,
            city_name=city_name,
            country=country,
            favorite=False,
            added_at=datetime.now(UTC),
        )
        self._cities.append(city)
        return city

    async def list_by_owner(self, owner_id: uuid.UUID) -> list[City]:
        return [c for c in reversed(self._cities) if c.owner_id == owner_id]

    def _find(self, owner_id: uuid.UUID, city_id: uuid.UUID) -> City:
        for city in self._cities:
            if city.id == city_id and city.owner_id == owner_id:
                return city
        raise NotFoundError("City not found")

    async def toggle_favorite(self, owner_id: uuid.UUID, city_id: uuid.UUID) -> City:
        city = self._find(owner_id, city_id)
        city.favorite = not city.favorite
        return city

    async def delete_city(self, owner_id: uuid.UUID, city_id: uuid.UUID) -> None:
        self._cities.remove(self._find(owner_id, city_id))


def make_snapshot(temperature: int = 18, description: str = "partially cloudy") -> WeatherSnapshot:
    return WeatherSnapshot(
        current=CurrentWeather(
            temperature=temperature,
            description=description,
            feels_like=temperature - 1,
            humidity=60.0,
            wind_speed=12.5,
        ),
        forecast=[
            ForecastDay(
                date=f"2026-10-{19 + i}",
                min_temp=10 + i,
                max_temp=20 + i,
                description="Clear",
                icon="clear-day",
            )
            for i in range(5)
        ],
    )


class StubWeatherGateway:
    """
    Returns a fixed snapshot per city. Cities listed in ``failing`` raise
    ProviderUnavailableError, cities in ``broken`` raise RuntimeError, and
    cities in ``slow`` sleep for ``delay`` seconds.
    """

    def __init__(self) -> None:
        self.failing: set[str] = set()
        self.broken: set[str] = set()
        self.slow: set[str] = set()
        self.delay = 5.0
        self.calls: list[str] = []

    async def fetch_current_and_forecast(self, city_name: str) -> WeatherSnapshot:
        self.calls.append(city_name)
        if city_name in self.failing:
            raise ProviderUnavailableError(city_name, "stubbed failure")
        if city_name in self.broken:
            raise RuntimeError(f"unexpected failure for {city_name}")
        if city_name in self.slow:
            await asyncio.sleep(self.delay)
        return make_snapshot()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        secret_key="test-secret-key-for-signing-tokens",
        bcrypt_rounds=4,
        weather_api_key="test-weather-key",
        weather_api_timeout=0.5,
    )


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def city_store() -> InMemoryCityStore:
    return InMemoryCityStore()


@pytest.fixture
def weather_gateway() -> StubWeatherGateway:
    return StubWeatherGateway()


@pytest.fixture
def app(
    settings: Settings,
    user_store: InMemoryUserStore,
    city_store: InMemoryCityStore,
    weather_gateway: StubWeatherGateway,
) -> FastAPI:
    """
    Create a new application instance wired to the in-memory stores.
    """
    from main import create_app

    return create_app(
        settings,
        user_store=user_store,
        city_store=city_store,
        weather_gateway=weather_gateway,
    )


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Fixture to get a test client for making API requests.
    The TestClient handles the application's lifespan events (startup/shutdown).
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict[str, str]]:
    """Register a user and return the Authorization header for them."""

    def _register(name: str = "Jo", email: str = "jo@example.com", password: str = "p1"):
        resp = client.post(
            "/auth/register", json={"name": name, "email": email, "password": password}
        )
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _register
