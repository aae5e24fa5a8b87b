"""
Request and response models for the HTTP API.

Field names are snake_case in Python and camelCase on the wire; FastAPI
serializes response models by alias.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.models import City


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )


# ===== Auth =====


class UserRegister(RequestModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="Email used to log in")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class UserLogin(RequestModel):
    email: str = Field(..., min_length=1, description="Email used at registration")
    password: str = Field(..., min_length=1, description="Password")


class AuthResponse(CamelModel):
    token: str = Field(..., description="Bearer token valid for 7 days")
    user_id: UUID = Field(..., description="Identifier of the authenticated user")


class UserProfile(CamelModel):
    id: UUID
    name: str
    email: str
    created_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class MessageResponse(BaseModel):
    message: str = Field(..., description="Response message")


class ErrorResponse(BaseModel):
    reason: str = Field(..., description="Machine-stable error kind")
    message: str = Field(..., description="Human-readable explanation")


# ===== Cities =====


class CityCreate(RequestModel):
    city_name: str = Field(..., min_length=1, max_length=120)
    country: str | None = Field(default=None, max_length=120)


class CityResponse(CamelModel):
    id: UUID
    owner_id: UUID
    city_name: str
    country: str | None = None
    favorite: bool
    is_favorite: bool
    added_at: datetime

    @classmethod
    def from_model(cls, city: City) -> "CityResponse":
        return cls(
            id=city.id,
            owner_id=city.owner_id,
            city_name=city.city_name,
            country=city.country,
            favorite=city.favorite,
            is_favorite=city.favorite,
            added_at=city.added_at,
        )


# ===== Weather =====


class CurrentWeather(CamelModel):
    temperature: int | None = None
    description: str
    feels_like: int | None = None
    humidity: float | None = None
    wind_speed: float | None = None


class ForecastDay(CamelModel):
    date: str
    min_temp: int
    max_temp: int
    description: str
    icon: str | None = None


class WeatherSnapshot(CamelModel):
    current: CurrentWeather
    forecast: list[ForecastDay] = Field(default_factory=list)


UNAVAILABLE_DESCRIPTION = "unavailable"


def unavailable_weather() -> WeatherSnapshot:
    """Placeholder used when the provider fails for a city."""
    return WeatherSnapshot(
        current=CurrentWeather(temperature=None, description=UNAVAILABLE_DESCRIPTION),
        forecast=[],
    )


class CityWithWeather(CamelModel):
    id: UUID
    city_name: str
    country: str | None = None
    is_favorite: bool
    current_weather: CurrentWeather
    forecast: list[ForecastDay] = Field(default_factory=list)


class CityListing(CamelModel):
    favorites: list[CityWithWeather] = Field(default_factory=list)
    cities: list[CityWithWeather] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    database: str
