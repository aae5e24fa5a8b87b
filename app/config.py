"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.logger import setup_logger

logger = setup_logger("core_config")

DEFAULT_SECRET_KEY = "change-this-secret-key-in-production"


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
        env_prefix="",
    )

    # ===== Token Configuration =====
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        alias="SECRET_KEY",
        description="Process-wide secret used to sign identity tokens",
    )

    jwt_algorithm: str = Field(
        default="HS256",
        alias="JWT_ALGORITHM",
        description="JWT signing algorithm",
    )

    access_token_expire_days: int = Field(
        default=7,
        ge=1,
        alias="ACCESS_TOKEN_EXPIRE_DAYS",
        description="Lifetime of an issued token in days",
    )

    # ===== Password Hashing =====
    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=16,
        alias="BCRYPT_ROUNDS",
        description="bcrypt cost factor (log2 rounds)",
    )

    # ===== Database Configuration =====
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/city_weather",
        alias="DATABASE_URL",
        description="Application database URL",
    )

    db_pool_size: int = Field(
        default=10, alias="DB_POOL_SIZE", description="Connection pool size"
    )

    db_max_overflow: int = Field(
        default=20,
        alias="DB_MAX_OVERFLOW",
        description="Connections allowed beyond the pool size",
    )

    # ===== Weather Provider Configuration =====
    weather_api_key: str | None = Field(
        default=None,
        alias="WEATHER_API_KEY",
        description="API key for the Visual Crossing weather provider",
    )

    weather_api_base_url: str = Field(
        default="https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline",
        alias="WEATHER_API_BASE_URL",
        description="Base URL of the weather timeline endpoint",
    )

    weather_api_timeout: float = Field(
        default=10.0,
        gt=0,
        alias="WEATHER_API_TIMEOUT",
        description="Upper bound in seconds for one weather lookup",
    )

    weather_forecast_days: int = Field(
        default=5,
        ge=0,
        alias="WEATHER_FORECAST_DAYS",
        description="Number of forecast days returned after today",
    )

    # ===== Server Configuration =====
    api_prefix: str = Field(
        default="", alias="API_PREFIX", description="Prefix for all API routes"
    )

    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=5000, alias="SERVER_PORT", description="Server port number"
    )

    server_workers: int = Field(
        default=1, alias="SERVER_WORKERS", description="Number of uvicorn workers"
    )

    # ===== CORS Configuration =====
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5500",  # Static client served by live-server
            "http://127.0.0.1:5500",
            "http://localhost:3000",
        ],
        alias="CORS_ALLOW_ORIGINS",
        description="CORS allowed origins",
    )

    cors_allow_credentials: bool = Field(
        default=True,
        alias="CORS_ALLOW_CREDENTIALS",
        description="Whether to allow credentials in CORS requests",
    )

    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_METHODS",
        description="CORS allowed methods",
    )

    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_HEADERS",
        description="CORS allowed headers",
    )

    # User-facing hint for database connection errors
    db_unavailable_hint: str = Field(
        default="Database connection failed. The server may be offline or network connectivity is down.",
        alias="DB_UNAVAILABLE_HINT",
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Normalize the database URL and warn about missing critical values."""
        if self.database_url.startswith("postgresql://"):
            self.database_url = self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )

        if self.secret_key == DEFAULT_SECRET_KEY:
            logger.warning(
                "SECRET_KEY environment variable not set. Using the development default."
            )

        if not self.weather_api_key:
            logger.warning(
                "WEATHER_API_KEY environment variable not set. Weather will be unavailable."
            )

        logger.debug(f"Token lifetime: {self.access_token_expire_days} days")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
