#!/usr/bin/env python3

"""
Main application entry point for the city weather API.

Architecture: FastAPI application over async SQLAlchemy stores and an
external weather provider.
Key Features: explicit component wiring, lifecycle management, database
health checks, uniform error bodies, CORS configuration.
"""

import errno
import sys
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.auth import router as auth_router
from app.api.cities import router as cities_router
from app.api.health import router as health_router
from app.config import Settings, get_settings
from app.db import Database
from app.db_handlers import CityDBHandler, CityStore, UserDBHandler, UserStore
from app.exceptions import AppError
from app.services.city_aggregator import CityReadAggregator, WeatherProvider
from app.services.credentials import CredentialService
from app.services.tokens import TokenService
from app.services.weather import WeatherGateway
from app.utils.logger import setup_logger

logger = setup_logger("main")


def _error_response(status_code: int, reason: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"reason": reason, "message": message},
        headers=headers,
    )


def _wire_stores(app: FastAPI, user_store: UserStore, city_store: CityStore) -> None:
    settings: Settings = app.state.settings
    app.state.city_store = city_store
    app.state.credential_service = CredentialService(
        user_store, bcrypt_rounds=settings.bcrypt_rounds
    )
    app.state.city_aggregator = CityReadAggregator(
        city_store, app.state.weather_gateway, timeout=settings.weather_api_timeout
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
        return _error_response(status.HTTP_400_BAD_REQUEST, "ValidationError", message)

    @app.exception_handler(OSError)
    async def oserror_exception_handler(request: Request, exc: OSError):
        logger.error(f"OSError caught: {exc}, errno: {exc.errno}")
        if exc.errno in [errno.ETIMEDOUT, errno.ECONNREFUSED]:
            hint = request.app.state.settings.db_unavailable_hint
            logger.error(f"Returning 503 due to DB connection issue: {hint}")
            return _error_response(
                status.HTTP_503_SERVICE_UNAVAILABLE, "ServiceUnavailable", hint
            )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalError", "Internal server error"
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Unhandled database error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalError", "Internal server error"
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalError", "Internal server error"
        )


def create_app(
    settings: Settings | None = None,
    *,
    user_store: UserStore | None = None,
    city_store: CityStore | None = None,
    weather_gateway: WeatherProvider | None = None,
) -> FastAPI:
    """
    Build the application.

    Stores and the weather gateway may be injected; when they are not, the
    lifespan builds database-backed stores and an HTTP weather gateway from
    ``settings``. Either both stores are injected or neither is.
    """
    if (user_store is None) != (city_store is None):
        raise ValueError("user_store and city_store must be injected together")

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup...")
        owns_gateway = app.state.weather_gateway is None
        if owns_gateway:
            app.state.weather_gateway = WeatherGateway.from_settings(settings)
            logger.info("Weather gateway initialized.")

        database = None
        if user_store is None:
            try:
                database = Database(settings)
                logger.info("Initializing database...")
                await database.init_db()
                if not await database.check_connection():
                    logger.critical("Database connectivity check failed.")
                    raise SystemExit("Database connection failed.")
                logger.info("Database connectivity confirmed.")
            except Exception as e:
                logger.critical(f"Startup error: {e}")
                raise SystemExit(f"Startup failed: {e}") from e
            app.state.database = database
            _wire_stores(
                app,
                UserDBHandler(database.session_factory),
                CityDBHandler(database.session_factory),
            )
        else:
            _wire_stores(app, user_store, city_store)

        logger.info("City weather API startup successful.")
        yield

        logger.info("City weather API shutdown...")
        if owns_gateway:
            await app.state.weather_gateway.aclose()
        if database is not None:
            await database.close()
        logger.info("Shutdown complete.")

    app = FastAPI(title="City Weather API", lifespan=lifespan)
    app.state.settings = settings
    app.state.token_service = TokenService.from_settings(settings)
    app.state.weather_gateway = weather_gateway
    app.state.database = None

    register_exception_handlers(app)

    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(cities_router, prefix=settings.api_prefix)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    return app


def main():
    load_dotenv()
    settings = get_settings()
    port = int(settings.server_port)
    host = settings.server_host

    logger.info(f"Starting City Weather API server on {host}:{port}")

    try:
        uvicorn.run(
            "main:create_app",
            factory=True,
            host=host,
            port=port,
            workers=settings.server_workers,
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
