"""
Per-request access to the components the application factory builds.

Everything lives on ``app.state``; routes receive it through these
dependencies instead of importing module-level globals.
"""

from fastapi import Request

from app.db import Database
from app.db_handlers.interfaces import CityStore
from app.services.city_aggregator import CityReadAggregator
from app.services.credentials import CredentialService
from app.services.tokens import TokenService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_service(request: Request) -> CredentialService:
    return request.app.state.credential_service


def get_city_store(request: Request) -> CityStore:
    return request.app.state.city_store


def get_city_aggregator(request: Request) -> CityReadAggregator:
    return request.app.state.city_aggregator


def get_database(request: Request) -> Database | None:
    return getattr(request.app.state, "database", None)
