from app.dependencies.auth import AuthenticatedUser, get_current_identity
from app.dependencies.cities import get_city_id

__all__ = [
    "AuthenticatedUser",
    "get_current_identity",
    "get_city_id",
]
