"""
Database models for the city weather API.

Architecture: User → City ownership. Weather data is never persisted.
"""

from app.models.base import Base
from app.models.city import City
from app.models.user import User

__all__ = [
    "Base",
    "User",
    "City",
]
