from app.db_handlers.base import BaseDBHandler, with_session
from app.db_handlers.city import CityDBHandler
from app.db_handlers.interfaces import CityStore, UserStore
from app.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "with_session",
    "UserDBHandler",
    "CityDBHandler",
    "UserStore",
    "CityStore",
]
