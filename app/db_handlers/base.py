from __future__ import annotations

import asyncio
from functools import wraps
from typing import Any, Generic, TypeVar

from asyncpg.exceptions import ConnectionDoesNotExistError
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.exceptions import AppError
from app.models.base import Base
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers")

ModelType = TypeVar("ModelType", bound=Base)

MAX_CONNECTION_ATTEMPTS = 3


def violates_constraint(exc: IntegrityError, constraint_name: str) -> bool:
    """True when ``exc`` was raised by the named constraint or unique index."""
    orig = exc.orig
    # asyncpg's error sits behind SQLAlchemy's DBAPI adapter as __cause__
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if getattr(candidate, "constraint_name", None) == constraint_name:
            return True
    return f'"{constraint_name}"' in str(orig)


def with_session(func):
    """Database session decorator with transaction management and retry logic."""

    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        # A caller that passes 'db' owns the transaction.
        if kwargs.get("db") is not None:
            return await func(self, *args, **kwargs)

        last_exception = None
        for attempt in range(MAX_CONNECTION_ATTEMPTS):
            async with self.session_factory() as db:
                kwargs["db"] = db
                try:
                    result = await func(self, *args, **kwargs)
                    await db.commit()
                    return result
                except AppError:
                    await db.rollback()
                    raise
                except DBAPIError as e:
                    await db.rollback()
                    if isinstance(e.orig, ConnectionDoesNotExistError):
                        last_exception = e
                        logger.warning(
                            f"Connection error in {func.__name__} "
                            f"(attempt {attempt + 1}/{MAX_CONNECTION_ATTEMPTS}): {e}. Retrying..."
                        )
                        await asyncio.sleep(1 + attempt)
                        continue
                    logger.error(f"DBAPIError in {func.__name__}: {e}", exc_info=True)
                    raise
                except Exception as e:
                    await db.rollback()
                    logger.error(
                        f"Transaction failed in {func.__name__}: {e}", exc_info=True
                    )
                    raise

        logger.error(
            f"All retries failed for {func.__name__}. Last error: {last_exception}"
        )
        raise last_exception

    return wrapper


class BaseDBHandler(Generic[ModelType]):
    """Generic handler for database operations bound to one session factory."""

    def __init__(self, model: type[ModelType], session_factory: async_sessionmaker):
        self.model = model
        self.session_factory = session_factory

    @with_session
    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession = None
    ) -> ModelType:
        """Insert a new record. IntegrityError propagates for the caller to classify."""
        db_obj = self.model(**obj_dict)
        try:
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"IntegrityError creating {self.model.__name__}: {e.orig}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}", exc_info=True)
            raise

    @with_session
    async def get(self, id: Any, *, db: AsyncSession = None) -> ModelType | None:
        """Get a single record by its primary key."""
        stmt = select(self.model).where(self.model.id == id)
        result = await db.execute(stmt)
        return result.scalars().first()

    @with_session
    async def get_by_attributes(self, *, db: AsyncSession = None, **kwargs) -> ModelType | None:
        """Get a single record by a set of attributes."""
        stmt = select(self.model).filter_by(**kwargs)
        result = await db.execute(stmt)
        return result.scalars().first()

    @with_session
    async def get_multi_by_attributes(
        self, *, db: AsyncSession = None, order_by=None, **kwargs
    ) -> list[ModelType]:
        """Get all records matching a set of attributes."""
        stmt = select(self.model).filter_by(**kwargs)
        if order_by is not None:
            if isinstance(order_by, list):
                stmt = stmt.order_by(*order_by)
            else:
                stmt = stmt.order_by(order_by)
        result = await db.execute(stmt)
        return list(result.scalars().all())
