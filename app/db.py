from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app import models  # noqa: F401
from app.config import Settings
from app.models.base import Base
from app.utils.logger import setup_logger

logger = setup_logger("db")


class Database:
    """
    Owns the async engine and session factory for the application database.

    Built once by the application factory from ``Settings`` and handed to the
    DB handlers; nothing in the package creates an engine at import time.
    """

    def __init__(self, settings: Settings, engine: AsyncEngine | None = None):
        self.url = settings.database_url
        if engine is None:
            engine_kwargs = {"pool_pre_ping": True, "echo": False}
            if self.url.startswith("postgresql"):
                engine_kwargs.update(
                    pool_size=settings.db_pool_size,
                    max_overflow=settings.db_max_overflow,
                    pool_timeout=60,
                    pool_recycle=300,
                    connect_args={"timeout": 30},
                )
            engine = create_async_engine(self.url, **engine_kwargs)
        self.engine = engine
        self.session_factory = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def init_db(self) -> None:
        """Create all tables registered on Base.metadata."""
        if not Base.metadata.tables:
            logger.warning("Base.metadata.tables is EMPTY! No tables will be created.")
        else:
            logger.debug(
                f"Tables registered in Base.metadata: {list(Base.metadata.tables.keys())}"
            )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema initialized.")

    async def check_connection(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connectivity check failed: {e}")
            return False

    async def close(self) -> None:
        logger.info("Closing database connections.")
        await self.engine.dispose()
        logger.info("Database connections closed.")
