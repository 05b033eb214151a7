from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import AsyncAdaptedQueuePool
from sqlalchemy import text
from contextlib import asynccontextmanager
from fastapi import Request

from fitsync.core.config import settings
from fitsync.core.logger import get_logger
from fitsync.database.base import Base

logger = get_logger("database")


class Database:
    """
    Storage handle owned by the application.

    Holds the async engine and session factory. Created once by the app
    factory and passed around explicitly (app.state.database) instead of
    living in module globals.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls) -> "Database":
        """Build the production handle with connection pooling."""
        url = settings.DATABASE_URL
        if not url.startswith("postgresql+asyncpg"):
            return cls(url, echo=False, future=True)

        ssl_config = {} if settings.IS_DEVELOPMENT else {"ssl": "require"}
        return cls(
            url,
            echo=False,
            connect_args={
                **ssl_config,
                "server_settings": {
                    "application_name": "fitsync_backend",
                    "jit": "off",
                },
                "command_timeout": 30,
            },
            poolclass=AsyncAdaptedQueuePool,
            pool_size=10,
            max_overflow=20,
            pool_timeout=30,
            pool_recycle=1800,
            pool_pre_ping=True,
            future=True
        )

    async def create_all(self):
        """Create any missing tables."""
        # Register every model on the metadata before create_all
        import fitsync.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    async def dispose(self):
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self):
        """Context manager for a database session."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


async def get_db(request: Request):
    """Dependency for getting a database session from the app's handle."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
