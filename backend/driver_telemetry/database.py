"""
Driver Telemetry API: Store Connection Management
====================================================

What:  Async SQLAlchemy engine and session factory wrapped in a `Store`,
       plus the FastAPI dependency that hands it to route handlers.
How:   One `Store` is created at startup (see main.lifespan), kept on
       `app.state.store` and injected with `Depends(get_store)`. Services
       open a short-lived session per operation through `Store.session()`,
       which commits on success and rolls back on error.
Who:   The app factory, services, the health route and the test fixtures.

Connection Pooling:
    pool_size / max_overflow come from settings for server databases.
    SQLite URLs keep SQLAlchemy's default pool, which rejects those options.
    pool_pre_ping validates connections before use.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from driver_telemetry.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The shared metadata is what `Store.connect()` uses to create missing
    tables at startup.
    """
    pass


class Store:
    """
    Process-scoped handle on the backing database.

    Attributes:
        engine:           AsyncEngine owning the connection pool
        session_factory:  async_sessionmaker bound to the engine
    """

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if make_url(database_url).get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        # expire_on_commit=False: records stay readable after the session closes
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Store":
        """Builds a store from application settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    async def connect(self, timeout: float) -> None:
        """
        Establish the first connection and create missing tables.

        What:    Opens a connection, runs `SELECT 1`, then `create_all`.
        When:    Once, during application startup.
        Raises:  asyncio.TimeoutError if the store does not answer within
                 `timeout` seconds; driver errors propagate unchanged.
        """
        # Models must be imported so their tables are registered on Base.metadata
        from driver_telemetry.models import driver, reading  # noqa: F401

        async def _connect() -> None:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)

        await asyncio.wait_for(_connect(), timeout=timeout)
        logger.info("Store connected: %s", self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        """
        Report whether the store answers right now.

        Every call performs a real round-trip; the result is never cached.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Store ping failed: %s", str(e))
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session for one unit of work.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller
            3. On success: commits
            4. On error: rolls back and re-raises
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Closes all pooled connections. Called on application shutdown."""
        await self.engine.dispose()


def get_store(request: Request) -> Store:
    """
    FastAPI dependency returning the store attached to the running app.

    Example usage in a route:
        @router.get("/conductor/all")
        async def list_drivers(store: Store = Depends(get_store)):
            ...
    """
    return request.app.state.store
