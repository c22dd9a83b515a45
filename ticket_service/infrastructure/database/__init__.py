"""
Database Infrastructure
=======================

Manages the ticket data source: connection parameters, engine and session
lifecycle.

Uses SQLAlchemy 2.0 with asyncpg for async PostgreSQL operations. The
``sqlite+aiosqlite`` driver is supported for local runs and tests.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from ticket_service.config import DatabaseSettings
from ticket_service.core import ConfigurationException, DataSourceException
from ticket_service.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    """
    pass


class DataSource:
    """
    A named connection to the ticket store.

    The engine is created by ``connect()`` on application startup and
    disposed by ``disconnect()`` on shutdown. Repositories receive sessions
    from ``session()``; they never touch the engine directly.
    """

    def __init__(self, settings: DatabaseSettings):
        self.name = settings.name
        self._settings = settings
        try:
            self._url: URL = settings.sqlalchemy_url
        except ArgumentError as e:
            raise ConfigurationException(
                f"Invalid database URL for data source '{settings.name}'"
            ) from e
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def url(self) -> URL:
        return self._url

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DataSourceException(self.name, "not connected. Call connect() first.")
        return self._engine

    def connect(self) -> AsyncEngine:
        """
        Create the engine and session maker.

        Calling it on an already connected data source is a no-op.
        """
        if self._engine is not None:
            return self._engine

        if self._url.get_backend_name() == "sqlite":
            # In-memory SQLite lives in one connection; share it across sessions
            engine_options = {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        else:
            engine_options = {
                "pool_size": self._settings.pool_size,
                "max_overflow": self._settings.max_overflow,
                "pool_pre_ping": True,
            }

        self._engine = create_async_engine(
            self._url,
            echo=self._settings.echo,
            **engine_options,
        )
        self._session_maker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Prevent lazy loading after commit
            autoflush=False,
        )

        logger.info(
            "Data source connected",
            extra={
                "data_source": self.name,
                "url": self._url.render_as_string(hide_password=True),
            }
        )
        return self._engine

    async def disconnect(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        logger.info("Data source disconnected", extra={"data_source": self.name})

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for database sessions.

        Usage:
            async with datasource.session() as session:
                repo = SQLAlchemyTicketRepository(session)
                await repo.create(ticket)
                await session.commit()

        Uncommitted work is rolled back if the block raises.
        """
        if self._session_maker is None:
            raise DataSourceException(self.name, "not connected. Call connect() first.")

        async with self._session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        """
        Create all database tables.

        Intended for development and tests; production schemas should be
        managed with migrations.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        """
        Check that the store answers a trivial query.

        Raises:
            DataSourceException: If not connected or the store is unreachable
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise DataSourceException(self.name, f"unreachable: {e}") from e


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a session from the app's data source.

    Usage in FastAPI:
        @router.get("/tickets")
        async def find(session: AsyncSession = Depends(get_session)):
            ...

    Route handlers commit explicitly; anything left uncommitted is
    discarded when the session closes.
    """
    datasource: DataSource = request.app.state.datasource
    async with datasource.session() as session:
        yield session
