"""Pytest configuration and shared fixtures."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from ticket_service.config import DatabaseSettings, Settings
from ticket_service.infrastructure.database import DataSource
from ticket_service.main import create_app
from ticket_service.tickets.infrastructure import SQLAlchemyTicketRepository


@pytest.fixture
def database_settings() -> DatabaseSettings:
    return DatabaseSettings(driver="sqlite+aiosqlite", database=":memory:", url=None)


@pytest.fixture
def settings(database_settings) -> Settings:
    return Settings(
        environment="development",
        log_level="WARNING",
        auto_create_tables=True,
        database=database_settings,
    )


@pytest.fixture
def client(settings):
    """HTTP client against an app backed by in-memory SQLite; runs the lifespan."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def datasource(database_settings):
    ds = DataSource(database_settings)
    ds.connect()
    await ds.create_tables()
    yield ds
    await ds.disconnect()


@pytest_asyncio.fixture
async def session(datasource):
    async with datasource.session() as db_session:
        yield db_session


@pytest.fixture
def repository(session) -> SQLAlchemyTicketRepository:
    return SQLAlchemyTicketRepository(session)
