import os

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from discogs_schema.core.config import normalize_database_url
from discogs_schema.services.schema import drop_tables

# Integration tests drop and recreate tables: point this at a throwaway database.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest.fixture
async def engine():
    """Async engine on the test database, with the release tables dropped before and after."""
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL is not set")

    engine = create_async_engine(normalize_database_url(TEST_DATABASE_URL))
    await drop_tables(engine)
    yield engine
    await drop_tables(engine)
    await engine.dispose()
