from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from discogs_schema.core.config import Settings, settings


def build_engine(config: Optional[Settings] = None) -> AsyncEngine:
    """
    Create the async engine the schema commands run on.

    Nothing connects until the first statement, so building an engine for
    an unreachable server does not fail here.
    """
    config = config or settings
    return create_async_engine(config.database_url, echo=config.SQL_ECHO)


async def check_connection(engine: AsyncEngine) -> str:
    """Connect once and return the server version string."""
    async with engine.connect() as conn:
        result = await conn.execute(text("SELECT version()"))
        return result.scalar_one()
