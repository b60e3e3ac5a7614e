"""Fixtures for tests against real PostgreSQL and Redis."""

from datetime import datetime, time, timedelta

import pytest
import pytest_asyncio

from src.config.settings import load_settings
from src.models.field import FieldInput
from src.storage.database import Database
from src.storage.postgres_field_repo import PostgresFieldRepository


@pytest.fixture
def settings():
    return load_settings()


@pytest_asyncio.fixture
async def db(settings):
    database = Database(settings)
    await database.connect()
    await database.create_tables()
    yield database
    await database.disconnect()


@pytest_asyncio.fixture
async def field(db):
    """Fresh active field on its own field type."""
    async with db.session() as session:
        repo = PostgresFieldRepository(session)
        field_type = await repo.create_field_type(f"5-a-side {datetime.now().timestamp()}")
        return await repo.create(FieldInput(name="Integration Field", field_type_id=field_type.id))


@pytest.fixture
def tomorrow_at(settings):
    """Business-local instant on the next calendar day."""
    tomorrow = (datetime.now(settings.timezone) + timedelta(days=1)).date()

    def at(hour, minute=0):
        return datetime.combine(tomorrow, time(hour, minute), tzinfo=settings.timezone)

    return at
