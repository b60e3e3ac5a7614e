"""Unit tests for the tier lookup query."""

from datetime import time
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from src.storage.postgres_time_slot_repo import PostgresTimeSlotRepository


@pytest.fixture
def session():
    session = AsyncMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    session.execute.return_value = result
    return session


async def compiled_lookup(session, time_of_day):
    repo = PostgresTimeSlotRepository(session)
    assert await repo.find_matching(uuid4(), time_of_day) is None
    stmt = session.execute.await_args.args[0]
    return stmt.compile(dialect=postgresql.dialect())


@pytest.mark.asyncio
async def test_start_inclusive_end_exclusive(session):
    compiled = await compiled_lookup(session, time(19, 0))
    sql = str(compiled)

    assert "time_slots.start_time <= %(start_time_1)s" in sql
    assert "time_slots.end_time > %(end_time_1)s" in sql
    assert compiled.params["start_time_1"] == time(19, 0)
    assert compiled.params["end_time_1"] == time(19, 0)


@pytest.mark.asyncio
async def test_latest_starting_tier_wins(session):
    sql = str(await compiled_lookup(session, time(8, 0)))

    assert "ORDER BY time_slots.start_time DESC" in sql
    assert "LIMIT %(param_1)s" in sql
