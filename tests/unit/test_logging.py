"""Unit tests for credential redaction in logs."""

import logging

from src.logging import CredentialRedactingFilter, _redact_credentials


def test_processor_masks_database_password():
    event = {
        "event": "database_connected",
        "url": "postgresql+asyncpg://app:s3cret@db:5432/booking",
    }

    result = _redact_credentials(None, "info", event)

    assert result["url"] == "postgresql+asyncpg://app:***@db:5432/booking"


def test_processor_masks_redis_password():
    result = _redact_credentials(None, "info", {"url": "redis://:hunter2@cache:6379/0"})

    assert "hunter2" not in result["url"]


def test_processor_leaves_plain_values():
    event = {"event": "availability_checked", "duration_minutes": 90, "field": "Field 1"}

    assert _redact_credentials(None, "info", dict(event)) == event


def test_stdlib_filter_masks_message_args():
    record = logging.LogRecord(
        "sqlalchemy.engine", logging.INFO, __file__, 1,
        "connecting to %s", ("postgresql://app:s3cret@db/booking",), None,
    )

    assert CredentialRedactingFilter().filter(record) is True
    assert record.getMessage() == "connecting to postgresql://app:***@db/booking"
