"""Shared test fixtures and configuration."""

import contextlib
import itertools
from datetime import date
from unittest.mock import AsyncMock

import pytest

from logarchive.schema import LogRecord
from logarchive.storage import InMemoryArchiveStorage, InMemoryLogStore


@pytest.fixture
def today():
    """Fixed process date used whenever a record carries no date at all."""
    return date(2024, 6, 1)


@pytest.fixture
def make_record():
    """Factory for LogRecord instances with sequential ids."""
    counter = itertools.count(1)

    def factory(**fields) -> LogRecord:
        fields.setdefault("id", f"log-{next(counter):04d}")
        return LogRecord(**fields)

    return factory


@pytest.fixture
def make_records(make_record):
    """Factory for `count` chronologically ordered records of one user and day."""

    def factory(count: int, user_id: str = "u1", log_date: str = "2024-01-01", **fields) -> list[LogRecord]:
        return [
            make_record(
                user_id=user_id,
                log_date=log_date,
                log_time=f"{i // 3600:02d}:{i // 60 % 60:02d}:{i % 60:02d}",
                created_at=f"{log_date}T{i // 3600:02d}:{i // 60 % 60:02d}:{i % 60:02d}Z",
                action="EVENT",
                message=f"message {i}",
                **fields,
            )
            for i in range(count)
        ]

    return factory


@pytest.fixture
def log_store():
    """Empty in-memory log table."""
    return InMemoryLogStore()


@pytest.fixture
def archive_storage():
    """Empty in-memory archive blob store."""
    return InMemoryArchiveStorage()


@pytest.fixture
def mock_session(mocker):
    """Mock SQLAlchemy AsyncSession to avoid a real database."""
    session = mocker.Mock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def mock_sessionmanager(mocker, mock_session):
    """Mock SessionManager handing out `mock_session`."""

    @contextlib.asynccontextmanager
    async def session():
        yield mock_session

    manager = mocker.Mock()
    manager.session = session
    return manager


@pytest.fixture
def mock_s3_client(mocker):
    """Mock boto3 S3 client to avoid AWS calls."""
    return mocker.Mock()
