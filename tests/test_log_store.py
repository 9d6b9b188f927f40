"""Tests for the SQL-backed log store with a mocked session."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from logarchive import Archiver
from logarchive.exceptions import DeleteError, FetchError
from logarchive_api.database.log_store import SQLLogStore, to_record
from logarchive_api.database.schema import Log


def compile_statement(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


@pytest.fixture
def log_row():
    return Log(
        id="a28137c4-f59a-4945-838c-7a40bc62801a",
        user_id="u1",
        created_at=datetime(2024, 3, 5, 10, 0, tzinfo=UTC),
        log_date=None,
        log_time=None,
        timezone=None,
        module="Auth",
        level="info",
        action="LOGIN",
        message="User signed in",
        metadata_={"source": "Edge Function"},
        error_stack=None,
    )


class TestToRecord:
    def test_maps_columns(self, log_row):
        record = to_record(log_row)

        assert record.id == "a28137c4-f59a-4945-838c-7a40bc62801a"
        assert record.created_at == "2024-03-05T10:00:00Z"
        assert record.metadata == {"source": "Edge Function"}
        assert record.derived_date() == "2024-03-05"


class TestSQLLogStore:
    """Test statement shape and error translation."""

    @pytest.mark.asyncio
    async def test_fetch_oldest_first(self, mock_sessionmanager, mock_session, log_row):
        mock_session.execute.return_value = Mock(scalars=Mock(return_value=Mock(all=Mock(return_value=[log_row]))))

        records = await SQLLogStore(mock_sessionmanager).fetch_unarchived_batch(500)

        assert [record.id for record in records] == [log_row.id]
        sql = compile_statement(mock_session.execute.call_args.args[0])
        assert "FROM logs" in sql
        assert "ORDER BY logs.created_at ASC" in sql
        assert "LIMIT" in sql

    @pytest.mark.asyncio
    async def test_fetch_empty(self, mock_sessionmanager, mock_session):
        mock_session.execute.return_value = Mock(scalars=Mock(return_value=Mock(all=Mock(return_value=[]))))

        assert await SQLLogStore(mock_sessionmanager).fetch_unarchived_batch(500) == []

    @pytest.mark.asyncio
    async def test_fetch_failure(self, mock_sessionmanager, mock_session):
        mock_session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(FetchError, match="Error fetching logs"):
            await SQLLogStore(mock_sessionmanager).fetch_unarchived_batch(500)

    @pytest.mark.asyncio
    async def test_delete_by_ids(self, mock_sessionmanager, mock_session):
        mock_session.execute.return_value = Mock(rowcount=2)

        deleted = await SQLLogStore(mock_sessionmanager).delete_by_ids(["1", "2"])

        assert deleted == 2
        mock_session.commit.assert_awaited_once()
        sql = compile_statement(mock_session.execute.call_args.args[0])
        assert sql.startswith("DELETE FROM logs WHERE logs.id IN")

    @pytest.mark.asyncio
    async def test_delete_nothing(self, mock_sessionmanager, mock_session):
        assert await SQLLogStore(mock_sessionmanager).delete_by_ids([]) == 0
        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_failure(self, mock_sessionmanager, mock_session):
        mock_session.execute.side_effect = OperationalError("DELETE", {}, Exception("statement timeout"))

        with pytest.raises(DeleteError, match="Error deleting 2 logs"):
            await SQLLogStore(mock_sessionmanager).delete_by_ids(["1", "2"])
        mock_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_maps_non_object_metadata(self, mock_sessionmanager, mock_session, log_row):
        log_row.metadata_ = ["x", "y"]
        mock_session.execute.return_value = Mock(scalars=Mock(return_value=Mock(all=Mock(return_value=[log_row]))))

        records = await SQLLogStore(mock_sessionmanager).fetch_unarchived_batch(500)

        assert records[0].metadata == ["x", "y"]

    @pytest.mark.asyncio
    async def test_fetch_unmappable_row(self, mock_sessionmanager, mock_session, log_row):
        log_row.id = None
        mock_session.execute.return_value = Mock(scalars=Mock(return_value=Mock(all=Mock(return_value=[log_row]))))

        with pytest.raises(FetchError, match="Error mapping fetched logs"):
            await SQLLogStore(mock_sessionmanager).fetch_unarchived_batch(500)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [ConnectionRefusedError("db gone"), TimeoutError("pool timeout")])
    async def test_connection_failures_translated(self, mock_sessionmanager, mock_session, error):
        mock_session.execute.side_effect = error

        with pytest.raises(FetchError):
            await SQLLogStore(mock_sessionmanager).fetch_unarchived_batch(500)
        with pytest.raises(DeleteError):
            await SQLLogStore(mock_sessionmanager).delete_by_ids(["1"])

    @pytest.mark.asyncio
    async def test_connection_failure_on_delete_is_reported_per_group(
        self, mock_sessionmanager, mock_session, make_records, archive_storage, today
    ):
        """Test a dropped connection during delete leaves both uploaded groups reported, not the run aborted."""
        records = make_records(2, user_id="u1") + make_records(2, user_id="u2")
        log_store = SQLLogStore(mock_sessionmanager)
        log_store.fetch_unarchived_batch = AsyncMock(return_value=records)
        mock_session.execute.side_effect = ConnectionRefusedError("db gone")

        result = await Archiver(log_store, archive_storage, today=today).run()

        assert result.success
        assert [group.status for group in result.results] == ["uploaded_but_failed_delete"] * 2
        assert all("db gone" in group.errors[0] for group in result.results)
        assert set(archive_storage.files) == {"u1/logs_2024-01-01.txt", "u2/logs_2024-01-01.txt"}
