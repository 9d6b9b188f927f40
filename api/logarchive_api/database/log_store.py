from collections.abc import Sequence

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from logarchive.exceptions import DeleteError, FetchError
from logarchive.schema import LogRecord
from logarchive.storage import LogStoreInterface
from logarchive_api.database import SessionManager
from logarchive_api.database.schema import Log

# driver level connection failures surface as OSError or TimeoutError, not SQLAlchemyError
_DATABASE_ERRORS = (SQLAlchemyError, OSError, TimeoutError)


def to_record(row: Log) -> LogRecord:
    return LogRecord(
        id=row.id,
        user_id=row.user_id,
        created_at=row.created_at,
        log_date=row.log_date,
        log_time=row.log_time,
        timezone=row.timezone,
        module=row.module,
        level=row.level,
        action=row.action,
        message=row.message,
        metadata=row.metadata_,
        error_stack=row.error_stack,
    )


class SQLLogStore(LogStoreInterface):
    """`logs` table access. Every call runs in its own session so groups may be processed concurrently."""

    def __init__(self, sessionmanager: SessionManager):
        self._sessionmanager = sessionmanager

    async def fetch_unarchived_batch(self, limit: int) -> list[LogRecord]:
        query = select(Log).order_by(Log.created_at.asc()).limit(limit)
        try:
            async with self._sessionmanager.session() as db:
                result = await db.execute(query)
                rows = result.scalars().all()
        except _DATABASE_ERRORS as e:
            raise FetchError(f"Error fetching logs: {e}") from e

        try:
            return [to_record(row) for row in rows]
        except ValidationError as e:
            raise FetchError(f"Error mapping fetched logs: {e}") from e

    async def delete_by_ids(self, ids: Sequence[str]) -> int:
        if not ids:
            return 0

        statement = delete(Log).where(Log.id.in_(list(ids))).execution_options(synchronize_session=False)
        try:
            async with self._sessionmanager.session() as db:
                result = await db.execute(statement)
                await db.commit()
        except _DATABASE_ERRORS as e:
            raise DeleteError(f"Error deleting {len(ids)} logs: {e}") from e

        return result.rowcount
