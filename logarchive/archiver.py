from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import UTC, date, datetime

from logarchive.exceptions import DeleteError, FetchError, ReadError, WriteError
from logarchive.formatter import format_lines, merge_archive
from logarchive.grouper import ArchiveGroupKey, group_by_user_and_date
from logarchive.logging import LoggerType, get_logger
from logarchive.schema import NO_LOGS_MESSAGE, GroupResult, LogRecord, RunResult
from logarchive.storage import ArchiveStorageInterface, LogStoreInterface

__all__ = ("archive_logs", "Archiver", "BATCH_LIMIT", "DELETE_BATCH_SIZE")

BATCH_LIMIT = 500
DELETE_BATCH_SIZE = 100
SAMPLE_ID_COUNT = 5


async def archive_logs(
    log_store: LogStoreInterface,
    archive_storage: ArchiveStorageInterface,
    **kwargs,
) -> RunResult:
    """
    Run the archival pipeline once.

    Args:
        log_store: Table holding the unarchived logs.
        archive_storage: Blob store receiving the archive files.
        kwargs: Passed through to `Archiver`.
    """
    return await Archiver(log_store, archive_storage, **kwargs).run()


class Archiver:
    """
    Drains a batch of logs into per-user-per-day archive files.

    One `run` fetches the oldest `batch_limit` rows, groups them by (user, day),
    appends every group to its archive file and deletes the group's rows once
    the upload went through. Groups are independent: a failing group is
    reported and the others carry on. Only a failing fetch fails the run.

    Concurrent runs against the same stores are not safe, the archive upload
    is a last-writer-wins overwrite. Runs must be serialized by the scheduler.
    """

    def __init__(
        self,
        log_store: LogStoreInterface,
        archive_storage: ArchiveStorageInterface,
        *,
        batch_limit: int = BATCH_LIMIT,
        delete_batch_size: int = DELETE_BATCH_SIZE,
        max_concurrency: int = 1,
        content_type: str = "text/plain",
        logger: LoggerType | None = None,
        today: date | None = None,
    ) -> None:
        if batch_limit < 1:
            raise ValueError("batch_limit must be at least 1")
        if delete_batch_size < 1:
            raise ValueError("delete_batch_size must be at least 1")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self._log_store = log_store
        self._archive_storage = archive_storage
        self._logger = logger or get_logger()
        self._today = today
        self.batch_limit = batch_limit
        self.delete_batch_size = delete_batch_size
        self.max_concurrency = max_concurrency
        self.content_type = content_type

    async def run(self) -> RunResult:
        started_at = datetime.now(UTC)

        self._logger.info("archival", action="fetch", status="pending", limit=self.batch_limit)
        try:
            records = await self._log_store.fetch_unarchived_batch(self.batch_limit)
        except FetchError as e:
            self._logger.error("archival", action="fetch", status="failed", reason=e)
            return RunResult(success=False, error=str(e), started_at=started_at, completed_at=datetime.now(UTC))

        if not records:
            self._logger.info("archival", action="fetch", status="success", count=0, reason=NO_LOGS_MESSAGE)
            return RunResult(
                success=True, message=NO_LOGS_MESSAGE, started_at=started_at, completed_at=datetime.now(UTC)
            )

        groups = group_by_user_and_date(records, self._today)
        self._logger.info("archival", action="group", status="success", count=len(records), groups=len(groups))

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(key: ArchiveGroupKey, group: list[LogRecord]) -> GroupResult:
            async with semaphore:
                return await self.archive_group(key, group)

        results = await asyncio.gather(*(bounded(key, group) for key, group in groups.items()))

        run_result = RunResult(
            success=True,
            fetched_count=len(records),
            results=list(results),
            started_at=started_at,
            completed_at=datetime.now(UTC),
        )
        self._logger.info(
            "archival",
            action="end",
            status="success",
            count=len(records),
            groups=len(results),
            degraded=[result.key for result in run_result.degraded],
        )
        return run_result

    async def archive_group(self, key: ArchiveGroupKey, records: Sequence[LogRecord]) -> GroupResult:
        """
        Append a group to its archive file, then delete its rows if the upload succeeded.

        Never raises: any failure before the upload completes yields status `error`,
        any failure after it yields `uploaded_but_failed_delete`.
        """
        logger = self._logger.bind(key=str(key), file=key.file_key)
        ids = [record.id for record in records]

        try:
            size = await self._upload(logger, key, records)
        except WriteError as e:
            logger.error("archive-group", action="upload", status="failed", reason=e)
            return self._failed_upload(key, records, e)
        except Exception as e:
            logger.exception("archive-group", action="upload", status="failed", reason=e)
            return self._failed_upload(key, records, e)
        logger.info("archive-group", action="upload", status="success", size=size)

        deleted_count, errors = await self._delete(logger, ids)
        status = "uploaded_but_failed_delete" if errors else "archived"
        logger.info(
            "archive-group",
            action="delete",
            status="success" if not errors else "failed",
            fetched_count=len(ids),
            deleted_count=deleted_count,
        )

        return GroupResult(
            user_id=key.user_id,
            date=key.date,
            file=key.file_key,
            status=status,
            fetched_count=len(records),
            deleted_count=deleted_count,
            errors=errors,
            summary=f"Archived {len(records)} logs",
            sample_ids=ids[:SAMPLE_ID_COUNT],
        )

    async def _upload(self, logger: LoggerType, key: ArchiveGroupKey, records: Sequence[LogRecord]) -> int:
        try:
            existing = await self._archive_storage.read_if_exists(key.file_key)
        except ReadError as e:
            # prior content is unrecoverable, the merged file starts from this batch
            logger.warning("archive-group", action="read", status="failed", reason=e)
            existing = None

        content = merge_archive(existing, format_lines(records))

        logger.info("archive-group", action="upload", status="pending", count=len(records))
        await self._archive_storage.write_full(key.file_key, content, self.content_type)
        return len(content)

    @staticmethod
    def _failed_upload(key: ArchiveGroupKey, records: Sequence[LogRecord], error: Exception) -> GroupResult:
        return GroupResult(
            user_id=key.user_id,
            date=key.date,
            file=key.file_key,
            status="error",
            fetched_count=len(records),
            errors=[str(error) or type(error).__name__],
        )

    async def _delete(self, logger: LoggerType, ids: list[str]) -> tuple[int, list[str]]:
        # stops at the first failing batch, already deleted batches are not rolled back
        deleted_count = 0
        for start in range(0, len(ids), self.delete_batch_size):
            batch = ids[start : start + self.delete_batch_size]
            end = start + len(batch)
            try:
                deleted_count += await self._log_store.delete_by_ids(batch)
            except Exception as e:
                log = logger.error if isinstance(e, DeleteError) else logger.exception
                log(
                    "archive-group",
                    action="delete",
                    status="failed",
                    batch_start=start,
                    batch_end=end,
                    remaining=len(ids) - start,
                    reason=e,
                )
                return deleted_count, [f"Batch delete failed for ids [{start}, {end}): {str(e) or type(e).__name__}"]
        return deleted_count, []
