from logarchive.archiver import BATCH_LIMIT, DELETE_BATCH_SIZE, Archiver, archive_logs
from logarchive.exceptions import ArchiverError, DeleteError, FetchError, ReadError, WriteError
from logarchive.formatter import format_line, format_lines, merge_archive
from logarchive.grouper import ArchiveGroupKey, derive_group_key, group_by_user_and_date
from logarchive.schema import GroupResult, LogRecord, RunResult

__all__ = (
    "BATCH_LIMIT",
    "DELETE_BATCH_SIZE",
    "ArchiveGroupKey",
    "Archiver",
    "ArchiverError",
    "DeleteError",
    "FetchError",
    "GroupResult",
    "LogRecord",
    "ReadError",
    "RunResult",
    "WriteError",
    "archive_logs",
    "derive_group_key",
    "format_line",
    "format_lines",
    "group_by_user_and_date",
    "merge_archive",
)
