from collections.abc import Iterable
from datetime import UTC, date, datetime
from typing import NamedTuple

from logarchive.schema import LogRecord

__all__ = ("ArchiveGroupKey", "derive_group_key", "group_by_user_and_date")


class ArchiveGroupKey(NamedTuple):
    user_id: str
    date: str
    """`YYYY-MM-DD`"""

    def __str__(self) -> str:
        return f"{self.user_id}|{self.date}"

    @property
    def file_key(self) -> str:
        return f"{self.user_id}/logs_{self.date}.txt"


def derive_group_key(record: LogRecord, today: date | None = None) -> ArchiveGroupKey:
    """
    Derive the (user, day) key of a record.

    The day is `log_date`, then the date portion of `created_at`, then `today`
    (current UTC date unless given).
    """
    log_date = record.derived_date()
    if not log_date:
        log_date = (today or datetime.now(UTC).date()).isoformat()
    return ArchiveGroupKey(record.owner, log_date)


def group_by_user_and_date(
    records: Iterable[LogRecord], today: date | None = None
) -> dict[ArchiveGroupKey, list[LogRecord]]:
    """Partition records by their group key, keeping input order inside each group."""
    today = today or datetime.now(UTC).date()
    groups: dict[ArchiveGroupKey, list[LogRecord]] = {}
    for record in records:
        groups.setdefault(derive_group_key(record, today), []).append(record)
    return groups
