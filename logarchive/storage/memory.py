import asyncio
from collections.abc import Iterable, Sequence

from logarchive.exceptions import DeleteError, FetchError, ReadError, WriteError
from logarchive.schema import LogRecord

from .interface import ArchiveStorageInterface, LogStoreInterface


class InMemoryLogStore(LogStoreInterface):
    """
    In-process log table.

    `fail_fetch` and `fail_delete_calls` (1-based numbers of `delete_by_ids`
    calls) inject storage faults.
    """

    def __init__(
        self,
        records: Iterable[LogRecord] = (),
        *,
        fail_fetch: bool = False,
        fail_delete_calls: Iterable[int] = (),
    ):
        self._records: dict[str, LogRecord] = {record.id: record for record in records}
        self._lock = asyncio.Lock()
        self.fail_fetch = fail_fetch
        self.fail_delete_calls = set(fail_delete_calls)
        self.delete_calls: list[list[str]] = []

    @property
    def records(self) -> list[LogRecord]:
        return list(self._records.values())

    async def insert(self, *records: LogRecord) -> None:
        async with self._lock:
            for record in records:
                self._records[record.id] = record

    async def fetch_unarchived_batch(self, limit: int) -> list[LogRecord]:
        if self.fail_fetch:
            raise FetchError("Error fetching logs: store unavailable")
        async with self._lock:
            # stable sort keeps insertion order for equal or missing timestamps
            ordered = sorted(self._records.values(), key=lambda record: record.created_at or "")
            return ordered[:limit]

    async def delete_by_ids(self, ids: Sequence[str]) -> int:
        async with self._lock:
            self.delete_calls.append(list(ids))
            if len(self.delete_calls) in self.fail_delete_calls:
                raise DeleteError(f"delete call {len(self.delete_calls)} rejected")
            return sum(self._records.pop(record_id, None) is not None for record_id in ids)


class InMemoryArchiveStorage(ArchiveStorageInterface):
    """In-process blob store. Keys listed in `fail_read_keys` / `fail_write_keys` fail."""

    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        fail_read_keys: Iterable[str] = (),
        fail_write_keys: Iterable[str] = (),
    ):
        self.files: dict[str, str] = dict(files or {})
        self.content_types: dict[str, str] = {}
        self.fail_read_keys = set(fail_read_keys)
        self.fail_write_keys = set(fail_write_keys)
        self.writes: list[str] = []
        self._lock = asyncio.Lock()

    async def ensure_bucket_exists(self) -> bool:
        return True

    async def read_if_exists(self, key: str) -> str | None:
        if key in self.fail_read_keys:
            raise ReadError(key, "read rejected")
        async with self._lock:
            return self.files.get(key)

    async def write_full(self, key: str, text: str, content_type: str = "text/plain") -> None:
        if key in self.fail_write_keys:
            raise WriteError(key, "write rejected")
        async with self._lock:
            self.files[key] = text
            self.content_types[key] = content_type
            self.writes.append(key)
