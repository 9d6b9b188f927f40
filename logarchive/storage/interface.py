from abc import ABC, abstractmethod
from collections.abc import Sequence

from logarchive.schema import LogRecord


class LogStoreInterface(ABC):
    """Abstract interface for the table holding unarchived logs."""

    @abstractmethod
    async def fetch_unarchived_batch(self, limit: int) -> list[LogRecord]:
        """
        Fetch up to `limit` records, oldest `created_at` first.

        Raises:
            FetchError: If the table could not be read.
        """
        pass

    @abstractmethod
    async def delete_by_ids(self, ids: Sequence[str]) -> int:
        """
        Delete the given ids in a single statement and return the number of rows removed.

        Raises:
            DeleteError: If the delete failed. Nothing from this call is deleted.
        """
        pass


class ArchiveStorageInterface(ABC):
    """Abstract interface for the blob store holding archive files."""

    @abstractmethod
    async def ensure_bucket_exists(self) -> bool:
        """Ensure the archive bucket exists, create if necessary."""
        pass

    @abstractmethod
    async def read_if_exists(self, key: str) -> str | None:
        """
        Get the full content of an archive file, `None` if there is none yet.

        Raises:
            ReadError: On any failure other than the file being absent.
        """
        pass

    @abstractmethod
    async def write_full(self, key: str, text: str, content_type: str = "text/plain") -> None:
        """
        Overwrite an archive file with the given content.

        Raises:
            WriteError: If the upload failed.
        """
        pass
