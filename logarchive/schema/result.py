from datetime import UTC, datetime
from typing import Literal

from pydantic import Field

from logarchive.schema.base import BaseSchema

__all__ = ("ArchiveStatus", "GroupResult", "RunResult", "NO_LOGS_MESSAGE")

ArchiveStatus = Literal["archived", "uploaded_but_failed_delete", "error"]

NO_LOGS_MESSAGE = "No logs to archive"


class GroupResult(BaseSchema):
    """Outcome of archiving one (user, day) group."""

    user_id: str
    date: str
    file: str
    """Archive file key the group was written to."""
    status: ArchiveStatus
    fetched_count: int
    deleted_count: int = 0
    errors: list[str] = Field(default_factory=list)
    summary: str | None = None
    sample_ids: list[str] = Field(default_factory=list)
    """First few record ids of the group, kept for manual remediation."""

    @property
    def key(self) -> str:
        return f"{self.user_id}|{self.date}"


class RunResult(BaseSchema):
    """Report of one full invocation of the archival pipeline."""

    success: bool
    fetched_count: int = 0
    results: list[GroupResult] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None

    @property
    def nothing_to_archive(self) -> bool:
        return self.success and self.fetched_count == 0

    @property
    def degraded(self) -> list[GroupResult]:
        return [result for result in self.results if result.status != "archived"]
