from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, field_validator

__all__ = ("ANONYMOUS_USER", "DEFAULT_LEVEL", "DEFAULT_MODULE", "DEFAULT_TIMEZONE", "LogRecord")

ANONYMOUS_USER = "anonymous"
DEFAULT_MODULE = "System"
DEFAULT_LEVEL = "INFO"
DEFAULT_TIMEZONE = "UTC"


class LogRecord(BaseModel):
    """
    A single row of the unarchived log table.

    Only `id` is required. Everything else is optional and resolved through
    the `derived_*` helpers, which never touch the clock or any storage.
    """

    model_config = {"extra": "ignore", "frozen": True}

    id: str
    user_id: str | None = None
    created_at: str | None = None
    """ISO-8601 ingestion timestamp."""
    log_date: str | None = None
    """Pre-split `YYYY-MM-DD` date, takes precedence over `created_at`."""
    log_time: str | None = None
    timezone: str | None = None
    module: str | None = None
    level: str | None = None
    action: str | None = None
    message: str | None = None
    metadata: Any = None
    """Free-form JSON value, usually an object."""
    error_stack: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def validate_created_at(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat().replace("+00:00", "Z")
        return value

    @field_validator("log_date", "log_time", mode="before")
    @classmethod
    def validate_date_parts(cls, value: Any) -> Any:
        if isinstance(value, date | time):
            return value.isoformat()
        return value

    @property
    def owner(self) -> str:
        return self.user_id or ANONYMOUS_USER

    def derived_date(self) -> str | None:
        """`log_date` if set, else the date portion of `created_at`."""
        if self.log_date:
            return self.log_date
        if self.created_at:
            return self.created_at.split("T", 1)[0] or None
        return None

    def derived_time(self) -> str | None:
        """`log_time` if set, else the time portion of `created_at` without a trailing `Z`."""
        if self.log_time:
            return self.log_time
        if self.created_at and "T" in self.created_at:
            return self.created_at.split("T", 1)[1].removesuffix("Z") or None
        return None

    def derived_timezone(self) -> str:
        return self.timezone or DEFAULT_TIMEZONE
