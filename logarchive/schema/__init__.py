from .base import BaseSchema
from .record import ANONYMOUS_USER, DEFAULT_LEVEL, DEFAULT_MODULE, DEFAULT_TIMEZONE, LogRecord
from .result import NO_LOGS_MESSAGE, ArchiveStatus, GroupResult, RunResult

__all__ = (
    "ANONYMOUS_USER",
    "DEFAULT_LEVEL",
    "DEFAULT_MODULE",
    "DEFAULT_TIMEZONE",
    "NO_LOGS_MESSAGE",
    "ArchiveStatus",
    "BaseSchema",
    "GroupResult",
    "LogRecord",
    "RunResult",
)
