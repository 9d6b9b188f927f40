import json
import re
from collections.abc import Iterable

from logarchive.schema import DEFAULT_LEVEL, DEFAULT_MODULE, LogRecord

__all__ = ("format_line", "format_lines", "merge_archive")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_MISSING = "N/A"


def _single_line(value: str | None) -> str:
    if not value:
        return ""
    return _LINE_BREAK.sub(r"\\n", value)


def format_line(record: LogRecord) -> str:
    """
    Render a record as one archive line.

    Layout::

        [{date} {time} {tz}] [User: {user}] [{module}] [{level}] {action}: {message} | Data: {json} | Stack: {stack}

    The `Data` and `Stack` segments are only present when the record carries
    metadata or a stack trace. Line breaks inside any field are escaped.
    """
    line = (
        f"[{_single_line(record.derived_date()) or _MISSING} "
        f"{_single_line(record.derived_time()) or _MISSING} "
        f"{_single_line(record.derived_timezone())}] "
        f"[User: {_single_line(record.owner)}] "
        f"[{_single_line(record.module) or DEFAULT_MODULE}] "
        f"[{_single_line(record.level) or DEFAULT_LEVEL}] "
        f"{_single_line(record.action)}: {_single_line(record.message)}"
    )

    if record.metadata:
        data = json.dumps(record.metadata, separators=(",", ":"), ensure_ascii=False, default=str)
        line += f" | Data: {_single_line(data)}"

    if record.error_stack:
        line += f" | Stack: {_single_line(record.error_stack)}"

    return line


def format_lines(records: Iterable[LogRecord]) -> str:
    return "\n".join(format_line(record) for record in records)


def merge_archive(existing: str | None, new_text: str) -> str:
    """
    Append a block of formatted lines to the current archive content.

    Non-empty existing content is terminated with a newline before the new
    block; the new block itself gets no trailing newline, the next merge adds it.
    """
    content = existing or ""
    if content and not content.endswith("\n"):
        content += "\n"
    return content + new_text
