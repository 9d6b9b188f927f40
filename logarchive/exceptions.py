__all__ = (
    "ArchiverError",
    "FetchError",
    "ReadError",
    "WriteError",
    "DeleteError",
)


class ArchiverError(Exception):
    """Base class for failures raised by the archival storage collaborators."""

    pass


class FetchError(ArchiverError):
    """Reading the batch of unarchived logs failed. Fatal for the run."""

    pass


class ReadError(ArchiverError):
    """Reading an existing archive file failed for a reason other than it being absent."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"Failed to read archive {key!r}: {message}")


class WriteError(ArchiverError):
    """Uploading an archive file failed."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"Failed to write archive {key!r}: {message}")


class DeleteError(ArchiverError):
    """A delete statement failed. Rows removed by earlier statements stay removed."""

    pass
