from .factory import ArchiveStorageFactory
from .interface import ArchiveStorageInterface, LogStoreInterface
from .memory import InMemoryArchiveStorage, InMemoryLogStore
from .s3 import S3ArchiveStorage

__all__ = [
    "ArchiveStorageFactory",
    "ArchiveStorageInterface",
    "InMemoryArchiveStorage",
    "InMemoryLogStore",
    "LogStoreInterface",
    "S3ArchiveStorage",
]
