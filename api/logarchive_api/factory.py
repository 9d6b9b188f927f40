from logarchive import Archiver
from logarchive.logging import LoggerType
from logarchive.storage import ArchiveStorageFactory, ArchiveStorageInterface, InMemoryLogStore, LogStoreInterface
from logarchive_api.database import SessionManager
from logarchive_api.database.log_store import SQLLogStore
from logarchive_api.settings import Settings


def create_archive_storage(settings: Settings) -> ArchiveStorageInterface:
    if settings.STORAGE_BACKEND == "memory":
        return ArchiveStorageFactory.create_storage("memory")

    return ArchiveStorageFactory.create_storage(
        "s3",
        bucket=settings.AWS_S3_ARCHIVE_BUCKET,
        endpoint_url=settings.AWS_S3_ENDPOINT_URL,
        access_key_id=settings.AWS_ACCESS_KEY_ID,
        secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION,
    )


def create_log_store(settings: Settings, sessionmanager: SessionManager) -> LogStoreInterface:
    """The `memory` backend never touches the database, rows are only deleted after a durable upload."""
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryLogStore()
    return SQLLogStore(sessionmanager)


def create_archiver(
    settings: Settings,
    sessionmanager: SessionManager,
    archive_storage: ArchiveStorageInterface,
    logger: LoggerType | None = None,
    **overrides,
) -> Archiver:
    options = {
        "batch_limit": settings.BATCH_LIMIT,
        "delete_batch_size": settings.DELETE_BATCH_SIZE,
        "max_concurrency": settings.MAX_CONCURRENCY,
        **{key: value for key, value in overrides.items() if value is not None},
    }
    log_store = create_log_store(settings, sessionmanager)
    return Archiver(log_store, archive_storage, logger=logger, **options)
