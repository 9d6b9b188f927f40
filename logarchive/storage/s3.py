import asyncio

from botocore.exceptions import BotoCoreError, ClientError

from logarchive.exceptions import ReadError, WriteError
from logarchive.logging import LoggerType, get_logger

from .interface import ArchiveStorageInterface

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3ArchiveStorage(ArchiveStorageInterface):
    """S3-compatible archive storage. Appends are emulated by read-modify-write of the whole object."""

    def __init__(self, s3_client, bucket: str, logger: LoggerType | None = None):
        self.s3_client = s3_client
        self.bucket = bucket
        self.logger = logger or get_logger(__name__)

    async def ensure_bucket_exists(self) -> bool:
        try:
            await asyncio.get_event_loop().run_in_executor(
                None, lambda: self.s3_client.head_bucket(Bucket=self.bucket)
            )
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] != "404":
                self.logger.error("bucket", action="check", status="failed", bucket=self.bucket, reason=e)
                return False

        try:
            await asyncio.get_event_loop().run_in_executor(
                None, lambda: self.s3_client.create_bucket(Bucket=self.bucket)
            )
        except ClientError as e:
            self.logger.error("bucket", action="create", status="failed", bucket=self.bucket, reason=e)
            return False

        self.logger.info("bucket", action="create", status="success", bucket=self.bucket)
        return True

    async def read_if_exists(self, key: str) -> str | None:
        try:
            response = await asyncio.get_event_loop().run_in_executor(
                None, lambda: self.s3_client.get_object(Bucket=self.bucket, Key=key)
            )
            body = await asyncio.get_event_loop().run_in_executor(None, response["Body"].read)
        except ClientError as e:
            if e.response["Error"]["Code"] in _MISSING_KEY_CODES:
                return None
            raise ReadError(key, str(e)) from e
        except BotoCoreError as e:
            raise ReadError(key, str(e)) from e

        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ReadError(key, str(e)) from e

    async def write_full(self, key: str, text: str, content_type: str = "text/plain") -> None:
        try:
            await asyncio.get_event_loop().run_in_executor(
                None,
                lambda: self.s3_client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=text.encode("utf-8"),
                    ContentType=content_type,
                ),
            )
        except (ClientError, BotoCoreError) as e:
            raise WriteError(key, str(e)) from e
