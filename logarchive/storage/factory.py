import boto3
from botocore.client import Config

from .interface import ArchiveStorageInterface
from .memory import InMemoryArchiveStorage
from .s3 import S3ArchiveStorage


class ArchiveStorageFactory:
    """Factory for creating archive storage instances."""

    @staticmethod
    def create_s3_storage(
        bucket: str,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        region_name: str = "us-east-1",
    ) -> ArchiveStorageInterface:
        """Create S3-compatible archive storage instance."""
        s3_client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region_name,
            config=Config(signature_version="s3v4"),
        )
        return S3ArchiveStorage(s3_client, bucket)

    @staticmethod
    def create_storage(backend_type: str, **kwargs) -> ArchiveStorageInterface:
        """Create archive storage instance based on backend type."""
        if backend_type == "s3":
            return ArchiveStorageFactory.create_s3_storage(**kwargs)
        elif backend_type == "memory":
            return InMemoryArchiveStorage()
        else:
            raise ValueError(f"Unknown backend type: {backend_type}")
