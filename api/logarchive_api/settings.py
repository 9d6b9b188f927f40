from typing import Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "LOGARCHIVE_"}

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    POSTGRES_USER: str = "logarchive"
    POSTGRES_PASSWORD: str = "secretpassword"
    POSTGRES_DB: str = "default"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_URI: str = Field(default="")

    @field_validator("POSTGRES_URI", mode="after")
    @classmethod
    def validate_db_uri(cls, value: str, info: ValidationInfo):
        if value:
            return value
        password = info.data["POSTGRES_PASSWORD"]
        user = info.data["POSTGRES_USER"]
        host = info.data["POSTGRES_HOST"]
        port = info.data["POSTGRES_PORT"]
        name = info.data["POSTGRES_DB"]
        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{name}"

    STORAGE_BACKEND: Literal["s3", "memory"] = "s3"

    AWS_ACCESS_KEY_ID: str = "minioadmin"
    AWS_SECRET_ACCESS_KEY: str = "minioadmin"
    AWS_REGION: str = "us-east-1"
    AWS_S3_ENDPOINT_URL: str | None = "http://localhost:9000"
    AWS_S3_ARCHIVE_BUCKET: str = "user-logs"

    BATCH_LIMIT: int = Field(default=500, ge=1)
    DELETE_BATCH_SIZE: int = Field(default=100, ge=1)
    MAX_CONCURRENCY: int = Field(default=1, ge=1)

    CORS_ALLOW_ORIGINS: list[str] = ["*"]


settings = Settings()
