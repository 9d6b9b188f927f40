from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from logarchive.logging import LogLevel, setup_logging
from logarchive_api.database import sessionmanager
from logarchive_api.factory import create_archive_storage
from logarchive_api.routes import archive
from logarchive_api.settings import settings

setup_logging(LogLevel[settings.LOG_LEVEL], overrides={"botocore": LogLevel.WARNING})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""

    async with sessionmanager:
        app.state.archive_storage = create_archive_storage(settings)
        await app.state.archive_storage.ensure_bucket_exists()
        yield


app = FastAPI(title="Log Archive API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

app.include_router(archive.router)


@app.get("/")
async def root():
    return {"message": "Log Archive API is running"}
