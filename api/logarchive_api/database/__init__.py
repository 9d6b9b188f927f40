import contextlib
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from logarchive_api.settings import settings


class SessionManager:
    def __init__(self, uri: str, **engine_kwargs) -> None:
        self._uri = uri
        self._engine_kwargs = engine_kwargs
        self._engine = None
        self._sessionmaker = None

    async def __aenter__(self):
        self._engine = create_async_engine(self._uri, **self._engine_kwargs)
        self._sessionmaker = async_sessionmaker(autocommit=False, bind=self._engine, expire_on_commit=False)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._engine:
            await self._engine.dispose()

        self._engine = None
        self._sessionmaker = None

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if not self._sessionmaker:
            raise RuntimeError("Engine not created. Use 'async with' context on SessionManager instance.")
        session = self._sessionmaker()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


sessionmanager = SessionManager(settings.POSTGRES_URI, pool_pre_ping=True)  # entered by the app lifespan or the CLI

__all__ = ["SessionManager", "sessionmanager"]
