"""Async SQLAlchemy engine and session factory."""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from puantaj_service.db.models import Base
from puantaj_service.settings import settings

log = structlog.get_logger(__name__)

_engine = None
_session_factory = None


async def init_db(database_url: str | None = None, create_schema: bool | None = None) -> None:
    global _engine, _session_factory
    url = database_url or settings.database_url
    engine_kwargs = {} if url.startswith("sqlite") else {"pool_size": 10}
    _engine = create_async_engine(url, echo=False, **engine_kwargs)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)

    if settings.auto_create_schema if create_schema is None else create_schema:
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("db_schema_ready")


async def close_db() -> None:
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory
