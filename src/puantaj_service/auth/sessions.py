"""Pluggable session stores.

A session is an opaque bearer token bound to one user id with a fixed expiry.
Only a SHA-256 digest of the token is ever stored. ``resolve`` never mutates
anything; lengthening a session is the separate ``extend`` call.
"""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol
from uuid import UUID

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from puantaj_service.db.models import SessionModel

log = structlog.get_logger(__name__)


def _now_utc() -> datetime:
    return datetime.now(UTC)


def new_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionStore(Protocol):
    """Backend interface for bearer-token sessions."""

    async def create(self, user_id: UUID) -> str: ...
    async def resolve(self, token: str) -> UUID | None: ...
    async def invalidate(self, token: str) -> None: ...
    async def extend(self, token: str) -> bool: ...


class InMemorySessionStore:
    """Process-local session store for development and tests."""

    def __init__(
        self,
        ttl: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, tuple[UUID, datetime]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def create(self, user_id: UUID) -> str:
        self.purge_expired()
        token = new_token()
        self._sessions[hash_token(token)] = (user_id, self._clock() + self._ttl)
        return token

    async def resolve(self, token: str) -> UUID | None:
        entry = self._sessions.get(hash_token(token))
        if entry is None:
            return None
        user_id, expires_at = entry
        if expires_at <= self._clock():
            return None
        return user_id

    async def invalidate(self, token: str) -> None:
        self._sessions.pop(hash_token(token), None)

    async def extend(self, token: str) -> bool:
        key = hash_token(token)
        user_id = await self.resolve(token)
        if user_id is None:
            return False
        self._sessions[key] = (user_id, self._clock() + self._ttl)
        return True

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for key in expired:
            del self._sessions[key]
        if expired:
            log.debug("sessions_purged", count=len(expired))
        return len(expired)


class RedisSessionStore:
    """Session store backed by Redis keys with a native TTL."""

    def __init__(
        self,
        redis_client: Any,
        ttl: timedelta = timedelta(days=30),
        prefix: str = "puantaj:sessions",
    ) -> None:
        self._redis = redis_client
        self._ttl_seconds = int(ttl.total_seconds())
        self._prefix = prefix

    def _key(self, token: str) -> str:
        return f"{self._prefix}:{hash_token(token)}"

    async def create(self, user_id: UUID) -> str:
        token = new_token()
        await self._redis.set(self._key(token), str(user_id), ex=self._ttl_seconds)
        return token

    async def resolve(self, token: str) -> UUID | None:
        raw = await self._redis.get(self._key(token))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return UUID(raw)
        except ValueError:
            log.warning("session_value_corrupt", key=self._key(token))
            return None

    async def invalidate(self, token: str) -> None:
        await self._redis.delete(self._key(token))

    async def extend(self, token: str) -> bool:
        return bool(await self._redis.expire(self._key(token), self._ttl_seconds))

    async def close(self) -> None:
        await self._redis.aclose()


class DatabaseSessionStore:
    """Session store backed by the ``sessions`` table.

    ``session_factory`` is called per operation so the store can be built
    before the engine is initialised.
    """

    def __init__(
        self,
        session_factory: Callable[[], async_sessionmaker[AsyncSession]],
        ttl: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        self._session_factory = session_factory
        self._ttl = ttl
        self._clock = clock

    async def create(self, user_id: UUID) -> str:
        token = new_token()
        async with self._session_factory()() as session:
            session.add(
                SessionModel(
                    token_hash=hash_token(token),
                    user_id=user_id,
                    expires_at=self._clock() + self._ttl,
                )
            )
            await session.commit()
        return token

    async def resolve(self, token: str) -> UUID | None:
        async with self._session_factory()() as session:
            row = await session.get(SessionModel, hash_token(token))
            if row is None:
                return None
            expires_at = row.expires_at
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=UTC)
            if expires_at <= self._clock():
                return None
            return row.user_id

    async def invalidate(self, token: str) -> None:
        async with self._session_factory()() as session:
            await session.execute(
                delete(SessionModel).where(SessionModel.token_hash == hash_token(token))
            )
            await session.commit()

    async def extend(self, token: str) -> bool:
        if await self.resolve(token) is None:
            return False
        async with self._session_factory()() as session:
            row = await session.get(SessionModel, hash_token(token))
            if row is None:
                return False
            row.expires_at = self._clock() + self._ttl
            await session.commit()
        return True
