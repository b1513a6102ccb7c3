"""Session store backends."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from puantaj_service.auth.sessions import (
    DatabaseSessionStore,
    InMemorySessionStore,
    RedisSessionStore,
    hash_token,
)
from puantaj_service.db.models import Base, OrganizationModel, UserModel


class Clock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the session store."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.closed = False

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex

    async def get(self, key):
        value = self.data.get(key)
        return value.encode() if value is not None else None

    async def delete(self, key):
        self.ttls.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0

    async def expire(self, key, seconds):
        if key not in self.data:
            return False
        self.ttls[key] = seconds
        return True

    async def aclose(self):
        self.closed = True


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def memory_store(clock) -> InMemorySessionStore:
    return InMemorySessionStore(ttl=timedelta(days=30), clock=clock)


@pytest.mark.asyncio
async def test_create_and_resolve(memory_store):
    user_id = uuid.uuid4()
    token = await memory_store.create(user_id)
    assert len(token) >= 32
    assert await memory_store.resolve(token) == user_id


@pytest.mark.asyncio
async def test_tokens_are_unique(memory_store):
    user_id = uuid.uuid4()
    tokens = {await memory_store.create(user_id) for _ in range(20)}
    assert len(tokens) == 20


@pytest.mark.asyncio
async def test_raw_token_is_not_stored(memory_store):
    token = await memory_store.create(uuid.uuid4())
    assert token not in memory_store._sessions
    assert hash_token(token) in memory_store._sessions


@pytest.mark.asyncio
async def test_unknown_token_resolves_to_none(memory_store):
    assert await memory_store.resolve("nope") is None


@pytest.mark.asyncio
async def test_session_expires_after_ttl(memory_store, clock):
    token = await memory_store.create(uuid.uuid4())
    clock.advance(days=29, hours=23)
    assert await memory_store.resolve(token) is not None
    clock.advance(hours=1)
    assert await memory_store.resolve(token) is None


@pytest.mark.asyncio
async def test_resolve_does_not_extend(memory_store, clock):
    token = await memory_store.create(uuid.uuid4())
    clock.advance(days=20)
    await memory_store.resolve(token)
    clock.advance(days=10)
    assert await memory_store.resolve(token) is None


@pytest.mark.asyncio
async def test_extend_restarts_window(memory_store, clock):
    user_id = uuid.uuid4()
    token = await memory_store.create(user_id)
    clock.advance(days=20)
    assert await memory_store.extend(token) is True
    clock.advance(days=20)
    assert await memory_store.resolve(token) == user_id


@pytest.mark.asyncio
async def test_extend_expired_session_fails(memory_store, clock):
    token = await memory_store.create(uuid.uuid4())
    clock.advance(days=31)
    assert await memory_store.extend(token) is False


@pytest.mark.asyncio
async def test_invalidate(memory_store):
    token = await memory_store.create(uuid.uuid4())
    await memory_store.invalidate(token)
    assert await memory_store.resolve(token) is None
    await memory_store.invalidate(token)


@pytest.mark.asyncio
async def test_create_purges_expired_sessions(memory_store, clock):
    await memory_store.create(uuid.uuid4())
    await memory_store.create(uuid.uuid4())
    clock.advance(days=31)
    await memory_store.create(uuid.uuid4())
    assert len(memory_store) == 1


# ---------------------------------------------------------------------------
# Redis
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_redis_store_round_trip():
    redis = FakeRedis()
    store = RedisSessionStore(redis, ttl=timedelta(days=30), prefix="test:s")
    user_id = uuid.uuid4()
    token = await store.create(user_id)

    key = f"test:s:{hash_token(token)}"
    assert redis.data[key] == str(user_id)
    assert redis.ttls[key] == 30 * 24 * 3600
    assert await store.resolve(token) == user_id

    assert await store.extend(token) is True
    await store.invalidate(token)
    assert await store.resolve(token) is None
    assert await store.extend(token) is False


@pytest.mark.asyncio
async def test_redis_store_ignores_corrupt_value():
    redis = FakeRedis()
    store = RedisSessionStore(redis)
    token = await store.create(uuid.uuid4())
    redis.data[next(iter(redis.data))] = "garbage"
    assert await store.resolve(token) is None


@pytest.mark.asyncio
async def test_redis_store_close():
    redis = FakeRedis()
    await RedisSessionStore(redis).close()
    assert redis.closed


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


async def _make_user(factory) -> uuid.UUID:
    async with factory() as session:
        org = OrganizationModel(name="Acme")
        session.add(org)
        await session.flush()
        user = UserModel(
            org_id=org.id,
            email="db@example.com",
            password_hash="x",
            first_name="Db",
            last_name="User",
        )
        session.add(user)
        await session.commit()
        return user.id


@pytest.mark.asyncio
async def test_database_store_lifecycle(session_factory):
    clock = Clock()
    clock.now = datetime.now(UTC)
    store = DatabaseSessionStore(lambda: session_factory, ttl=timedelta(days=30), clock=clock)
    user_id = await _make_user(session_factory)

    token = await store.create(user_id)
    assert await store.resolve(token) == user_id

    clock.advance(days=31)
    assert await store.resolve(token) is None
    assert await store.extend(token) is False

    token = await store.create(user_id)
    clock.advance(days=20)
    assert await store.extend(token) is True
    clock.advance(days=20)
    assert await store.resolve(token) == user_id

    await store.invalidate(token)
    assert await store.resolve(token) is None
