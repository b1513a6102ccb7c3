"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from puantaj_service import __version__
from puantaj_service.auth.sessions import (
    DatabaseSessionStore,
    InMemorySessionStore,
    RedisSessionStore,
    SessionStore,
)
from puantaj_service.db.engine import close_db, get_session_factory, init_db
from puantaj_service.rest.errors import register_error_handlers
from puantaj_service.rest.middleware import install_request_logging
from puantaj_service.rest.ratelimit import RateLimiter, install_rate_limit
from puantaj_service.rest.routes.admin import router as admin_router
from puantaj_service.rest.routes.auth import router as auth_router
from puantaj_service.rest.routes.contractors import router as contractors_router
from puantaj_service.rest.routes.health import router as health_router
from puantaj_service.rest.routes.notes import router as notes_router
from puantaj_service.rest.routes.notifications import router as notifications_router
from puantaj_service.rest.routes.payments import router as payments_router
from puantaj_service.rest.routes.personnel import router as personnel_router
from puantaj_service.rest.routes.projects import router as projects_router
from puantaj_service.rest.routes.timesheets import router as timesheets_router
from puantaj_service.rest.routes.transactions import router as transactions_router
from puantaj_service.settings import Settings, settings

log = structlog.get_logger(__name__)


def build_session_store(config: Settings) -> SessionStore:
    ttl = timedelta(days=config.session_ttl_days)
    if config.session_backend == "redis":
        from redis.asyncio import Redis

        return RedisSessionStore(Redis.from_url(config.redis_url, decode_responses=True), ttl=ttl)
    if config.session_backend == "database":
        return DatabaseSessionStore(get_session_factory, ttl=ttl)
    if config.session_backend == "memory":
        return InMemorySessionStore(ttl=ttl)
    raise ValueError(f"Unknown session backend: {config.session_backend!r}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await init_db()
    log.info("service_started", session_backend=type(app.state.session_store).__name__)
    yield
    store = app.state.session_store
    if isinstance(store, RedisSessionStore):
        await store.close()
    await close_db()


def create_app(config: Settings | None = None) -> FastAPI:
    config = config or settings
    app = FastAPI(
        title="Puantaj API",
        description="Personnel, timesheet and bookkeeping service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session_store = build_session_store(config)

    # Middleware added first runs innermost; the limiter stays inside CORS
    if config.rate_limit_requests > 0:
        app.state.rate_limiter = RateLimiter(
            config.rate_limit_requests, config.rate_limit_window_seconds
        )
        install_rate_limit(app, app.state.rate_limiter)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_request_logging(app)
    register_error_handlers(app)

    # Public routes
    app.include_router(health_router, tags=["health"])

    # Register/login/logout are public; everything else is gated per route
    app.include_router(auth_router, prefix="/api")
    app.include_router(personnel_router, prefix="/api")
    app.include_router(projects_router, prefix="/api")
    app.include_router(timesheets_router, prefix="/api")
    app.include_router(contractors_router, prefix="/api")
    app.include_router(notes_router, prefix="/api")
    app.include_router(transactions_router, prefix="/api")
    app.include_router(payments_router, prefix="/api")
    app.include_router(notifications_router, prefix="/api")

    # Admin-only routes
    app.include_router(admin_router, prefix="/api")

    return app
