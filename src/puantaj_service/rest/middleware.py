"""Request logging middleware."""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request

log = structlog.get_logger(__name__)


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()
        # an exception escaping call_next is rendered as a 500 further out
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            log.info(
                "request_completed",
                status=status,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
