"""Per-client request rate limiting.

A sliding window of request timestamps per client address. Over the limit,
a request is answered with 429 before it reaches the pipeline.
"""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable

import structlog
from fastapi import FastAPI, Request

from puantaj_service.rest.errors import error_response

log = structlog.get_logger(__name__)

# Past this many tracked clients, idle ones are dropped on the next request.
_PURGE_THRESHOLD = 10_000


class RateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max = max_requests
        self._window = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}

    @property
    def retry_after(self) -> int:
        return math.ceil(self._window)

    def __len__(self) -> int:
        return len(self._hits)

    def allow(self, key: str) -> bool:
        """Record a request from ``key``; False once it is over the limit."""
        now = self._clock()
        if len(self._hits) > _PURGE_THRESHOLD:
            self.purge(now)
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - self._window:
            hits.popleft()
        if len(hits) >= self._max:
            return False
        hits.append(now)
        return True

    def purge(self, now: float | None = None) -> None:
        now = self._clock() if now is None else now
        cutoff = now - self._window
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in idle:
            del self._hits[key]


def install_rate_limit(app: FastAPI, limiter: RateLimiter, prefix: str = "/api") -> None:
    @app.middleware("http")
    async def limit_requests(request: Request, call_next):
        if not request.url.path.startswith(prefix):
            return await call_next(request)
        client = request.client.host if request.client else "unknown"
        if not limiter.allow(client):
            log.warning("rate_limited", client=client)
            return error_response(
                429,
                "Too many requests",
                headers={"Retry-After": str(limiter.retry_after)},
                retryAfter=limiter.retry_after,
            )
        return await call_next(request)
