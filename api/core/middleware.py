"""
HTTP middleware: per-client rate limiting and response security headers.

The limiter keeps a sliding window of request timestamps per client in
process memory, so each worker counts on its own.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict, deque
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from . import config

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}


def client_identifier(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Answer 429 once a client has made `max_requests` requests inside the
    last `window_s` seconds.

    Usage:
        app.add_middleware(RateLimitMiddleware, max_requests=100, window_s=60)

    Successful responses carry `RateLimit-Limit`, `RateLimit-Remaining` and
    `RateLimit-Reset` headers.
    """

    EXEMPT_PATHS = ("/health",)

    def __init__(
        self,
        app: ASGIApp,
        *,
        max_requests: int | None = None,
        window_s: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.max_requests = config.rate_limit_max() if max_requests is None else max_requests
        self.window_s = config.rate_limit_window_s() if window_s is None else window_s
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def _cleanup(self, client: str, now: float) -> deque[float]:
        hits = self._hits[client]
        cutoff = now - self.window_s
        while hits and hits[0] <= cutoff:
            hits.popleft()
        return hits

    def _reset_in(self, hits: deque[float], now: float) -> int:
        if not hits:
            return self.window_s
        return max(0, int(hits[0] + self.window_s - now))

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.max_requests <= 0 or request.url.path.startswith(self.EXEMPT_PATHS):
            return await call_next(request)

        client = client_identifier(request)
        now = self._clock()
        hits = self._cleanup(client, now)

        if len(hits) >= self.max_requests:
            logger.warning("Rate limit exceeded for %s on %s", client, request.url.path)
            reset_in = self._reset_in(hits, now)
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE},
                headers={
                    "Retry-After": str(reset_in),
                    "RateLimit-Limit": str(self.max_requests),
                    "RateLimit-Remaining": "0",
                    "RateLimit-Reset": str(reset_in),
                },
            )

        hits.append(now)
        response = await call_next(request)
        response.headers["RateLimit-Limit"] = str(self.max_requests)
        response.headers["RateLimit-Remaining"] = str(self.max_requests - len(hits))
        response.headers["RateLimit-Reset"] = str(self._reset_in(hits, now))
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Set common hardening headers unless a route already chose its own."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
