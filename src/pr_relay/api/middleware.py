"""ASGI middleware for rate limiting and security headers."""

from __future__ import annotations

import logging
import math
import time
import traceback
from collections.abc import Callable
from dataclasses import dataclass

from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pr_relay.api.schemas.trigger import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
_PRUNE_THRESHOLD = 10_000

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'self'; object-src 'none'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
}


@dataclass(slots=True)
class _Window:
    started_at: float
    count: int


class FixedWindowRateLimiter:
    """Count hits per key inside fixed windows."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> tuple[bool, float]:
        """Record one hit; return whether it is allowed and seconds until reset."""
        now = self._clock()
        if len(self._windows) > _PRUNE_THRESHOLD:
            self._prune(now)
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            window = _Window(started_at=now, count=0)
            self._windows[key] = window
        window.count += 1
        retry_after = max(0.0, window.started_at + self.window_seconds - now)
        return window.count <= self.limit, retry_after

    def _prune(self, now: float) -> None:
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware:
    """Reject clients that exceed the per-IP request budget."""

    def __init__(self, app: ASGIApp, *, limiter: FixedWindowRateLimiter) -> None:
        self.app = app
        self.limiter = limiter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        client = scope.get("client")
        key = client[0] if client else "unknown"
        allowed, retry_after = self.limiter.hit(key)
        if allowed:
            await self.app(scope, receive, send)
            return
        response = JSONResponse(
            status_code=429,
            content={"error": {"message": RATE_LIMIT_MESSAGE}},
            headers={"Retry-After": str(math.ceil(retry_after))},
        )
        await response(scope, receive, send)


class SecurityHeadersMiddleware:
    """Attach hardening headers to every HTTP response."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in SECURITY_HEADERS.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_with_headers)


class UnhandledErrorMiddleware:
    """Turn uncaught exceptions into the standard 500 envelope.

    Runs inside the header and CORS middleware so error responses carry the
    same headers as any other response.
    """

    def __init__(self, app: ASGIApp, *, include_traceback: bool = False) -> None:
        self.app = app
        self.include_traceback = include_traceback

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_tracking(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except Exception as exc:
            logger.exception("Unhandled error")
            if started:
                raise
            detail = ErrorDetail(message="Internal server error")
            if self.include_traceback:
                detail.details = str(exc)
                detail.stack = "".join(traceback.format_exception(exc))
            response = JSONResponse(
                status_code=500,
                content=ErrorResponse(error=detail).body(),
            )
            await response(scope, receive, send)
