"""HTTP middleware and per-endpoint rate limiting."""

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

import redis.asyncio as redis

from app.config import settings
from app.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0
WINDOW_SECONDS = 60

# Never throttled by the global limiter
UNLIMITED_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class SlidingWindow:
    """Per-key request counter over the last minute, kept in a Redis sorted set."""

    def __init__(self, prefix: str, redis_url: str | None = None):
        self.prefix = prefix
        self.redis_url = redis_url or settings.redis_url
        self._redis: redis.Redis | None = None

    def _client(self) -> redis.Redis:
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url, encoding="utf-8", decode_responses=True)
        return self._redis

    async def hit(self, key: str) -> int | None:
        """Record a request and return how many came before it in the window.

        Returns None when Redis is unreachable; callers let the request through.
        """
        now = time.time()
        redis_key = f"rate:{self.prefix}:{key}"
        try:
            async with self._client().pipeline(transaction=True) as pipe:
                await pipe.zremrangebyscore(redis_key, 0, now - WINDOW_SECONDS)
                await pipe.zcard(redis_key)
                await pipe.zadd(redis_key, {uuid.uuid4().hex: now})
                await pipe.expire(redis_key, WINDOW_SECONDS)
                results = await pipe.execute()
        except redis.RedisError as e:
            logger.warning(f"Rate limiter '{self.prefix}' unavailable, allowing request: {e}")
            return None
        return results[1]


def client_address(request: Request) -> str:
    """Caller address, honouring the first hop of a proxy chain."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else "unknown")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Global per-address budget for every API request."""

    def __init__(self, app, requests_per_minute: int = 100, redis_url: str | None = None):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.window = SlidingWindow("global", redis_url)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in UNLIMITED_PATHS:
            return await call_next(request)

        seen = await self.window.hit(client_address(request))
        if seen is None:
            return await call_next(request)

        limit_headers = {
            "X-RateLimit-Limit": str(self.requests_per_minute),
            "X-RateLimit-Reset": str(int(time.time()) + WINDOW_SECONDS),
        }
        if seen >= self.requests_per_minute:
            return JSONResponse(
                status_code=429,
                content={"detail": RateLimitExceeded().detail},
                headers={**limit_headers, "Retry-After": str(WINDOW_SECONDS), "X-RateLimit-Remaining": "0"},
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_per_minute - seen - 1))
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs its duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"

        line = f"{request.method} {request.url.path} {response.status_code} {elapsed:.3f}s id={request_id}"
        if elapsed > SLOW_REQUEST_SECONDS:
            logger.warning(f"Slow request: {line}")
        else:
            logger.debug(line)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds browser hardening headers to every response."""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.HEADERS)
        if not settings.debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class RateLimiter:
    """Endpoint dependency throttling one kind of mutation per user.

    Keys on the signed-in user when ``request.state.user_id`` is set by the
    auth dependency, otherwise on the caller's address. Disabled in
    development.
    """

    def __init__(self, requests_per_minute: int = 10, key_prefix: str = "api"):
        self.requests_per_minute = requests_per_minute
        self.window = SlidingWindow(key_prefix)

    async def __call__(self, request: Request) -> None:
        if settings.environment == "development":
            return

        user_id = getattr(request.state, "user_id", None)
        seen = await self.window.hit(str(user_id) if user_id else client_address(request))
        if seen is not None and seen >= self.requests_per_minute:
            raise RateLimitExceeded()


# Mutation budgets
booking_limiter = RateLimiter(requests_per_minute=10, key_prefix="booking")
review_limiter = RateLimiter(requests_per_minute=10, key_prefix="review")
favorite_limiter = RateLimiter(requests_per_minute=60, key_prefix="favorite")
