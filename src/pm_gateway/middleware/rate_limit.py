"""Rate limiting middleware for state-changing requests.

Rules:
  - Only POST requests are counted (create, stake, resolve, claim, deposit, withdraw,
    analytics batch). Reads are never limited.
  - RATE_LIMIT_WRITES_PER_MINUTE requests per caller per fixed 60s window.
  - Caller key is the JWT `sub` when a valid Bearer token is present, else the
    client IP (X-Forwarded-For aware).

Redis logic:
    count = INCR ratelimit:{caller}:{window}
    first hit arms EXPIRE
    count > limit -> 429 with code 9001 and a Retry-After header

A Redis outage fails open: the request is served and a warning is logged.
"""

import logging
import time
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.pm_common.errors import InvalidCredentialsError, RateLimitError
from src.pm_common.redis_client import get_redis, incr_fixed_window
from src.pm_common.response import error_response
from src.pm_gateway.auth.jwt_handler import decode_access_token

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60


def _caller_key(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        try:
            return f"sub:{decode_access_token(auth[7:].strip())}"
        except InvalidCredentialsError:
            pass  # an invalid token is rejected later by the route; count it by IP
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit: int | None = None,
        redis_getter: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        self._limit = limit if limit is not None else settings.RATE_LIMIT_WRITES_PER_MINUTE
        self._redis_getter = redis_getter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method != "POST":
            return await call_next(request)

        now = int(time.time())
        window = now // _WINDOW_SECONDS
        key = f"ratelimit:{_caller_key(request)}:{window}"
        try:
            redis = await self._redis_getter()
            count = await incr_fixed_window(redis, key, _WINDOW_SECONDS)
        except RedisError as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > self._limit:
            err = RateLimitError()
            retry_after = _WINDOW_SECONDS - now % _WINDOW_SECONDS
            logger.info("Rate limit hit: key=%s count=%d", key, count)
            resp = error_response(err.code, err.message)
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                resp.request_id = request_id
            return JSONResponse(
                status_code=err.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
