"""
Per-endpoint throttles using a Redis sliding window.

The Redis client lives on app.state.redis (created in the lifespan when
REDIS_ENABLED=true). Without a client every request is allowed.

Usage:
    @router.post("/register", dependencies=[Depends(registration_throttle)])
    async def register(...):
        ...

    # keyed by something other than the caller's IP:
    await login_throttle.hit(request, f"{email}|{client_ip(request)}")
"""

import math
import time
import uuid

import redis.asyncio as redis
import structlog
from starlette.requests import Request

from franchise_hub.api.middleware.request_id import client_ip
from franchise_hub.core.config import settings
from franchise_hub.core.errors import RateLimited

logger = structlog.get_logger()


def get_redis(request: Request) -> redis.Redis | None:
    return getattr(request.app.state, "redis", None)


class Throttle:
    """
    Sliding-window limiter for one named scope.

    Each hit is a member of a sorted set scored by its timestamp; members
    older than the window are dropped before counting.
    """

    def __init__(self, scope: str, max_requests: int, window_seconds: int):
        self.scope = scope
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def __call__(self, request: Request) -> None:
        """Dependency form, keyed by client IP."""
        await self.hit(request, client_ip(request))

    async def hit(self, request: Request, identifier: str) -> None:
        """
        Record one attempt for `identifier`.

        Raises:
            RateLimited: when the window already holds max_requests attempts
        """
        if not settings.rate_limit.enabled:
            return

        client = get_redis(request)
        if client is None:
            return

        allowed, retry_after = await self.check(client, identifier)
        if not allowed:
            logger.warning(
                "Throttle exceeded",
                scope=self.scope,
                identifier=identifier,
                retry_after=retry_after,
            )
            raise RateLimited(retry_after=retry_after)

    async def check(self, client: redis.Redis, identifier: str) -> tuple[bool, int]:
        """
        Returns:
            (is_allowed, seconds_until_oldest_hit_leaves_the_window)
        """
        now = time.time()
        window_start = now - self.window_seconds
        key = f"throttle:{self.scope}:{identifier.lower()}"

        pipe = client.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex}": now})
        pipe.zcard(key)
        pipe.zrange(key, 0, 0, withscores=True)
        pipe.expire(key, self.window_seconds)
        results = await pipe.execute()

        request_count = results[2]
        if request_count <= self.max_requests:
            return True, 0

        oldest = results[3]
        oldest_score = oldest[0][1] if oldest else now
        retry_after = max(1, math.ceil(oldest_score + self.window_seconds - now))
        return False, retry_after


login_throttle = Throttle(
    "login",
    settings.rate_limit.login_requests,
    settings.rate_limit.login_window,
)

registration_throttle = Throttle(
    "register",
    settings.rate_limit.registration_requests,
    settings.rate_limit.registration_window,
)
