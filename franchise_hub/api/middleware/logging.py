"""
Access logging middleware.
"""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .request_id import client_ip

logger = logging.getLogger("franchise_hub.access")

QUIET_PATHS = ("/health",)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    One line per completed request.

    4xx/5xx responses are logged at warning level so lockouts, throttles
    and gate rejections stand out from normal traffic.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)

        if request.url.path in QUIET_PATHS:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "client_ip": client_ip(request),
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
