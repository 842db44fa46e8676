"""Middleware package."""

from franchise_hub.api.middleware.request_id import RequestIdMiddleware, client_ip
from franchise_hub.api.middleware.logging import LoggingMiddleware

__all__ = [
    "RequestIdMiddleware",
    "LoggingMiddleware",
    "client_ip",
]
