"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as redis
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from franchise_hub.core.config import settings
from franchise_hub.core.errors import register_exception_handlers
from franchise_hub.core.gates.decisions import GateRedirectRequired
from franchise_hub.core.gates.dependencies import gate_redirect_handler
from franchise_hub.core.logging import configure_logging
from franchise_hub.api.routes import router as api_router
from franchise_hub.api.middleware.logging import LoggingMiddleware
from franchise_hub.api.middleware.request_id import RequestIdMiddleware
from franchise_hub.models.database import close_db, init_db

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    if settings.database.create_tables:
        await init_db()

    app.state.redis = None
    if settings.redis.enabled:
        app.state.redis = redis.from_url(
            str(settings.redis.url),
            max_connections=settings.redis.max_connections,
            decode_responses=settings.redis.decode_responses,
        )
    logger.info(
        "Application started",
        environment=settings.environment,
        throttling=app.state.redis is not None,
    )

    yield

    if app.state.redis is not None:
        await app.state.redis.aclose()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (order matters - last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(api_router, prefix=settings.api_prefix)

    # Exception handlers
    register_exception_handlers(app, debug=settings.debug)
    app.add_exception_handler(GateRedirectRequired, gate_redirect_handler)

    @app.get("/health")
    async def health_check():
        """Quick health check endpoint (for load balancers)."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "franchise_hub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
    )
