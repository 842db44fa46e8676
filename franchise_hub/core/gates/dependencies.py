"""
Gate enforcement for FastAPI routers.

Usage:
    router = APIRouter(dependencies=[Depends(enforce_gates)])

API-style requests (under the API prefix, or asking for JSON) get a 403
with the gate's flag; anything else is redirected.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from franchise_hub.api.dependencies.database import get_db
from franchise_hub.core.auth.dependencies import get_current_user
from franchise_hub.core.config import settings
from franchise_hub.core.errors import FranchiseRegistrationRequired, OnboardingRequired
from franchise_hub.models.user import User
from franchise_hub.services.auth import has_franchise

from .decisions import GateDecision, GateRedirectRequired
from .gates import GateContext, GatePipeline, default_pipeline

logger = structlog.get_logger()


def relative_path(path: str, prefix: str | None = None) -> str:
    """'/api/v1/onboarding/status' -> 'onboarding/status'."""
    prefix = (prefix if prefix is not None else settings.api_prefix).rstrip("/")
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        path = path[len(prefix):]
    return path.strip("/")


def expects_json(request: Request, prefix: str | None = None) -> bool:
    prefix = (prefix if prefix is not None else settings.api_prefix).rstrip("/")
    path = request.url.path
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        return True
    accept = request.headers.get("accept", "")
    return "json" in accept.lower()


def raise_for_decision(decision: GateDecision, request: Request) -> None:
    """Translate a blocking decision into the error the client understands."""
    if decision.allowed:
        return
    if not expects_json(request):
        raise GateRedirectRequired(decision)
    if decision.flag == "requires_onboarding":
        raise OnboardingRequired(redirect_to=decision.redirect_to, message=decision.message)
    if decision.flag == "requires_franchise_registration":
        raise FranchiseRegistrationRequired(
            redirect_to=decision.redirect_to, message=decision.message
        )
    raise GateRedirectRequired(decision)


def build_context(request: Request, user: User, db: AsyncSession) -> GateContext:
    async def lookup_franchise() -> bool:
        return await has_franchise(db, user.id)

    return GateContext(
        role=user.role,
        profile_completed=bool(user.profile_completed),
        path=relative_path(request.url.path),
        method=request.method,
        has_franchise=lookup_franchise,
    )


def gate_dependency(pipeline: GatePipeline):
    """Build a dependency running `pipeline` for the current user."""

    async def dependency(
        request: Request,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        decision = await pipeline.evaluate(build_context(request, user, db))
        if not decision.allowed:
            logger.info(
                "Request gated",
                user_id=str(user.id),
                role=user.role,
                path=request.url.path,
                redirect_to=decision.redirect_to,
            )
            raise_for_decision(decision, request)
        return user

    return dependency


enforce_gates = gate_dependency(default_pipeline)


async def gate_redirect_handler(request: Request, exc: GateRedirectRequired):
    return RedirectResponse(exc.decision.redirect_to, status_code=302)


# Authenticated user who has cleared every gate
GatedUser = Annotated[User, Depends(enforce_gates)]
