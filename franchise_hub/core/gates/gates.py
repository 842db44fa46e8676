"""
Onboarding and franchise-registration gates.

Franchisees cannot use the app until their profile is complete and
franchisors cannot use it until they have registered a franchise. Each
gate lets through the handful of endpoints needed to get unstuck.

Paths are compared relative to the API prefix ("onboarding/status", not
"/api/v1/onboarding/status").
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from franchise_hub.core.roles import Role

from .decisions import GateDecision

ONBOARDING_REDIRECT = "/onboarding"
FRANCHISE_REGISTRATION_REDIRECT = "/franchisor/franchise-registration"

ONBOARDING_ALLOWED_PATHS = frozenset({
    "onboarding/status",
    "onboarding/complete",
    "auth/logout",
})

FRANCHISE_ALLOWED_PATHS = frozenset({
    "onboarding/franchise-status",
    "auth/logout",
    "auth/me",
    "account/settings",
    "account/password",
})


async def _no_franchise() -> bool:
    return False


@dataclass
class GateContext:
    """
    What the gates see of a request.

    `has_franchise` is a coroutine function so the lookup only happens
    when the franchise gate actually needs it.
    """
    role: str | None
    profile_completed: bool
    path: str
    method: str = "GET"
    has_franchise: Callable[[], Awaitable[bool]] = _no_franchise

    @property
    def authenticated(self) -> bool:
        return self.role is not None


Gate = Callable[[GateContext], Awaitable[GateDecision]]


async def onboarding_gate(ctx: GateContext) -> GateDecision:
    if ctx.role != Role.FRANCHISEE.value:
        return GateDecision.allow()
    if ctx.path in ONBOARDING_ALLOWED_PATHS:
        return GateDecision.allow()
    if ctx.profile_completed:
        return GateDecision.allow()
    return GateDecision.redirect(
        ONBOARDING_REDIRECT,
        flag="requires_onboarding",
        message="Profile completion required",
    )


def is_franchise_registration_request(path: str, method: str) -> bool:
    """Registration pages, plus creating the franchise itself."""
    if "franchise-registration" in path:
        return True
    return "franchises" in path and method.upper() == "POST"


async def franchise_registration_gate(ctx: GateContext) -> GateDecision:
    if ctx.role != Role.FRANCHISOR.value:
        return GateDecision.allow()
    if is_franchise_registration_request(ctx.path, ctx.method):
        return GateDecision.allow()
    if ctx.path in FRANCHISE_ALLOWED_PATHS:
        return GateDecision.allow()
    if await ctx.has_franchise():
        return GateDecision.allow()
    return GateDecision.redirect(
        FRANCHISE_REGISTRATION_REDIRECT,
        flag="requires_franchise_registration",
        message="Franchise registration required",
    )


class GatePipeline:
    """Runs gates in order; the first one that does not allow wins."""

    def __init__(self, gates: Sequence[Gate]):
        self.gates = tuple(gates)

    async def evaluate(self, ctx: GateContext) -> GateDecision:
        if not ctx.authenticated:
            return GateDecision.allow()
        for gate in self.gates:
            decision = await gate(ctx)
            if not decision.allowed:
                return decision
        return GateDecision.allow()


default_pipeline = GatePipeline([onboarding_gate, franchise_registration_gate])
