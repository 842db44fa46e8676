"""
Inline authorization checks for route handlers.

Usage:
    async def handler(auth: Authorize):
        await auth.require("manage:Franchise")
        if await auth.can("read:Royalty"):
            ...
"""

from typing import Any

from franchise_hub.core.errors import Forbidden

from .interfaces import PolicyEngine, PolicyDecision


class AuthorizationService:
    """The current user bound to the configured policy engine."""

    def __init__(self, actor: Any, policy_engine: PolicyEngine):
        self.actor = actor
        self.policy_engine = policy_engine

    async def authorize(self, permission: str, **context: Any) -> PolicyDecision:
        return await self.policy_engine.evaluate(self.actor, permission, context)

    async def require(self, permission: str, **context: Any) -> None:
        """
        Raises:
            Forbidden: the actor lacks `permission`
        """
        decision = await self.authorize(permission, **context)
        if not decision.allowed:
            raise Forbidden(decision.reason or "Permission denied")

    async def can(self, permission: str, **context: Any) -> bool:
        return (await self.authorize(permission, **context)).allowed

    async def get_permissions(self) -> set[str]:
        return await self.policy_engine.get_permissions(self.actor)
