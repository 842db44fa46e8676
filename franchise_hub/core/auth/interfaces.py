"""
Authorization interfaces.

Routes and services talk to a PolicyEngine, never to the ability table
directly. Permissions are strings of the form "<action>:<Subject>".
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PolicyDecision:
    """
    Outcome of checking one permission.

    Attributes:
        allowed: Whether the actor holds the permission
        permission: The permission that was checked
        reason: Explanation used in 403 bodies and logs
    """
    allowed: bool
    permission: str = ""
    reason: str | None = None

    @classmethod
    def allow(cls, permission: str) -> "PolicyDecision":
        return cls(allowed=True, permission=permission)

    @classmethod
    def deny(cls, permission: str, reason: str = "Permission denied") -> "PolicyDecision":
        return cls(allowed=False, permission=permission, reason=reason)


class PolicyEngine(ABC):
    """
    Decides whether an actor (a User, or anything carrying a role) holds
    a permission.

    Implementations:
    - AbilityPolicyEngine: role ability table (default)
    """

    @abstractmethod
    async def evaluate(
        self,
        actor: Any,
        permission: str,
        context: dict[str, Any] | None = None,
    ) -> PolicyDecision:
        """
        Check `permission` for `actor`.

        Args:
            actor: The user performing the action, or None when anonymous
            permission: e.g. "read:Royalty"
            context: Request details an engine may take into account
        """

    @abstractmethod
    async def get_permissions(self, actor: Any) -> set[str]:
        """Every permission the actor holds, as "<action>:<Subject>" strings."""

    async def has_permission(self, actor: Any, permission: str) -> bool:
        decision = await self.evaluate(actor, permission)
        return decision.allowed
