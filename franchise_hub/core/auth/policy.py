"""
Ability policy engine (default).

Server-side enforcement of the role ability table. Permissions are
written "<action>:<Subject>", e.g. "read:Royalty".

Usage:
    AUTH_POLICY_ENGINE=ability

    engine = AuthRegistry.get_policy_engine("ability")
    decision = await engine.evaluate(user, "manage:Franchise")
"""

from typing import Any

import structlog

from franchise_hub.core.abilities.evaluator import matches
from franchise_hub.core.abilities.rules import AbilityRule, AbilityRuleSet, rules_for

from .interfaces import PolicyEngine, PolicyDecision
from .registry import AuthRegistry

logger = structlog.get_logger()


def split_permission(permission: str) -> tuple[str, str]:
    """'read:Royalty' -> ('read', 'Royalty'). Missing parts come back empty."""
    action, _, subject = permission.partition(":")
    return action.strip(), subject.strip()


def permission_string(rule: AbilityRule) -> str:
    return f"{rule.action}:{rule.subject}"


@AuthRegistry.policy_engine("ability")
class AbilityPolicyEngine(PolicyEngine):
    """
    Evaluates permissions against the actor's role rules.

    Unlike the lenient client-side can(), a permission without an action
    or subject is denied here.

    Configuration:
        role_field: Attribute on the actor holding the role name
    """

    def __init__(self, role_field: str = "role"):
        self.role_field = role_field

    def rules_for_actor(self, actor: Any) -> AbilityRuleSet:
        return rules_for(getattr(actor, self.role_field, None))

    async def evaluate(
        self,
        actor: Any,
        permission: str,
        context: dict[str, Any] | None = None,
    ) -> PolicyDecision:
        if actor is None:
            return PolicyDecision.deny(permission, "Authentication required")

        action, subject = split_permission(permission)
        if not action or not subject:
            return PolicyDecision.deny(permission, f"Malformed permission: {permission!r}")

        if matches(self.rules_for_actor(actor), action, subject):
            return PolicyDecision.allow(permission)

        logger.info(
            "Ability denied",
            role=getattr(actor, self.role_field, None),
            permission=permission,
        )
        return PolicyDecision.deny(permission, f"Missing ability: {permission}")

    async def get_permissions(self, actor: Any) -> set[str]:
        return {permission_string(rule) for rule in self.rules_for_actor(actor)}
