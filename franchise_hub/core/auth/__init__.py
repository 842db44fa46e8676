"""
Authorization module.

Level 1: Authenticated / admin users
-----------------------------------
    from franchise_hub.core.auth import CurrentUser, AdminUser

    @router.get("/admin/users")
    async def handler(user: AdminUser):  # 403 if not admin
        ...

Level 2: Role and ability guards
--------------------------------
    @router.get("/royalties", dependencies=[Depends(require_ability("read", "Royalty"))])
    async def handler(user: CurrentUser):
        ...

Level 3: Inline checks
----------------------
    async def handler(auth: Authorize):
        await auth.require("manage:Franchise")

Configuration:
==============
- AUTH_POLICY_ENGINE: "ability" (default)

Extensibility:
==============
    @AuthRegistry.policy_engine("custom")
    class CustomPolicyEngine(PolicyEngine):
        ...
"""

# Core interfaces (for type hints and custom implementations)
from .interfaces import PolicyEngine, PolicyDecision

# Registry (for extending with custom implementations)
from .registry import AuthRegistry

# Service (main facade)
from .service import AuthorizationService

# Dependencies (what you'll use in routes)
from .dependencies import (
    CurrentUser,
    AdminUser,
    Authorize,
    get_current_user,
    require_admin_user,
    require_role,
    require_ability,
    get_authorization_service,
    get_policy_engine,
)

# Default implementation (auto-registered)
from .policy import AbilityPolicyEngine, split_permission

__all__ = [
    "PolicyEngine",
    "PolicyDecision",
    "AuthRegistry",
    "AuthorizationService",
    "CurrentUser",
    "AdminUser",
    "Authorize",
    "get_current_user",
    "require_admin_user",
    "require_role",
    "require_ability",
    "get_authorization_service",
    "get_policy_engine",
    "AbilityPolicyEngine",
    "split_permission",
]
