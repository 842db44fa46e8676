"""
Python client for the Franchise Hub API.

Mirrors what the web frontend does with a session: caches the ability
rules from login, filters navigation and guards routes with them, and
surfaces onboarding/registration gates as GateRedirect.
"""

from .storage import (
    ACCESS_TOKEN_KEY,
    USER_DATA_KEY,
    ABILITY_RULES_KEY,
    Storage,
    MemoryStorage,
    CookieStorage,
)
from .ability_store import AbilityStore
from .navigation import (
    NavLink,
    NavGroup,
    NavItem,
    navigation_for,
    can_view,
    can_view_nav_link,
    can_view_nav_group,
    visible_navigation,
)
from .routing import RouteRecord, can_navigate
from .api import FranchiseHubClient, ApiError, GateRedirect

__all__ = [
    "ACCESS_TOKEN_KEY",
    "USER_DATA_KEY",
    "ABILITY_RULES_KEY",
    "Storage",
    "MemoryStorage",
    "CookieStorage",
    "AbilityStore",
    "NavLink",
    "NavGroup",
    "NavItem",
    "navigation_for",
    "can_view",
    "can_view_nav_link",
    "can_view_nav_group",
    "visible_navigation",
    "RouteRecord",
    "can_navigate",
    "FranchiseHubClient",
    "ApiError",
    "GateRedirect",
]
