"""
Role navigation menus and visibility checks.

Items carry an optional (action, subject). Items without one are always
shown; groups disappear when none of their children are visible.
"""

from dataclasses import dataclass, field, replace
from typing import Union

from franchise_hub.core.roles import Role

from .ability_store import AbilityStore


@dataclass(frozen=True)
class NavLink:
    title: str
    to: str
    icon: str | None = None
    action: str | None = None
    subject: str | None = None


@dataclass(frozen=True)
class NavGroup:
    title: str
    children: tuple["NavItem", ...] = field(default_factory=tuple)
    icon: str | None = None
    action: str | None = None
    subject: str | None = None


NavItem = Union[NavLink, NavGroup]


ADMIN_NAVIGATION: tuple[NavItem, ...] = (
    NavGroup("Admin", icon="tabler-shield-lock", children=(
        NavLink("Dashboard", "admin-dashboard", icon="tabler-dashboard"),
        NavGroup("User Management", icon="tabler-users", children=(
            NavLink("Franchisors", "admin-users-franchisors", icon="tabler-building-store"),
            NavLink("Franchisees", "admin-users-franchisees", icon="tabler-user-check"),
            NavLink("Sales Team", "admin-users-sales", icon="tabler-chart-line"),
        )),
        NavLink("Technical Requests", "admin-technical-requests", icon="tabler-headset"),
    )),
)

FRANCHISOR_NAVIGATION: tuple[NavItem, ...] = (
    NavGroup("Franchisor Dashboard", icon="tabler-building-community", children=(
        NavGroup(
            "Dashboard",
            icon="tabler-building-community",
            action="read",
            subject="FranchisorDashboard",
            children=(
                NavLink("Leads", "franchisor-dashboard-leads", icon="tabler-users",
                        action="read", subject="Lead"),
                NavLink("Operations", "franchisor-dashboard-operations", icon="tabler-list-check",
                        action="read", subject="Unit"),
                NavLink("Development Timeline", "franchisor-dashboard-timeline",
                        icon="tabler-timeline"),
                NavLink("Finance", "franchisor-dashboard-finance", icon="tabler-chart-line",
                        action="read", subject="Revenue"),
            ),
        ),
        NavLink("Sales Associates", "franchisor-sales-associates", icon="tabler-user-star",
                action="manage", subject="User"),
        NavLink("Lead Management", "franchisor-lead-management", icon="tabler-user-search",
                action="manage", subject="Lead"),
        NavLink("Royalty Management", "franchisor-royalty-management", icon="tabler-coins",
                action="manage", subject="Royalty"),
    )),
)

FRANCHISEE_NAVIGATION: tuple[NavItem, ...] = (
    NavGroup("Dashboard", icon="tabler-building-community", children=(
        NavLink("Sales", "franchisee-dashboard-sales", action="read", subject="FranchiseeDashboard"),
        NavLink("Operations", "franchisee-dashboard-operations",
                action="read", subject="FranchiseeDashboard"),
        NavLink("Finance", "franchisee-dashboard-finance", action="read", subject="Revenue"),
    )),
    NavLink("Unit Operation", "franchisee-unit-operation", icon="tabler-buildings",
            action="read", subject="Unit"),
    NavLink("My Tasks", "franchisee-my-tasks", icon="tabler-clipboard-list",
            action="read", subject="Task"),
    NavLink("Performance Management", "franchisee-performance-management",
            icon="tabler-chart-line", action="read", subject="Performance"),
    NavLink("Financial Overview", "franchisee-financial-overview", icon="tabler-chart-pie",
            action="read", subject="Revenue"),
    NavLink("Royalty Management", "franchisee-royalty-management", icon="tabler-coins",
            action="read", subject="Royalty"),
    NavLink("Technical Requests", "franchisee-technical-requests", icon="tabler-headset",
            action="create", subject="TechnicalRequest"),
)

SALES_NAVIGATION: tuple[NavItem, ...] = (
    NavLink("Lead Management", "sales-lead-management", icon="tabler-user-search",
            action="manage", subject="Lead"),
    NavLink("My Tasks", "sales-my-tasks", icon="tabler-clipboard-list",
            action="read", subject="Task"),
    NavLink("Technical Requests", "sales-technical-requests", icon="tabler-headset",
            action="create", subject="TechnicalRequest"),
)

BROKER_NAVIGATION: tuple[NavItem, ...] = (
    NavLink("Assigned Franchises", "broker-assigned-franchises", icon="tabler-building-store",
            action="manage", subject="Franchise"),
    NavLink("Lead Management", "broker-lead-management", icon="tabler-user-search",
            action="manage", subject="Lead"),
    NavLink("My Tasks", "broker-my-tasks", icon="tabler-clipboard-list",
            action="read", subject="Task"),
    NavLink("Technical Requests", "broker-technical-requests", icon="tabler-headset",
            action="create", subject="TechnicalRequest"),
    NavLink("Properties", "broker-properties", icon="tabler-map-pin",
            action="manage", subject="Property"),
)

NAVIGATION: dict[Role, tuple[NavItem, ...]] = {
    Role.ADMIN: ADMIN_NAVIGATION,
    Role.FRANCHISOR: FRANCHISOR_NAVIGATION,
    Role.FRANCHISEE: FRANCHISEE_NAVIGATION,
    Role.SALES: SALES_NAVIGATION,
    Role.BROKER: BROKER_NAVIGATION,
}


def navigation_for(role: Role | str | None) -> tuple[NavItem, ...]:
    """Full (unfiltered) menu for a role; no role means no menu."""
    parsed = Role.parse(role)
    if parsed is None:
        return ()
    return NAVIGATION.get(parsed, ())


def can_view_nav_link(item: NavLink, store: AbilityStore) -> bool:
    return store.can(item.action, item.subject)


def can_view_nav_group(group: NavGroup, store: AbilityStore) -> bool:
    """
    Visible when at least one child is visible and, if the group declares
    its own permission, that permission is held too.
    """
    has_visible_child = any(can_view(child, store) for child in group.children)
    if not (group.action and group.subject):
        return has_visible_child
    return store.can(group.action, group.subject) and has_visible_child


def can_view(item: NavItem, store: AbilityStore) -> bool:
    if isinstance(item, NavGroup):
        return can_view_nav_group(item, store)
    return can_view_nav_link(item, store)


def _prune(items: tuple[NavItem, ...], store: AbilityStore) -> tuple[NavItem, ...]:
    visible: list[NavItem] = []
    for item in items:
        if not can_view(item, store):
            continue
        if isinstance(item, NavGroup):
            item = replace(item, children=_prune(item.children, store))
        visible.append(item)
    return tuple(visible)


def visible_navigation(role: Role | str | None, store: AbilityStore) -> tuple[NavItem, ...]:
    """Menu for `role` with everything the cached rules hide removed."""
    return _prune(navigation_for(role), store)
