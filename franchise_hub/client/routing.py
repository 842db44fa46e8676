"""
Client route guard.
"""

from dataclasses import dataclass
from typing import Sequence

from franchise_hub.core.abilities import matches

from .ability_store import AbilityStore


@dataclass(frozen=True)
class RouteRecord:
    """One entry of a matched route chain, outermost first."""
    name: str
    action: str | None = None
    subject: str | None = None

    @property
    def has_permission(self) -> bool:
        return bool(self.action and self.subject)


def can_navigate(matched: Sequence[RouteRecord], store: AbilityStore) -> bool:
    """
    Decide whether the chain `matched` may be entered.

    1. The innermost route decides when it declares a permission.
    2. A chain with no declared permission anywhere is open.
    3. Otherwise any route in the chain whose permission is held opens it.
    """
    if not matched:
        return True

    target = matched[-1]
    if target.has_permission:
        return matches(store.rules, target.action, target.subject)

    guarded = [route for route in matched if route.has_permission]
    if not guarded:
        return True

    return any(matches(store.rules, route.action, route.subject) for route in guarded)
