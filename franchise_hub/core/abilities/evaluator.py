"""
Ability evaluator.

`can()` answers whether a rule set permits an (action, subject) pair:

1. `manage` on `all` permits everything.
2. Otherwise the exact pair must be present. `manage Lead` does not
   imply `read Lead`.

An action or subject of None/"" counts as "no permission configured" and is
allowed. Navigation items without ACL metadata rely on this. It is a
display convenience, not an access check: server routes go through
AbilityPolicyEngine, which denies in that case.
"""

from typing import Iterable

from .rules import AbilityRule, WILDCARD_RULE


def is_unrestricted(action: str | None, subject: str | None) -> bool:
    """True when no permission was declared."""
    return not action or not subject


def has_wildcard(rules: Iterable[AbilityRule]) -> bool:
    return any(rule.is_wildcard for rule in rules)


def matches(rules: Iterable[AbilityRule], action: str, subject: str) -> bool:
    """Strict check: wildcard or exact pair. Missing action/subject never matches."""
    if is_unrestricted(action, subject):
        return False
    rule_set = frozenset(rules)
    return WILDCARD_RULE in rule_set or AbilityRule(action, subject) in rule_set


def can(rules: Iterable[AbilityRule], action: str | None, subject: str | None) -> bool:
    """Lenient check used for navigation and UI visibility."""
    if is_unrestricted(action, subject):
        return True
    return matches(rules, action, subject)
