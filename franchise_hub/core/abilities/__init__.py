"""
Role abilities.

- rules: the role -> (action, subject) table and its wire format
- evaluator: can() / matches()

Server routes enforce these through core.auth.policy.AbilityPolicyEngine.
"""

from .rules import (
    Action,
    AbilityRule,
    AbilityRuleSet,
    ALL_SUBJECTS,
    WILDCARD_RULE,
    ROLE_ABILITY_RULES,
    rules_for,
    serialize_rules,
    parse_rules,
)
from .evaluator import can, matches, has_wildcard, is_unrestricted

__all__ = [
    "Action",
    "AbilityRule",
    "AbilityRuleSet",
    "ALL_SUBJECTS",
    "WILDCARD_RULE",
    "ROLE_ABILITY_RULES",
    "rules_for",
    "serialize_rules",
    "parse_rules",
    "can",
    "matches",
    "has_wildcard",
    "is_unrestricted",
]
