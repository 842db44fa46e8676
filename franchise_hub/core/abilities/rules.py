"""
Ability rule table.

Each role maps to one fixed set of (action, subject) rules. The table lives
on the server only; clients receive their role's rules in the login
response and must treat them as a cache, never as a source.

Usage:
    rules = rules_for("franchisee")
    payload = serialize_rules(rules)   # [{"action": "read", "subject": "Unit"}, ...]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from franchise_hub.core.roles import Role


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"


# Subject that, together with MANAGE, grants everything
ALL_SUBJECTS = "all"


@dataclass(frozen=True)
class AbilityRule:
    """Single permission: `action` may be performed on `subject`."""

    action: str
    subject: str

    @property
    def is_wildcard(self) -> bool:
        return self.action == Action.MANAGE.value and self.subject == ALL_SUBJECTS

    def to_dict(self) -> dict[str, str]:
        return {"action": self.action, "subject": self.subject}


AbilityRuleSet = tuple[AbilityRule, ...]

WILDCARD_RULE = AbilityRule(Action.MANAGE.value, ALL_SUBJECTS)


def _rules(*pairs: tuple[Action, str]) -> AbilityRuleSet:
    return tuple(AbilityRule(action.value, subject) for action, subject in pairs)


ROLE_ABILITY_RULES: Mapping[Role, AbilityRuleSet] = {
    Role.ADMIN: (WILDCARD_RULE,),
    Role.FRANCHISOR: _rules(
        (Action.READ, "FranchisorDashboard"),
        (Action.READ, "Lead"),
        (Action.MANAGE, "Lead"),
        (Action.MANAGE, "User"),
        (Action.READ, "Franchise"),
        (Action.MANAGE, "Franchise"),
        (Action.READ, "Unit"),
        (Action.MANAGE, "Task"),
        (Action.READ, "Performance"),
        (Action.READ, "Revenue"),
        (Action.MANAGE, "Royalty"),
        (Action.CREATE, "TechnicalRequest"),
    ),
    Role.FRANCHISEE: _rules(
        (Action.READ, "FranchiseeDashboard"),
        (Action.READ, "Unit"),
        (Action.READ, "Task"),
        (Action.READ, "Performance"),
        (Action.READ, "Revenue"),
        (Action.READ, "Royalty"),
        (Action.CREATE, "TechnicalRequest"),
    ),
    Role.SALES: _rules(
        (Action.MANAGE, "Lead"),
        (Action.READ, "Task"),
        (Action.CREATE, "TechnicalRequest"),
    ),
    Role.BROKER: _rules(
        (Action.READ, "Dashboard"),
        (Action.READ, "BrokerDashboard"),
        (Action.MANAGE, "Brokerage"),
        (Action.MANAGE, "Lead"),
        (Action.MANAGE, "LeadManagement"),
        (Action.READ, "Task"),
        (Action.UPDATE, "Task"),
        (Action.READ, "TechnicalRequest"),
        (Action.CREATE, "TechnicalRequest"),
        (Action.UPDATE, "TechnicalRequest"),
        (Action.READ, "Statistics"),
        (Action.MANAGE, "Note"),
        (Action.MANAGE, "Property"),
        (Action.MANAGE, "Franchise"),
    ),
}


def rules_for(role: Role | str | None) -> AbilityRuleSet:
    """Rule set for a role. Unknown roles get an empty set (deny everything)."""
    parsed = Role.parse(role)
    if parsed is None:
        return ()
    return ROLE_ABILITY_RULES.get(parsed, ())


def serialize_rules(rules: Iterable[AbilityRule]) -> list[dict[str, str]]:
    """Wire form sent to clients as `userAbilityRules`."""
    return [rule.to_dict() for rule in rules]


def parse_rules(payload: Iterable[Mapping[str, Any]] | None) -> AbilityRuleSet:
    """
    Rebuild a rule set from its wire form.

    Raises:
        ValueError: if an entry is not an {action, subject} pair of strings
    """
    if payload is None:
        return ()

    rules: list[AbilityRule] = []
    for entry in payload:
        if not isinstance(entry, Mapping):
            raise ValueError(f"Ability rule must be an object, got {type(entry).__name__}")
        action = entry.get("action")
        subject = entry.get("subject")
        if not isinstance(action, str) or not isinstance(subject, str) or not action or not subject:
            raise ValueError(f"Ability rule needs string 'action' and 'subject': {dict(entry)!r}")
        rules.append(AbilityRule(action, subject))
    return tuple(rules)
