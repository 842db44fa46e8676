"""
User roles.

A user's role is fixed at creation time and only changes through an
explicit admin action.
"""

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    FRANCHISOR = "franchisor"
    FRANCHISEE = "franchisee"
    SALES = "sales"
    BROKER = "broker"

    @classmethod
    def parse(cls, value: "str | Role | None") -> "Role | None":
        """Return the matching Role, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


ROLE_NAMES: frozenset[str] = frozenset(role.value for role in Role)
