"""
Policy engine registry.

Engines register under a name; AUTH_POLICY_ENGINE picks the one the
route dependencies use.

Usage:
    @AuthRegistry.policy_engine("audited")
    class AuditedPolicyEngine(AbilityPolicyEngine):
        ...

    engine = AuthRegistry.get_policy_engine("audited")
"""

from typing import Any, Callable, Type

from .interfaces import PolicyEngine


class AuthRegistry:
    """Name -> PolicyEngine class."""

    _policy_engines: dict[str, Type[PolicyEngine]] = {}

    @classmethod
    def policy_engine(cls, name: str) -> Callable[[Type[PolicyEngine]], Type[PolicyEngine]]:
        """Class decorator registering an engine under `name`."""
        def decorator(engine_class: Type[PolicyEngine]) -> Type[PolicyEngine]:
            cls._policy_engines[name] = engine_class
            return engine_class
        return decorator

    @classmethod
    def get_policy_engine(cls, name: str, **options: Any) -> PolicyEngine:
        """
        Instantiate the engine registered as `name`.

        Raises:
            ValueError: nothing is registered under that name
        """
        try:
            engine_class = cls._policy_engines[name]
        except KeyError:
            raise ValueError(
                f"Unknown policy engine {name!r}; registered: {sorted(cls._policy_engines)}"
            ) from None
        return engine_class(**options)

    @classmethod
    def list_policy_engines(cls) -> list[str]:
        return sorted(cls._policy_engines)

    @classmethod
    def has_policy_engine(cls, name: str) -> bool:
        return name in cls._policy_engines
