"""
Client ability cache.

Mirrors the rule set the server sent at login so the UI can decide what
to show without a round trip. It is only ever a copy: the server checks
every request again.

Usage:
    store = AbilityStore(CookieStorage(client.cookies))
    store.replace(payload["userAbilityRules"])
    if store.can("read", "Royalty"):
        ...
"""

import json
from typing import Any, Callable, Iterable, Mapping

import structlog

from franchise_hub.core.abilities import AbilityRule, AbilityRuleSet, can, parse_rules

from .storage import ABILITY_RULES_KEY, Storage

logger = structlog.get_logger()

Subscriber = Callable[[AbilityRuleSet], None]


class AbilityStore:
    """
    Holds the current rule set and keeps it in `storage`.

    Subscribers are called with the new rule set after every replace or
    clear, in registration order.
    """

    def __init__(self, storage: Storage, key: str = ABILITY_RULES_KEY):
        self.storage = storage
        self.key = key
        self._subscribers: list[Subscriber] = []
        self._rules: AbilityRuleSet = self._load()

    def _load(self) -> AbilityRuleSet:
        try:
            return parse_rules(self.storage.get(self.key))
        except (ValueError, TypeError, json.JSONDecodeError) as e:
            # A corrupt cookie means no cached abilities; the next login rewrites it
            logger.warning("Discarding stored ability rules", key=self.key, error=str(e))
            self.storage.delete(self.key)
            return ()

    @property
    def rules(self) -> AbilityRuleSet:
        return self._rules

    def can(self, action: str | None, subject: str | None) -> bool:
        return can(self._rules, action, subject)

    def cannot(self, action: str | None, subject: str | None) -> bool:
        return not self.can(action, subject)

    def replace(self, rules: Iterable[AbilityRule | Mapping[str, Any]]) -> None:
        """Swap in a new rule set wholesale. Nothing from the old set survives."""
        rules = list(rules)
        if all(isinstance(rule, AbilityRule) for rule in rules):
            new_rules: AbilityRuleSet = tuple(rules)
        else:
            new_rules = parse_rules(rules)

        self._rules = new_rules
        self.storage.set(self.key, [rule.to_dict() for rule in new_rules])
        self._notify()

    def clear(self) -> None:
        self._rules = ()
        self.storage.delete(self.key)
        self._notify()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self._rules)
