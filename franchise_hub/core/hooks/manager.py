"""
Account and franchise lifecycle events.

Services fire an event once the state change it describes has been made;
handlers (audit trails, notifications) subscribe by name:

    @hooks.on("auth.locked")
    async def alert_security(user: User, locked_until: datetime):
        ...

    await hooks.trigger("auth.locked", user=user, locked_until=until)

Events and their keyword arguments:
- auth.login: user
- auth.failed: email, user (None for unknown emails), attempts (known users only)
- auth.locked: user, locked_until
- auth.logout: user
- user.created: user
- user.role_changed: user, previous_role
- user.unlocked: user
- onboarding.completed: user
- franchise.registered: user, franchise

A handler that raises is logged and recorded on the HookResult; the
remaining handlers still run and the caller never sees the error.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Awaitable, Callable, ParamSpec, TypeVar

import structlog

logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")

Handler = Callable[..., Awaitable[Any]]


class HookPriority(IntEnum):
    """Lower values run first."""
    FIRST = 0
    NORMAL = 50
    LAST = 100


@dataclass
class Hook:
    event: str
    handler: Handler
    priority: HookPriority = HookPriority.NORMAL

    @property
    def label(self) -> str:
        return getattr(self.handler, "__qualname__", repr(self.handler))


@dataclass
class HookResult:
    """What happened when an event was fired."""
    event: str
    results: list[Any] = field(default_factory=list)
    errors: list[tuple[str, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class HookManager:

    def __init__(self):
        self._hooks: dict[str, list[Hook]] = defaultdict(list)

    def register(
        self,
        event: str,
        handler: Handler,
        *,
        priority: HookPriority = HookPriority.NORMAL,
    ) -> Hook:
        hook = Hook(event=event, handler=handler, priority=priority)
        handlers = self._hooks[event]
        handlers.append(hook)
        # Stable sort: equal priorities keep registration order
        handlers.sort(key=lambda h: h.priority)
        return hook

    def unregister(self, event: str, handler: Handler) -> bool:
        handlers = self._hooks.get(event, [])
        remaining = [hook for hook in handlers if hook.handler is not handler]
        if len(remaining) == len(handlers):
            return False
        self._hooks[event] = remaining
        return True

    def on(
        self,
        event: str,
        *,
        priority: HookPriority = HookPriority.NORMAL,
    ) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
        """Decorator form of register()."""
        def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
            self.register(event, func, priority=priority)
            return func
        return decorator

    async def trigger(self, event: str, **kwargs: Any) -> HookResult:
        """Run the handlers for `event` in priority order."""
        outcome = HookResult(event=event)

        for hook in tuple(self._hooks.get(event, ())):
            try:
                outcome.results.append(await hook.handler(**kwargs))
            except Exception as e:
                outcome.errors.append((hook.label, e))
                logger.error(
                    "Hook handler failed",
                    hook_event=event,
                    handler=hook.label,
                    error=str(e),
                )

        return outcome

    def has_hooks(self, event: str) -> bool:
        return bool(self._hooks.get(event))

    def clear(self, event: str | None = None) -> None:
        if event is None:
            self._hooks.clear()
        else:
            self._hooks.pop(event, None)


hooks = HookManager()
