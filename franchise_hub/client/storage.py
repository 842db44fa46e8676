"""
Client-side persistence for the session.

The web client keeps its session in three cookies: accessToken, userData
and userAbilityRules. CookieStorage stores them in an httpx cookie jar so
a client built on the same jar picks the session back up; MemoryStorage
is the throwaway variant.
"""

import json
from typing import Any, Protocol
from urllib.parse import quote, unquote

import httpx

ACCESS_TOKEN_KEY = "accessToken"
USER_DATA_KEY = "userData"
ABILITY_RULES_KEY = "userAbilityRules"


class Storage(Protocol):
    """Key/value store for JSON-serializable session values."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage."""

    def __init__(self, initial: dict[str, Any] | None = None):
        # Values are held as JSON so callers never share mutable state with the store
        self._data: dict[str, str] = {
            key: json.dumps(value) for key, value in (initial or {}).items()
        }

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class CookieStorage:
    """
    Storage backed by an httpx cookie jar.

    Values are JSON encoded and percent-quoted, the same shape a browser
    cookie composable writes.
    """

    def __init__(
        self,
        cookies: httpx.Cookies | None = None,
        domain: str = "",
        path: str = "/",
    ):
        self.cookies = cookies if cookies is not None else httpx.Cookies()
        self.domain = domain
        self.path = path

    def get(self, key: str) -> Any | None:
        raw = self.cookies.get(key, domain=self.domain or None, path=self.path)
        if raw is None:
            return None
        return json.loads(unquote(raw))

    def set(self, key: str, value: Any) -> None:
        self.delete(key)
        self.cookies.set(key, quote(json.dumps(value)), domain=self.domain, path=self.path)

    def delete(self, key: str) -> None:
        self.cookies.delete(key, domain=self.domain or None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
