"""
HTTP client for the Franchise Hub API.

Keeps the session (token, user data, ability rules) in a Storage so the
UI layer can read it back, and turns the server's gate responses into
GateRedirect exceptions the UI can route on.

Usage:
    async with FranchiseHubClient("https://hub.example.com") as client:
        await client.login("owner@example.com", "Secret123!")
        visible = client.visible_navigation()
        tasks = await client.get("/tasks/mine")
"""

from typing import Any

import httpx
import structlog

from franchise_hub.core.abilities import parse_rules

from .ability_store import AbilityStore
from .navigation import NavItem, visible_navigation
from .storage import ACCESS_TOKEN_KEY, USER_DATA_KEY, CookieStorage, Storage

logger = structlog.get_logger()

DEFAULT_API_PREFIX = "/api/v1"

GATE_FLAGS = ("requires_onboarding", "requires_franchise_registration")


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, payload: dict[str, Any]):
        self.status_code = status_code
        self.payload = payload
        self.message = payload.get("message") or f"HTTP {status_code}"
        super().__init__(self.message)


class GateRedirect(ApiError):
    """The account must finish a setup step first; send the user to `redirect_to`."""

    def __init__(self, status_code: int, payload: dict[str, Any]):
        super().__init__(status_code, payload)
        self.redirect_to: str = payload.get("redirect_to", "/")
        self.flag: str = next(flag for flag in GATE_FLAGS if payload.get(flag))


def raise_for_response(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        payload = response.json()
    except ValueError:
        payload = {"message": response.text}
    if not isinstance(payload, dict):
        payload = {"message": str(payload)}

    if response.status_code == 403 and any(payload.get(flag) for flag in GATE_FLAGS):
        raise GateRedirect(response.status_code, payload)
    raise ApiError(response.status_code, payload)


class FranchiseHubClient:
    """
    Async API client holding one user session.

    Args:
        base_url: Server origin
        storage: Session storage (defaults to cookies in the client's own jar)
        api_prefix: Path prefix of the versioned API
        transport: Optional httpx transport (e.g. ASGITransport in tests)
    """

    def __init__(
        self,
        base_url: str,
        storage: Storage | None = None,
        api_prefix: str = DEFAULT_API_PREFIX,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.api_prefix = "/" + api_prefix.strip("/")
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.storage = storage if storage is not None else CookieStorage(self._http.cookies)
        self.abilities = AbilityStore(self.storage)

    async def __aenter__(self) -> "FranchiseHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ============================================================
    # SESSION
    # ============================================================

    @property
    def access_token(self) -> str | None:
        return self.storage.get(ACCESS_TOKEN_KEY)

    @property
    def user_data(self) -> dict[str, Any] | None:
        return self.storage.get(USER_DATA_KEY)

    @property
    def role(self) -> str | None:
        return (self.user_data or {}).get("role")

    @property
    def is_logged_in(self) -> bool:
        return self.access_token is not None

    def _store_session(self, payload: dict[str, Any]) -> None:
        # Validate before writing anything so a bad payload leaves the old session intact
        rules = parse_rules(payload.get("userAbilityRules", []))
        self.storage.set(ACCESS_TOKEN_KEY, payload["accessToken"])
        self.storage.set(USER_DATA_KEY, payload["userData"])
        self.abilities.replace(rules)

    def _clear_session(self) -> None:
        self.storage.delete(ACCESS_TOKEN_KEY)
        self.storage.delete(USER_DATA_KEY)
        self.abilities.clear()

    # ============================================================
    # REQUESTS
    # ============================================================

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}/{path.lstrip('/')}"

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send an API request with the stored token; returns the decoded body."""
        headers = dict(kwargs.pop("headers", None) or {})
        headers.setdefault("Accept", "application/json")
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        response = await self._http.request(method, self._url(path), headers=headers, **kwargs)
        raise_for_response(response)
        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    # ============================================================
    # AUTH
    # ============================================================

    async def login(self, email: str, password: str, remember: bool = False) -> dict[str, Any]:
        """Log in and replace the cached session, ability rules included."""
        payload = await self.post(
            "/auth/login",
            json={"email": email, "password": password, "remember": remember},
        )
        self._store_session(payload)
        logger.info("Logged in", role=payload["userData"].get("role"))
        return payload

    async def register(self, **data: Any) -> dict[str, Any]:
        payload = await self.post("/auth/register", json=data)
        self._store_session(payload)
        return payload

    async def logout(self) -> None:
        """
        End the session. Local state is cleared even if the server call fails,
        the error is re-raised afterwards.
        """
        try:
            if self.is_logged_in:
                await self.post("/auth/logout")
        finally:
            self._clear_session()

    async def refresh_abilities(self) -> None:
        payload = await self.get("/auth/abilities")
        self.abilities.replace(payload["userAbilityRules"])

    # ============================================================
    # UI HELPERS
    # ============================================================

    def can(self, action: str | None, subject: str | None) -> bool:
        return self.abilities.can(action, subject)

    def visible_navigation(self) -> tuple[NavItem, ...]:
        return visible_navigation(self.role, self.abilities)
