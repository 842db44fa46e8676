"""
Application error types.

Services raise these; the exception handlers registered in main.py turn
them into JSON responses of the form:

    {"message": "...", "error": "<code>", **extra}

Usage:
    raise InvalidCredentials()
    raise AccountLocked(retry_after=420)
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "bad_request"
    message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        *,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message or self.message
        self.extra = extra or {}
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "error": self.error, **self.extra}


# ============================================================
# AUTHENTICATION
# ============================================================

class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "invalid_credentials"
    message = "Invalid credentials"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"
    message = "Not authenticated"

    def __init__(self, message: str | None = None, **kwargs: Any):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class AccountLocked(AppError):
    """Raised while a user's lockout window is still open."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "account_locked"

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            "Your account has been temporarily locked due to multiple failed "
            f"login attempts. Please try again in {retry_after} seconds.",
            extra={"retry_after": retry_after},
            headers={"Retry-After": str(retry_after)},
        )


class RateLimited(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "too_many_requests"
    message = "Too many requests"

    def __init__(self, retry_after: int):
        super().__init__(
            extra={"retry_after": retry_after},
            headers={"Retry-After": str(retry_after)},
        )


# ============================================================
# AUTHORIZATION
# ============================================================

class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"
    message = "Permission denied"


class OnboardingRequired(Forbidden):
    error = "onboarding_required"
    message = "Profile completion required"

    def __init__(self, redirect_to: str = "/onboarding", message: str | None = None):
        super().__init__(
            message,
            extra={"requires_onboarding": True, "redirect_to": redirect_to},
        )


class FranchiseRegistrationRequired(Forbidden):
    error = "franchise_registration_required"
    message = "Franchise registration required"

    def __init__(
        self,
        redirect_to: str = "/franchisor/franchise-registration",
        message: str | None = None,
    ):
        super().__init__(
            message,
            extra={"requires_franchise_registration": True, "redirect_to": redirect_to},
        )


# ============================================================
# RESOURCES
# ============================================================

class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    message = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "conflict"
    message = "Resource already exists"


class ValidationFailed(AppError):
    """Field-level validation failure (422)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "validation_failed"
    message = "The given data was invalid."

    def __init__(self, errors: dict[str, list[str]], message: str | None = None):
        self.errors = errors
        super().__init__(message, extra={"errors": errors})


def validation_errors_by_field(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """
    Group pydantic error entries by field name.

    ("body", "email") -> "email"; nested locations are joined with dots.
    """
    grouped: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "non_field_errors"
        grouped.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return grouped


# ============================================================
# HANDLERS
# ============================================================

def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Attach JSON renderers for AppError, validation errors and the catch-all."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        failure = ValidationFailed(validation_errors_by_field(exc.errors()))
        return JSONResponse(status_code=failure.status_code, content=failure.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": str(exc) if debug else "An error occurred",
            },
        )
