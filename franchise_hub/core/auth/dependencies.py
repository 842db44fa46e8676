"""
FastAPI dependencies for authorization.

Usage:
    from franchise_hub.core.auth import CurrentUser, AdminUser, Authorize

    @router.get("/protected")
    async def handler(user: CurrentUser):
        ...

    @router.get("/royalties", dependencies=[Depends(require_ability("read", "Royalty"))])
    async def handler(user: CurrentUser):
        ...

    @router.post("/franchises")
    async def handler(user: Annotated[User, Depends(require_role(Role.FRANCHISOR))]):
        ...
"""

from typing import Annotated, Callable, Awaitable
from functools import lru_cache

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_hub.core.config import settings
from franchise_hub.core.errors import Forbidden, Unauthorized
from franchise_hub.core.roles import Role
from franchise_hub.models.user import User
from franchise_hub.services.user import UserService
from franchise_hub.api.dependencies.database import get_db

from .service import AuthorizationService
from .interfaces import PolicyEngine
from .registry import AuthRegistry

# Import to register default implementations
from . import policy  # noqa: F401


oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_prefix}/auth/login",
    auto_error=False,
)


# ============================================================
# COMPONENT FACTORIES
# ============================================================

@lru_cache
def get_policy_engine() -> PolicyEngine:
    """
    Get configured policy engine.

    Reads from AUTH_POLICY_ENGINE environment variable.
    Default: "ability" (role ability table)
    """
    return AuthRegistry.get_policy_engine(settings.auth.policy_engine)


# ============================================================
# USER DEPENDENCIES
# ============================================================

async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        Unauthorized: If not authenticated
    """
    if not token:
        raise Unauthorized()

    try:
        payload = jwt.decode(
            token,
            settings.auth.secret_key,
            algorithms=[settings.auth.algorithm],
        )
    except JWTError:
        raise Unauthorized("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid token")

    user = await UserService(db).get_by_id(user_id)
    if not user:
        raise Unauthorized("User not found")

    if not user.is_active:
        raise Unauthorized("User is inactive")

    return user


async def require_admin_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Require current user to be admin.

    Raises:
        Forbidden: If user is not admin
    """
    if not current_user.is_admin:
        raise Forbidden("Admin access required")
    return current_user


def require_role(*roles: Role, admin_bypass: bool = True) -> Callable[..., Awaitable[User]]:
    """
    Dependency factory: the user must hold one of `roles`.

    Admins pass every role check unless `admin_bypass` is False.
    """
    allowed = {role.value for role in roles}

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role in allowed or (admin_bypass and current_user.is_admin):
            return current_user
        raise Forbidden(f"Requires role: {', '.join(sorted(allowed))}")

    return dependency


def require_ability(action: str, subject: str) -> Callable[..., Awaitable[User]]:
    """
    Dependency factory: the user's role rules must permit (action, subject).

    Evaluated by the configured policy engine on every request.
    """
    permission = f"{action}:{subject}"

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        decision = await get_policy_engine().evaluate(current_user, permission)
        if not decision.allowed:
            raise Forbidden(decision.reason or "Permission denied")
        return current_user

    return dependency


# ============================================================
# AUTHORIZATION SERVICE DEPENDENCY
# ============================================================

async def get_authorization_service(
    current_user: User = Depends(get_current_user),
) -> AuthorizationService:
    """
    Get authorization service for current user.

    Usage:
        async def handler(auth: Authorize):
            await auth.require("manage:Royalty")
    """
    return AuthorizationService(
        actor=current_user,
        policy_engine=get_policy_engine(),
    )


# ============================================================
# TYPE ALIASES FOR CLEAN SIGNATURES
# ============================================================

# Authenticated user (required)
CurrentUser = Annotated[User, Depends(get_current_user)]

# Admin user (required)
AdminUser = Annotated[User, Depends(require_admin_user)]

# Authorization service
Authorize = Annotated[AuthorizationService, Depends(get_authorization_service)]
