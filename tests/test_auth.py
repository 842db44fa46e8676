"""
Tests for authentication endpoints and the login lockout policy.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from franchise_hub.core.abilities import rules_for, serialize_rules
from franchise_hub.core.config import settings
from franchise_hub.core.hooks.manager import hooks
from franchise_hub.core.roles import Role
from franchise_hub.utils.timezone import utc_now, to_utc

from conftest import DEFAULT_PASSWORD

LOGIN_URL = "/api/v1/auth/login"
REGISTER_URL = "/api/v1/auth/register"


async def login(client: AsyncClient, email: str, password: str = DEFAULT_PASSWORD, **extra):
    return await client.post(LOGIN_URL, json={"email": email, "password": password, **extra})


# ============ Login ============


@pytest.mark.asyncio
async def test_login_returns_token_user_data_and_rules(client: AsyncClient, test_user):
    response = await login(client, test_user.email)

    assert response.status_code == 200
    data = response.json()
    assert data["accessToken"]
    assert data["userData"] == {
        "id": str(test_user.id),
        "fullName": test_user.name,
        "username": test_user.email,
        "avatar": None,
        "email": test_user.email,
        "role": "franchisee",
        "status": "active",
        "nationality": None,
    }
    assert data["userAbilityRules"] == serialize_rules(rules_for(Role.FRANCHISEE))
    assert data["requiresFranchiseRegistration"] is False
    assert "password_hash" not in data["userData"]


@pytest.mark.asyncio
async def test_sales_login_gets_exactly_three_rules(client: AsyncClient, user_factory):
    user = await user_factory.create(role=Role.SALES)

    response = await login(client, user.email)

    assert response.status_code == 200
    assert response.json()["userAbilityRules"] == [
        {"action": "manage", "subject": "Lead"},
        {"action": "read", "subject": "Task"},
        {"action": "create", "subject": "TechnicalRequest"},
    ]


@pytest.mark.asyncio
async def test_admin_login_gets_wildcard(client: AsyncClient, admin_user):
    response = await login(client, admin_user.email)
    assert response.json()["userAbilityRules"] == [{"action": "manage", "subject": "all"}]


@pytest.mark.asyncio
async def test_franchisor_without_franchise_must_register_one(client: AsyncClient, user_factory):
    user = await user_factory.create(role=Role.FRANCHISOR)

    response = await login(client, user.email)

    assert response.status_code == 200
    assert response.json()["requiresFranchiseRegistration"] is True


@pytest.mark.asyncio
async def test_franchisor_with_franchise_is_not_flagged(client: AsyncClient, franchisor):
    response = await login(client, franchisor.email)
    assert response.json()["requiresFranchiseRegistration"] is False


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient):
    response = await login(client, "nobody@example.com")

    assert response.status_code == 401
    assert response.json()["error"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, user_factory):
    user = await user_factory.create(is_active=False)
    response = await login(client, user.email)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_validation_error_shape(client: AsyncClient):
    response = await client.post(LOGIN_URL, json={"email": "not-an-email"})

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "The given data was invalid."
    assert "email" in body["errors"]
    assert "password" in body["errors"]


@pytest.mark.asyncio
async def test_login_rejects_short_password(client: AsyncClient, test_user):
    response = await login(client, test_user.email, "abc12")

    assert response.status_code == 422
    assert "password" in response.json()["errors"]
    # Rejected before the credential check, so no failure is recorded
    assert test_user.failed_login_attempts == 0


@pytest.mark.asyncio
async def test_remember_me_extends_token_lifetime(client: AsyncClient, test_user):
    short = (await login(client, test_user.email)).json()["accessToken"]
    long = (await login(client, test_user.email, remember=True)).json()["accessToken"]

    decode = lambda token: jwt.decode(  # noqa: E731
        token, settings.auth.secret_key, algorithms=[settings.auth.algorithm]
    )
    now = utc_now().timestamp()
    assert decode(short)["exp"] - now <= settings.auth.access_token_expire_minutes * 60 + 5
    assert decode(long)["exp"] - now > (settings.auth.remember_token_expire_days - 1) * 86400


# ============ Lockout ============


@pytest.mark.asyncio
async def test_failed_login_increments_counter(client: AsyncClient, test_user):
    response = await login(client, test_user.email, "WrongPass1!")

    assert response.status_code == 401
    assert test_user.failed_login_attempts == 1
    assert test_user.last_failed_login_at is not None
    assert test_user.locked_until is None


@pytest.mark.asyncio
async def test_account_locks_after_max_failures(client: AsyncClient, test_user):
    for _ in range(settings.auth.max_failed_login_attempts):
        response = await login(client, test_user.email, "WrongPass1!")
        assert response.status_code == 401

    assert test_user.is_locked()
    assert test_user.failed_login_attempts == settings.auth.max_failed_login_attempts
    assert test_user.locked_until is not None

    # The correct password is refused once the lock is in place
    response = await login(client, test_user.email)
    assert response.status_code == 429
    assert response.json()["error"] == "account_locked"


@pytest.mark.asyncio
async def test_locked_account_rejects_correct_password(client: AsyncClient, user_factory):
    user = await user_factory.create(
        failed_login_attempts=5,
        locked_until=utc_now() + timedelta(minutes=10),
    )

    response = await login(client, user.email)

    assert response.status_code == 429
    body = response.json()
    assert "temporarily locked" in body["message"]
    assert body["error"] == "account_locked"
    assert 0 < body["retry_after"] <= 600
    assert response.headers["Retry-After"] == str(body["retry_after"])
    # A refused attempt while locked does not touch the counter
    assert user.failed_login_attempts == 5


@pytest.mark.asyncio
async def test_expired_lock_allows_login_and_resets(client: AsyncClient, user_factory):
    user = await user_factory.create(
        failed_login_attempts=5,
        locked_until=utc_now() - timedelta(minutes=1),
    )

    response = await login(client, user.email)

    assert response.status_code == 200
    assert user.failed_login_attempts == 0
    assert user.locked_until is None


@pytest.mark.asyncio
async def test_expired_lock_then_wrong_password_starts_counting_again(
    client: AsyncClient, user_factory
):
    user = await user_factory.create(
        failed_login_attempts=5,
        locked_until=utc_now() - timedelta(seconds=1),
    )

    response = await login(client, user.email, "WrongPass1!")

    assert response.status_code == 401
    assert user.failed_login_attempts == 1
    assert not user.is_locked()


@pytest.mark.asyncio
async def test_successful_login_resets_counter(client: AsyncClient, user_factory):
    user = await user_factory.create(failed_login_attempts=3)

    response = await login(client, user.email)

    assert response.status_code == 200
    assert user.failed_login_attempts == 0
    assert to_utc(user.last_login_at) <= utc_now()


@pytest.mark.asyncio
async def test_lock_triggers_hook(client: AsyncClient, user_factory):
    user = await user_factory.create(failed_login_attempts=4)
    locked = []

    @hooks.on("auth.locked")
    async def record(user, locked_until):
        locked.append((user.email, locked_until))

    await login(client, user.email, "WrongPass1!")

    assert len(locked) == 1
    assert locked[0][0] == user.email


# ============ Registration ============


@pytest.mark.asyncio
async def test_register_franchisor(client: AsyncClient):
    response = await client.post(
        REGISTER_URL,
        json={
            "name": "New Owner",
            "email": "new.owner@example.com",
            "password": "Str0ng!Pass",
            "password_confirmation": "Str0ng!Pass",
            "role": "franchisor",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["userData"]["email"] == "new.owner@example.com"
    assert data["userData"]["role"] == "franchisor"
    assert data["userAbilityRules"] == serialize_rules(rules_for(Role.FRANCHISOR))
    assert data["requiresFranchiseRegistration"] is True


@pytest.mark.asyncio
async def test_registered_user_can_log_in(client: AsyncClient):
    await client.post(
        REGISTER_URL,
        json={
            "name": "Broker",
            "email": "broker@example.com",
            "password": "Str0ng!Pass",
            "password_confirmation": "Str0ng!Pass",
            "role": "broker",
        },
    )

    response = await login(client, "broker@example.com", "Str0ng!Pass")

    assert response.status_code == 200
    assert response.json()["userData"]["role"] == "broker"


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "NoDigits!!", "NoSpecial123"])
async def test_register_rejects_weak_password(client: AsyncClient, password):
    response = await client.post(
        REGISTER_URL,
        json={
            "name": "X",
            "email": "weak@example.com",
            "password": password,
            "password_confirmation": password,
            "role": "franchisor",
        },
    )

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert "password" in errors
    # A matching confirmation is not reported as a mismatch
    assert "password_confirmation" not in errors


@pytest.mark.asyncio
async def test_register_requires_password_confirmation(client: AsyncClient):
    response = await client.post(
        REGISTER_URL,
        json={"name": "X", "email": "noconfirm@example.com", "password": "Str0ng!Pass"},
    )

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert "password_confirmation" in errors
    assert "password" not in errors


@pytest.mark.asyncio
async def test_register_rejects_mismatched_confirmation(client: AsyncClient):
    response = await client.post(
        REGISTER_URL,
        json={
            "name": "X",
            "email": "mismatch@example.com",
            "password": "Str0ng!Pass",
            "password_confirmation": "Str0ng!Pass2",
        },
    )

    assert response.status_code == 422
    messages = response.json()["errors"]["password_confirmation"]
    assert any("confirmation does not match" in m for m in messages)


@pytest.mark.asyncio
async def test_register_rejects_non_self_service_role(client: AsyncClient):
    response = await client.post(
        REGISTER_URL,
        json={
            "name": "X",
            "email": "x@example.com",
            "password": "Str0ng!Pass",
            "password_confirmation": "Str0ng!Pass",
            "role": "admin",
        },
    )

    assert response.status_code == 422
    assert "role" in response.json()["errors"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    response = await client.post(
        REGISTER_URL,
        json={
            "name": "X",
            "email": test_user.email,
            "password": "Str0ng!Pass",
            "password_confirmation": "Str0ng!Pass",
            "role": "broker",
        },
    )

    assert response.status_code == 409
    assert "already been taken" in response.json()["message"]


# ============ Session endpoints ============


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_profile(client: AsyncClient, test_user, auth_headers):
    response = await client.get("/api/v1/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == test_user.email


@pytest.mark.asyncio
async def test_abilities_endpoint_follows_current_role(client: AsyncClient, user_factory, headers_for):
    user = await user_factory.create(role=Role.BROKER)

    response = await client.get("/api/v1/auth/abilities", headers=headers_for(user))

    assert response.status_code == 200
    assert response.json() == {
        "role": "broker",
        "userAbilityRules": serialize_rules(rules_for(Role.BROKER)),
        "permissions": sorted(
            f"{rule.action}:{rule.subject}" for rule in rules_for(Role.BROKER)
        ),
    }


@pytest.mark.asyncio
async def test_logout_triggers_hook(client: AsyncClient, test_user, auth_headers):
    seen = []

    @hooks.on("auth.logout")
    async def record(user):
        seen.append(user.id)

    response = await client.post("/api/v1/auth/logout", headers=auth_headers)

    assert response.status_code == 200
    assert seen == [test_user.id]
