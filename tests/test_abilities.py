"""
Tests for the role ability table, the evaluator and the policy engine.
"""

import pytest

from franchise_hub.core.abilities import (
    AbilityRule,
    ROLE_ABILITY_RULES,
    WILDCARD_RULE,
    can,
    matches,
    parse_rules,
    rules_for,
    serialize_rules,
)
from franchise_hub.core.auth import AbilityPolicyEngine, AuthRegistry, split_permission
from franchise_hub.core.roles import Role


def test_every_role_has_a_rule_set():
    assert set(ROLE_ABILITY_RULES) == set(Role)


def test_admin_gets_only_the_wildcard():
    assert rules_for("admin") == (WILDCARD_RULE,)


def test_sales_rules_are_exact():
    assert serialize_rules(rules_for(Role.SALES)) == [
        {"action": "manage", "subject": "Lead"},
        {"action": "read", "subject": "Task"},
        {"action": "create", "subject": "TechnicalRequest"},
    ]


def test_unknown_role_has_no_rules():
    assert rules_for("janitor") == ()
    assert rules_for(None) == ()


def test_wildcard_allows_anything():
    rules = rules_for(Role.ADMIN)
    assert can(rules, "delete", "Franchise")
    assert can(rules, "approve", "SomethingNew")


def test_exact_match_only():
    broker = rules_for(Role.BROKER)
    assert can(broker, "manage", "Lead")
    # manage does not imply read
    assert not can(broker, "read", "Lead")
    assert not can(broker, "read", "Royalty")


def test_franchisee_can_read_but_not_manage_royalties():
    franchisee = rules_for(Role.FRANCHISEE)
    assert can(franchisee, "read", "Royalty")
    assert not can(franchisee, "manage", "Royalty")


def test_missing_action_or_subject_is_unrestricted_for_can():
    assert can((), None, None)
    assert can((), "read", "")
    assert can((), "", "Task")


def test_matches_never_allows_missing_action_or_subject():
    assert not matches(rules_for(Role.ADMIN), None, "Task")
    assert not matches(rules_for(Role.ADMIN), "read", None)


def test_parse_rules_round_trips_wire_form():
    rules = rules_for(Role.FRANCHISOR)
    assert parse_rules(serialize_rules(rules)) == rules


def test_parse_rules_accepts_none():
    assert parse_rules(None) == ()


@pytest.mark.parametrize("payload", [
    [{"action": "read"}],
    [{"action": "read", "subject": 3}],
    [{"action": "", "subject": "Task"}],
    ["read:Task"],
])
def test_parse_rules_rejects_malformed_entries(payload):
    with pytest.raises(ValueError):
        parse_rules(payload)


def test_rule_wildcard_flag():
    assert AbilityRule("manage", "all").is_wildcard
    assert not AbilityRule("manage", "Lead").is_wildcard


def test_split_permission():
    assert split_permission("read:Royalty") == ("read", "Royalty")
    assert split_permission("read") == ("read", "")


# ============ Policy engine ============


class Actor:
    def __init__(self, role):
        self.role = role


def test_ability_engine_is_registered():
    assert AuthRegistry.has_policy_engine("ability")
    assert isinstance(AuthRegistry.get_policy_engine("ability"), AbilityPolicyEngine)


@pytest.mark.asyncio
async def test_engine_allows_held_ability():
    engine = AbilityPolicyEngine()
    decision = await engine.evaluate(Actor("franchisor"), "manage:Franchise")
    assert decision.allowed


@pytest.mark.asyncio
async def test_engine_denies_missing_ability():
    engine = AbilityPolicyEngine()
    decision = await engine.evaluate(Actor("sales"), "read:Royalty")
    assert not decision.allowed
    assert "read:Royalty" in decision.reason


@pytest.mark.asyncio
async def test_engine_denies_malformed_permission():
    engine = AbilityPolicyEngine()
    decision = await engine.evaluate(Actor("admin"), "read")
    assert not decision.allowed


@pytest.mark.asyncio
async def test_engine_denies_without_actor():
    engine = AbilityPolicyEngine()
    assert not (await engine.evaluate(None, "read:Task")).allowed


@pytest.mark.asyncio
async def test_engine_permissions_listing():
    engine = AbilityPolicyEngine()
    permissions = await engine.get_permissions(Actor("sales"))
    assert permissions == {"manage:Lead", "read:Task", "create:TechnicalRequest"}
    assert await engine.has_permission(Actor("admin"), "update:Anything")


@pytest.mark.asyncio
async def test_authorization_service_require():
    from franchise_hub.core.auth import AuthorizationService
    from franchise_hub.core.errors import Forbidden

    auth = AuthorizationService(Actor("franchisee"), AbilityPolicyEngine())

    await auth.require("read:Royalty")
    assert await auth.can("read:Task")
    assert not await auth.can("manage:Royalty")
    with pytest.raises(Forbidden) as exc_info:
        await auth.require("manage:Royalty")
    assert exc_info.value.message == "Missing ability: manage:Royalty"


def test_unknown_policy_engine():
    with pytest.raises(ValueError):
        AuthRegistry.get_policy_engine("nope")
    assert "ability" in AuthRegistry.list_policy_engines()
