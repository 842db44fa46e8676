"""
Tests for the Redis sliding-window throttles.
"""

import pytest
from fastapi import FastAPI
from starlette.requests import Request

from franchise_hub.api.dependencies.rate_limit import Throttle, registration_throttle
from franchise_hub.core.errors import RateLimited
from franchise_hub.main import app


class FakePipeline:
    """Queues sorted-set commands and runs them against FakeRedis on execute()."""

    def __init__(self, redis):
        self.redis = redis
        self.commands = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.commands.append((name, args, kwargs))
            return self
        return queue

    async def execute(self):
        return [getattr(self.redis, name)(*args, **kwargs) for name, args, kwargs in self.commands]


class FakeRedis:
    """Just enough of the sorted-set API for the throttle."""

    def __init__(self):
        self.sets: dict[str, dict[str, float]] = {}
        self.ttls: dict[str, int] = {}

    def pipeline(self):
        return FakePipeline(self)

    def zremrangebyscore(self, key, low, high):
        members = self.sets.get(key, {})
        stale = [m for m, score in members.items() if low <= score <= high]
        for member in stale:
            del members[member]
        return len(stale)

    def zadd(self, key, mapping):
        self.sets.setdefault(key, {}).update(mapping)
        return len(mapping)

    def zcard(self, key):
        return len(self.sets.get(key, {}))

    def zrange(self, key, start, end, withscores=False):
        ordered = sorted(self.sets.get(key, {}).items(), key=lambda item: item[1])
        selected = ordered[start:end + 1]
        return selected if withscores else [member for member, _ in selected]

    def expire(self, key, seconds):
        self.ttls[key] = seconds
        return True


def make_request(redis=None, ip="203.0.113.7"):
    web = FastAPI()
    if redis is not None:
        web.state.redis = redis
    return Request({
        "type": "http",
        "app": web,
        "method": "POST",
        "path": "/",
        "headers": [],
        "client": (ip, 50000),
    })


@pytest.mark.asyncio
async def test_allows_up_to_limit():
    redis = FakeRedis()
    throttle = Throttle("test", max_requests=3, window_seconds=60)

    results = [await throttle.check(redis, "a@example.com") for _ in range(4)]

    assert [allowed for allowed, _ in results] == [True, True, True, False]
    assert 1 <= results[-1][1] <= 60
    assert redis.ttls["throttle:test:a@example.com"] == 60


@pytest.mark.asyncio
async def test_identifiers_are_independent_and_case_insensitive():
    redis = FakeRedis()
    throttle = Throttle("test", max_requests=1, window_seconds=60)

    assert (await throttle.check(redis, "A@example.com"))[0]
    assert not (await throttle.check(redis, "a@example.com"))[0]
    assert (await throttle.check(redis, "b@example.com"))[0]


@pytest.mark.asyncio
async def test_old_hits_leave_the_window():
    redis = FakeRedis()
    throttle = Throttle("test", max_requests=1, window_seconds=60)
    redis.zadd("throttle:test:x", {"stale": 1.0})

    allowed, _ = await throttle.check(redis, "x")

    assert allowed
    assert "stale" not in redis.sets["throttle:test:x"]


@pytest.mark.asyncio
async def test_hit_raises_when_exceeded():
    throttle = Throttle("test", max_requests=1, window_seconds=30)
    request = make_request(FakeRedis())

    await throttle.hit(request, "key")
    with pytest.raises(RateLimited) as exc_info:
        await throttle.hit(request, "key")

    assert exc_info.value.status_code == 429
    assert int(exc_info.value.headers["Retry-After"]) >= 1


@pytest.mark.asyncio
async def test_dependency_keys_by_client_ip():
    redis = FakeRedis()
    throttle = Throttle("register", max_requests=1, window_seconds=60)

    await throttle(make_request(redis, ip="198.51.100.1"))
    await throttle(make_request(redis, ip="198.51.100.2"))

    assert set(redis.sets) == {
        "throttle:register:198.51.100.1",
        "throttle:register:198.51.100.2",
    }


@pytest.mark.asyncio
async def test_no_redis_means_no_limit():
    throttle = Throttle("test", max_requests=0, window_seconds=60)
    request = make_request()

    for _ in range(3):
        await throttle.hit(request, "key")


@pytest.mark.asyncio
async def test_login_endpoint_is_throttled(client, monkeypatch):
    monkeypatch.setattr(app.state, "redis", FakeRedis(), raising=False)
    body = {"email": "nobody@example.com", "password": "Whatever1!"}

    for _ in range(5):
        response = await client.post("/api/v1/auth/login", json=body)
        assert response.status_code == 401

    response = await client.post("/api/v1/auth/login", json=body)

    assert response.status_code == 429
    assert response.json()["error"] == "too_many_requests"
    assert "retry-after" in response.headers


@pytest.mark.asyncio
async def test_registration_endpoint_is_throttled(client, monkeypatch):
    monkeypatch.setattr(app.state, "redis", FakeRedis(), raising=False)
    limit = registration_throttle.max_requests

    for i in range(limit):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "name": "Owner",
                "email": f"owner{i}@example.com",
                "password": "Secret123!",
                "password_confirmation": "Secret123!",
            },
        )
        assert response.status_code == 201

    response = await client.post(
        "/api/v1/auth/register",
        json={
            "name": "Owner",
            "email": "one-too-many@example.com",
            "password": "Secret123!",
            "password_confirmation": "Secret123!",
        },
    )

    assert response.status_code == 429
