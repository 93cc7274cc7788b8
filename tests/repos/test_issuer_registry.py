from __future__ import annotations

import asyncio

from redis.exceptions import ConnectionError as RedisConnectionError

from app.repos.issuer_registry import (
    InMemoryIssuerRegistry,
    IssuerRegistry,
    RedisIssuerRegistry,
    build_issuer_registry,
)


class _FakeRedis:
    """Just the SET and LIST commands the registry uses."""

    def __init__(self) -> None:
        self.sets: dict[str, set[str]] = {}
        self.lists: dict[str, list[str]] = {}
        self.down = False

    async def sadd(self, key: str, member: str) -> int:
        members = self.sets.setdefault(key, set())
        if member in members:
            return 0
        members.add(member)
        return 1

    async def sismember(self, key: str, member: str) -> int:
        if self.down:
            raise RedisConnectionError("connection refused")
        return int(member in self.sets.get(key, set()))

    async def rpush(self, key: str, value: str) -> int:
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        return list(self.lists.get(key, []))


SEED = ("Seed11111111111111111111", "Seed22222222222222222222")


# ---- in-memory ----


def test_seed_members_are_authorized() -> None:
    registry = InMemoryIssuerRegistry(SEED)
    assert asyncio.run(registry.is_authorized(SEED[0])) is True
    assert asyncio.run(registry.is_authorized("Other111111111111111111")) is False


def test_authorize_is_idempotent_and_ordered() -> None:
    registry = InMemoryIssuerRegistry(SEED)
    asyncio.run(registry.authorize("New11111111111111111111"))
    asyncio.run(registry.authorize("New11111111111111111111"))
    assert asyncio.run(registry.list_all()) == [*SEED, "New11111111111111111111"]


def test_non_string_wallet_is_not_authorized() -> None:
    registry = InMemoryIssuerRegistry(SEED)
    assert asyncio.run(registry.is_authorized(None)) is False
    assert asyncio.run(registry.is_authorized("")) is False
    assert asyncio.run(registry.is_authorized(12345)) is False


def test_registries_are_independent() -> None:
    a = InMemoryIssuerRegistry(SEED)
    b = InMemoryIssuerRegistry(SEED)
    asyncio.run(a.authorize("OnlyInA1111111111111111"))
    assert asyncio.run(b.is_authorized("OnlyInA1111111111111111")) is False


# ---- redis ----


def test_redis_registry_seeds_lazily() -> None:
    redis = _FakeRedis()
    registry = RedisIssuerRegistry(redis, SEED)
    assert redis.sets == {}
    assert asyncio.run(registry.is_authorized(SEED[1])) is True
    assert asyncio.run(registry.list_all()) == list(SEED)


def test_redis_registry_shared_between_instances() -> None:
    redis = _FakeRedis()
    first = RedisIssuerRegistry(redis, SEED)
    second = RedisIssuerRegistry(redis, SEED)
    asyncio.run(first.authorize("New11111111111111111111"))

    assert asyncio.run(second.is_authorized("New11111111111111111111")) is True
    # Seeding twice does not duplicate the order list.
    assert asyncio.run(second.list_all()) == [*SEED, "New11111111111111111111"]


def test_redis_registry_fails_closed() -> None:
    redis = _FakeRedis()
    registry = RedisIssuerRegistry(redis, SEED)
    redis.down = True
    assert asyncio.run(registry.is_authorized(SEED[0])) is False


def test_build_issuer_registry_picks_backend() -> None:
    assert isinstance(build_issuer_registry(None, SEED), InMemoryIssuerRegistry)
    built = build_issuer_registry(_FakeRedis(), SEED)
    assert isinstance(built, RedisIssuerRegistry)
    assert isinstance(built, IssuerRegistry)
