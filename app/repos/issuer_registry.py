"""Registry of wallets allowed to issue certificates.

The registry is an explicit object handed to the issuance service rather
than a process-wide set, so each test (and each app instance) can build
its own. It is append-only: there is no removal operation.

Two backends satisfy the same Protocol:

  InMemoryIssuerRegistry — per-process, lost on restart. Default when no
    REDIS_URL is configured.
  RedisIssuerRegistry — a Redis SET for O(1) membership plus a LIST that
    remembers insertion order for the /issuer/authorized listing. Shared
    by every API instance pointed at the same Redis.

Both are seeded at construction with a fixed list of wallet addresses.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


@runtime_checkable
class IssuerRegistry(Protocol):
    async def is_authorized(self, wallet_id: object) -> bool:
        """True iff the wallet is a member. Never raises."""
        ...

    async def authorize(self, wallet_id: str) -> None:
        """Add a wallet. Adding an existing member is a no-op."""
        ...

    async def list_all(self) -> list[str]:
        """Members in insertion order."""
        ...


class InMemoryIssuerRegistry:
    def __init__(self, seed: Iterable[str] = ()) -> None:
        # dict keeps insertion order and gives O(1) membership
        self._members: dict[str, None] = dict.fromkeys(seed)

    async def is_authorized(self, wallet_id: object) -> bool:
        if not isinstance(wallet_id, str) or not wallet_id:
            return False
        return wallet_id in self._members

    async def authorize(self, wallet_id: str) -> None:
        if wallet_id in self._members:
            return
        self._members[wallet_id] = None
        logger.info("Issuer authorized wallet=%s", wallet_id)

    async def list_all(self) -> list[str]:
        return list(self._members)


class RedisIssuerRegistry:
    _SET_KEY = "issuers:authorized"
    _ORDER_KEY = "issuers:authorized:order"

    def __init__(self, redis_client, seed: Iterable[str] = ()) -> None:
        self._redis = redis_client
        self._seed = tuple(seed)
        self._seeded = False

    async def _ensure_seeded(self) -> None:
        if self._seeded:
            return
        for wallet_id in self._seed:
            await self._add(wallet_id)
        self._seeded = True

    async def _add(self, wallet_id: str) -> bool:
        # SADD returns 1 only for a new member, so the order list never
        # gets duplicates even when several instances seed concurrently.
        added = await self._redis.sadd(self._SET_KEY, wallet_id)
        if added:
            await self._redis.rpush(self._ORDER_KEY, wallet_id)
        return bool(added)

    async def is_authorized(self, wallet_id: object) -> bool:
        if not isinstance(wallet_id, str) or not wallet_id:
            return False
        try:
            await self._ensure_seeded()
            return bool(await self._redis.sismember(self._SET_KEY, wallet_id))
        except RedisError:
            # Fail closed: an unreachable registry authorizes nobody.
            logger.exception("Issuer registry lookup failed wallet=%s", wallet_id)
            return False

    async def authorize(self, wallet_id: str) -> None:
        await self._ensure_seeded()
        if await self._add(wallet_id):
            logger.info("Issuer authorized wallet=%s", wallet_id)

    async def list_all(self) -> list[str]:
        await self._ensure_seeded()
        return list(await self._redis.lrange(self._ORDER_KEY, 0, -1))


def build_issuer_registry(redis_client, seed: Iterable[str]) -> IssuerRegistry:
    if redis_client is not None:
        return RedisIssuerRegistry(redis_client, seed)
    return InMemoryIssuerRegistry(seed)
