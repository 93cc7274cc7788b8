"""Redis connection management.

Mirrors engine.py: when REDIS_URL is configured a connection pool is
created at import and the issuer registry is stored in Redis, so every
API instance sees the same set of authorized wallets and an `addIssuer`
survives a restart. When it is None the registry lives in process memory.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

from app.core.config import SETTINGS

logger = logging.getLogger(__name__)

if SETTINGS.redis_url:
    redis_pool: aioredis.Redis | None = aioredis.from_url(  # type: ignore[type-arg]
        SETTINGS.redis_url,
        decode_responses=True,
        max_connections=20,
    )
else:
    redis_pool = None


@asynccontextmanager
async def lifespan_redis(pool: aioredis.Redis | None = redis_pool):  # type: ignore[type-arg]
    """Startup/shutdown hook for Redis; mirrors lifespan_db()."""
    if pool is None:
        logger.info("No REDIS_URL configured, issuer registry is in memory")
        yield
        return

    try:
        await pool.ping()  # type: ignore[misc]  # redis stubs mistype async ping as bool
        logger.info("Redis connected: %s", SETTINGS.redis_url)
    except Exception:
        # Keep serving: registry lookups fail closed until Redis is back.
        logger.exception("Redis connection failed on startup")

    try:
        yield
    finally:
        await pool.aclose()
        logger.info("Redis connection pool closed")
