"""Service wiring for the HTTP layer.

Backends are chosen once, at import, from configuration:

  DATABASE_URL set  → PgCredentialStore,      else InMemoryCredentialStore
  REDIS_URL set     → RedisIssuerRegistry,    else InMemoryIssuerRegistry
  Pinata keys set   → PinataContentStore,     else PlaceholderContentStore

Routes receive services through the `get_*` dependencies below, so tests
can swap in freshly built services with `app.dependency_overrides`.
"""

from __future__ import annotations

import logging

from app.core.config import SETTINGS
from app.db.engine import async_session_factory
from app.db.redis import redis_pool
from app.models.issuer import SEED_ISSUER_ADDRESSES
from app.repos.credential_repo import build_credential_store
from app.repos.issuer_registry import build_issuer_registry
from app.services.content_store import PinataContentStore, build_content_store
from app.services.issuance_service import IssuanceService
from app.services.issuer_service import IssuerService
from app.services.ledger import Ledger, SolanaLedger
from app.services.query_service import CredentialQueryService

logger = logging.getLogger(__name__)

issuer_registry = build_issuer_registry(redis_pool, SEED_ISSUER_ADDRESSES)
credential_store = build_credential_store(async_session_factory)
content_store = build_content_store(SETTINGS)
ledger = SolanaLedger(SETTINGS.solana_rpc_url, SETTINGS.solana_network)

issuance_service = IssuanceService(
    registry=issuer_registry,
    store=credential_store,
    content_store=content_store,
    ledger=ledger,
)
issuer_service = IssuerService(issuer_registry)
query_service = CredentialQueryService(credential_store)


def get_issuance_service() -> IssuanceService:
    return issuance_service


def get_issuer_service() -> IssuerService:
    return issuer_service


def get_query_service() -> CredentialQueryService:
    return query_service


def get_ledger() -> Ledger:
    return ledger


async def close_clients() -> None:
    """Release outbound HTTP connections on shutdown."""
    if isinstance(content_store, PinataContentStore):
        await content_store.close()
    await ledger.close()
    logger.info("Outbound clients closed")
