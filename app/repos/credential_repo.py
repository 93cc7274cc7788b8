from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from app.models.credential import Credential
from app.services.errors import PersistenceError

logger = logging.getLogger(__name__)

QUERYABLE_FIELDS = frozenset(
    {"mint", "holder_wallet", "issuer_wallet", "verified", "idempotency_key"}
)


def check_queryable(field: str) -> None:
    if field not in QUERYABLE_FIELDS:
        raise ValueError(f"cannot query certificates by {field!r}")


@runtime_checkable
class CredentialStore(Protocol):
    async def create(self, credential: Credential) -> Credential:
        """Persist a new credential. Raises PersistenceError; all-or-nothing."""
        ...

    async def query_by_field(self, field: str, value: object) -> list[Credential]:
        """Credentials whose `field` equals `value`, in insertion order."""
        ...

    async def count(self) -> int: ...

    async def status(self) -> dict[str, object]: ...


class InMemoryCredentialStore:
    """List-backed store used when no DATABASE_URL is configured.

    Mint uniqueness is not enforced here: mints are fresh 32-byte public
    keys, so a collision is not a practical concern. Idempotency keys are
    enforced because the on-chain issuance path relies on them.
    """

    def __init__(self) -> None:
        self._records: list[Credential] = []

    async def create(self, credential: Credential) -> Credential:
        key = credential.idempotency_key
        if key is not None and any(r.idempotency_key == key for r in self._records):
            logger.warning("Rejected duplicate idempotency_key=%s", key)
            raise PersistenceError(
                "a certificate was already stored for this issuance request"
            )
        self._records.append(credential)
        return credential

    async def query_by_field(self, field: str, value: object) -> list[Credential]:
        check_queryable(field)
        return [r for r in self._records if getattr(r, field) == value]

    async def count(self) -> int:
        return len(self._records)

    async def status(self) -> dict[str, object]:
        return {"mode": "memory", "certificate_count": len(self._records)}


def build_credential_store(session_factory) -> CredentialStore:
    """PostgreSQL when a session factory exists, otherwise in-memory."""
    if session_factory is not None:
        from app.repos.pg_credential_repo import PgCredentialStore

        return PgCredentialStore(session_factory)
    return InMemoryCredentialStore()
