from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from solders.keypair import Keypair

from app.api import dependencies
from app.main import app
from app.models.issuer import SEED_ISSUER_ADDRESSES
from app.repos.credential_repo import InMemoryCredentialStore
from app.repos.issuer_registry import InMemoryIssuerRegistry
from app.services.content_store import PlaceholderContentStore
from app.services.errors import UpstreamError
from app.services.issuance_service import IssuanceService
from app.services.issuer_service import IssuerService
from app.services.ledger import MintReceipt
from app.services.query_service import CredentialQueryService


GATEWAY = "https://gateway.pinata.cloud/ipfs"
FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)

# Seeded in every registry built by these fixtures.
AUTHORIZED_ISSUER = "NU11111111111111111111111111111111111111"
# A real ed25519 public key, so it also passes the on-chain wallet check.
HOLDER = str(Keypair.from_seed(bytes(range(32))).pubkey())


class FakeLedger:
    """Stands in for SolanaLedger; records calls instead of hitting RPC."""

    network = "devnet"

    def __init__(self) -> None:
        self.mint_calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    async def mint_certificate(self, holder_wallet: str, issuer: Keypair) -> MintReceipt:
        self.mint_calls.append((holder_wallet, str(issuer.pubkey())))
        if self.fail_with is not None:
            raise self.fail_with
        mint = str(Keypair().pubkey())
        return MintReceipt(
            signature=f"sig-{len(self.mint_calls)}",
            mint=mint,
            token_account=str(Keypair().pubkey()),
            authority=str(issuer.pubkey()),
        )

    async def connection_status(self) -> dict[str, object]:
        return {"connected": True, "network": self.network, "current_slot": 42}

    async def balance(self, wallet: str) -> float:
        return 1.5

    async def request_airdrop(self, wallet: str, amount_sol: float) -> str:
        if self.fail_with is not None:
            raise UpstreamError("airdrop failed", error="Failed to airdrop SOL")
        return "airdrop-sig"


@pytest.fixture
def registry() -> InMemoryIssuerRegistry:
    return InMemoryIssuerRegistry(SEED_ISSUER_ADDRESSES)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def content_store() -> PlaceholderContentStore:
    return PlaceholderContentStore(GATEWAY)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def issuance_service(registry, store, content_store, ledger) -> IssuanceService:
    return IssuanceService(
        registry=registry,
        store=store,
        content_store=content_store,
        ledger=ledger,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def query_service(store) -> CredentialQueryService:
    return CredentialQueryService(store)


@pytest.fixture
def issuer_service(registry) -> IssuerService:
    return IssuerService(registry)


@pytest.fixture
def client(
    issuance_service, issuer_service, query_service, ledger
) -> Iterator[TestClient]:
    app.dependency_overrides[dependencies.get_issuance_service] = lambda: issuance_service
    app.dependency_overrides[dependencies.get_issuer_service] = lambda: issuer_service
    app.dependency_overrides[dependencies.get_query_service] = lambda: query_service
    app.dependency_overrides[dependencies.get_ledger] = lambda: ledger
    yield TestClient(app)
    app.dependency_overrides.clear()


def issuer_secret(keypair: Keypair | None = None) -> list[int]:
    """A keypair in the JSON-array form accepted by /mintCertificateReal."""
    return list(bytes(keypair or Keypair()))


def mint_body(**overrides: str) -> dict[str, str]:
    body = {
        "issuerPublicKey": AUTHORIZED_ISSUER,
        "studentPublicKey": HOLDER,
        "studentName": "Aidar Nazarbayev",
        "courseName": "Blockchain 101",
        "issuerName": "Test University",
    }
    body.update(overrides)
    return body
