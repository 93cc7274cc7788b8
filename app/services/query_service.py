from __future__ import annotations

import logging

from app.models.credential import Credential
from app.repos.credential_repo import CredentialStore
from app.services.errors import NotFoundError
from app.services.wallets import require_mint_address, require_plausible_wallet

logger = logging.getLogger(__name__)


class CredentialQueryService:
    """Read side of the certificate store."""

    def __init__(self, store: CredentialStore) -> None:
        self._store = store

    async def list_by_holder(self, wallet: object) -> list[Credential]:
        """Every certificate held by `wallet`, in storage insertion order."""
        wallet = require_plausible_wallet(wallet)
        return await self._store.query_by_field("holder_wallet", wallet)

    async def get_by_mint(self, mint: object) -> Credential:
        mint = require_mint_address(mint)
        matches = await self._store.query_by_field("mint", mint)
        if not matches:
            logger.info("Certificate lookup missed mint=%s", mint)
            raise NotFoundError(
                "No certificate found with this mint address",
                error="Certificate not found",
            )
        return matches[0]

    async def list_verified(self, wallet: object) -> list[Credential]:
        # Every stored certificate is verified today; kept separate so a
        # future revocation flag only needs to change this filter.
        return [c for c in await self.list_by_holder(wallet) if c.verified]

    async def status(self) -> dict[str, object]:
        return await self._store.status()
