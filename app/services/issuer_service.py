from __future__ import annotations

import logging
from dataclasses import dataclass

from app.models.issuer import IssuerProfile, profile_for
from app.repos.issuer_registry import IssuerRegistry
from app.services.errors import ValidationError
from app.services.wallets import require_plausible_wallet

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IssuerSummary:
    universities: int
    corporate_training: int
    government: int
    total_certificates_issued: int


class IssuerService:
    """Registry operations exposed over HTTP."""

    def __init__(self, registry: IssuerRegistry) -> None:
        self._registry = registry

    async def authorize_issuer(self, issuer_wallet: object, admin_wallet: object) -> str:
        missing = [
            name
            for name, value in (
                ("issuerPublicKey", issuer_wallet),
                ("adminPublicKey", admin_wallet),
            )
            if not isinstance(value, str) or not value.strip()
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                error="Missing required fields",
            )
        issuer = require_plausible_wallet(
            str(issuer_wallet).strip(), error="Invalid issuer public key"
        )
        # Admin signatures are not verified; the admin wallet is only recorded.
        logger.info(
            "Issuer add requested issuer=%s admin=%s",
            issuer,
            admin_wallet,
            extra={"wallet": issuer},
        )
        await self._registry.authorize(issuer)
        return issuer

    async def check_issuer(self, wallet: object) -> bool:
        wallet = require_plausible_wallet(wallet, error="Invalid public key")
        return await self._registry.is_authorized(wallet)

    async def list_issuers(self) -> tuple[list[IssuerProfile], IssuerSummary]:
        profiles = [profile_for(address) for address in await self._registry.list_all()]
        summary = IssuerSummary(
            universities=sum(1 for p in profiles if "University" in p.type),
            corporate_training=sum(
                1 for p in profiles if p.type == "Corporate Training"
            ),
            government=sum(1 for p in profiles if p.type == "Government Agency"),
            total_certificates_issued=sum(p.total_certificates for p in profiles),
        )
        return profiles, summary
