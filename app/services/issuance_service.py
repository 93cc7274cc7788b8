"""Certificate issuance sequencer.

A simulated issuance runs these stages in order:

  VALIDATING → AUTHORIZING → BUILDING_METADATA → UPLOADING → SETTLING
             → PERSISTING → DONE

VALIDATING and AUTHORIZING may end in REJECTED. Both stages run before any
side effect, so the caller can fix the input and try again. PERSISTING may
end in FAILED. The metadata upload has already happened at that point and
is not rolled back; an orphaned document in a content-addressed store is
harmless. Upload failures never reach this module because the content store
substitutes a placeholder URI.

The stages exist only for logging and error reporting (`err.stage`). They
are not persisted. A crash between UPLOADING and PERSISTING loses the
in-flight issuance.

The on-chain variant swaps SETTLING for three ledger round trips. A
timed-out client may retry, so the variant derives an idempotency key
from the request and checks the store for it before touching the ledger.
"""

from __future__ import annotations

import enum
import hashlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone

from solders.keypair import Keypair

from app.core.metrics import CERTIFICATES_ISSUED, ISSUANCE_REJECTIONS
from app.models.credential import Credential
from app.repos.credential_repo import CredentialStore
from app.repos.issuer_registry import IssuerRegistry
from app.services.content_store import ContentStore
from app.services.errors import AuthorizationError, IssuanceError, ValidationError
from app.services.ledger import Ledger, parse_issuer_secret, parse_wallet
from app.services.metadata import build_certificate_metadata, certificate_document_name
from app.services.wallets import require_plausible_wallet

logger = logging.getLogger(__name__)

# Fixed signature returned by the simulated path; no transaction exists.
SIMULATED_SIGNATURE = (
    "5VGxBMTsBUgMF3FbhjbQYCtKL6UDJdHhAD6F7M4R1Q2k9X9nP8Wj7wZqBvLt3CxD5Fy2Y8GmH4J6K7LqNr1P"
)

# Retries landing in the same hour with the same issuer, holder and course
# are treated as one issuance.
IDEMPOTENCY_WINDOW_SECONDS = 3600


class IssuanceStage(str, enum.Enum):
    VALIDATING = "validating"
    AUTHORIZING = "authorizing"
    BUILDING_METADATA = "building_metadata"
    UPLOADING = "uploading"
    SETTLING = "settling"
    PERSISTING = "persisting"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class IssuanceResult:
    signature: str
    mint: str
    metadata_uri: str
    credential: Credential
    token_account: str | None = None
    network: str | None = None
    replayed: bool = False

    @property
    def explorer_url(self) -> str | None:
        if self.network is None:
            return None
        return f"https://explorer.solana.com/tx/{self.signature}?cluster={self.network}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def idempotency_key(
    issuer_wallet: str, holder_wallet: str, course_name: str, now: datetime
) -> str:
    bucket = int(now.timestamp()) // IDEMPOTENCY_WINDOW_SECONDS
    raw = "|".join((issuer_wallet, holder_wallet, course_name, str(bucket)))
    return hashlib.sha256(raw.encode()).hexdigest()


class _Attempt:
    """Tracks the current stage of one issuance for logs and errors."""

    def __init__(self, variant: str) -> None:
        self.variant = variant
        self.stage = IssuanceStage.VALIDATING

    def enter(self, stage: IssuanceStage) -> None:
        logger.debug("Issuance (%s) %s → %s", self.variant, self.stage.value, stage.value)
        self.stage = stage

    def fail(self, err: IssuanceError) -> None:
        err.stage = self.stage.value
        rejected = self.stage in (IssuanceStage.VALIDATING, IssuanceStage.AUTHORIZING)
        terminal = IssuanceStage.REJECTED if rejected else IssuanceStage.FAILED
        if rejected:
            reason = (
                "authorization"
                if isinstance(err, AuthorizationError)
                else "validation"
            )
            ISSUANCE_REJECTIONS.labels(reason=reason).inc()
        logger.warning(
            "Issuance (%s) %s at %s: %s",
            self.variant,
            terminal.value,
            self.stage.value,
            err.message,
            extra={"stage": self.stage.value},
        )
        self.stage = terminal


def _require_fields(**fields: object) -> dict[str, str]:
    missing = [
        name
        for name, value in fields.items()
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            error="Missing required fields",
        )
    return {name: str(value).strip() for name, value in fields.items()}


class IssuanceService:
    def __init__(
        self,
        *,
        registry: IssuerRegistry,
        store: CredentialStore,
        content_store: ContentStore,
        ledger: Ledger | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._registry = registry
        self._store = store
        self._content_store = content_store
        self._ledger = ledger
        self._clock = clock

    async def _upload_metadata(
        self, attempt: _Attempt, holder_name: str, course_name: str, issuer_name: str
    ) -> tuple[date, str]:
        attempt.enter(IssuanceStage.BUILDING_METADATA)
        issued_on = self._clock().date()
        metadata = build_certificate_metadata(
            holder_name, course_name, issuer_name, issued_on
        )

        attempt.enter(IssuanceStage.UPLOADING)
        metadata_uri = await self._content_store.upload(
            metadata, certificate_document_name(holder_name, course_name)
        )
        return issued_on, metadata_uri

    async def issue_credential(
        self,
        issuer_wallet: object,
        holder_wallet: object,
        holder_name: object,
        course_name: object,
        issuer_name: object,
    ) -> IssuanceResult:
        """Issue a certificate without touching a ledger.

        Raises ValidationError / AuthorizationError before any side effect,
        PersistenceError if the record cannot be stored.
        """
        attempt = _Attempt("simulated")
        try:
            fields = _require_fields(
                issuerPublicKey=issuer_wallet,
                studentPublicKey=holder_wallet,
                studentName=holder_name,
                courseName=course_name,
                issuerName=issuer_name,
            )
            issuer = require_plausible_wallet(
                fields["issuerPublicKey"], error="Invalid issuer public key"
            )
            require_plausible_wallet(
                fields["studentPublicKey"], error="Invalid student public key"
            )

            attempt.enter(IssuanceStage.AUTHORIZING)
            if not await self._registry.is_authorized(issuer):
                raise AuthorizationError(
                    "This wallet address is not authorized to issue certificates"
                )

            issued_on, metadata_uri = await self._upload_metadata(
                attempt,
                fields["studentName"],
                fields["courseName"],
                fields["issuerName"],
            )

            attempt.enter(IssuanceStage.SETTLING)
            mint = str(Keypair().pubkey())
            signature = SIMULATED_SIGNATURE

            attempt.enter(IssuanceStage.PERSISTING)
            credential = await self._store.create(
                Credential.new(
                    mint=mint,
                    holder_wallet=fields["studentPublicKey"],
                    issuer_wallet=issuer,
                    holder_name=fields["studentName"],
                    course_name=fields["courseName"],
                    issuer_name=fields["issuerName"],
                    issue_date=issued_on,
                    metadata_uri=metadata_uri,
                    signature=signature,
                )
            )
        except IssuanceError as err:
            attempt.fail(err)
            raise

        attempt.enter(IssuanceStage.DONE)
        CERTIFICATES_ISSUED.labels(variant="simulated").inc()
        logger.info(
            "Certificate issued mint=%s holder=%s issuer=%s",
            mint,
            credential.holder_wallet,
            issuer,
            extra={"mint": mint, "wallet": credential.holder_wallet},
        )
        return IssuanceResult(
            signature=signature,
            mint=mint,
            metadata_uri=metadata_uri,
            credential=credential,
        )

    async def issue_credential_on_chain(
        self,
        issuer_secret: object,
        holder_wallet: object,
        holder_name: object,
        course_name: object,
        issuer_name: object,
    ) -> IssuanceResult:
        """Mint a certificate NFT on the configured ledger and store it.

        The issuer proves authority by holding the mint-authority secret;
        the registry is not consulted. A retry inside the idempotency
        window returns the stored certificate without new ledger calls.
        """
        if self._ledger is None:
            raise IssuanceError(
                "no ledger is configured for on-chain issuance",
                error="Failed to mint certificate on blockchain",
            )

        attempt = _Attempt("onchain")
        try:
            if issuer_secret in (None, "", []):
                raise ValidationError(
                    "Missing required fields: issuerPrivateKey",
                    error="Missing required fields",
                )
            fields = _require_fields(
                studentPublicKey=holder_wallet,
                studentName=holder_name,
                courseName=course_name,
                issuerName=issuer_name,
            )
            issuer = parse_issuer_secret(issuer_secret)
            issuer_wallet = str(issuer.pubkey())
            parse_wallet(fields["studentPublicKey"])

            attempt.enter(IssuanceStage.AUTHORIZING)
            key = idempotency_key(
                issuer_wallet,
                fields["studentPublicKey"],
                fields["courseName"],
                self._clock(),
            )
            existing = await self._store.query_by_field("idempotency_key", key)
            if existing:
                prior = existing[0]
                logger.info(
                    "Replaying stored on-chain issuance mint=%s",
                    prior.mint,
                    extra={"mint": prior.mint},
                )
                return IssuanceResult(
                    signature=prior.signature or "",
                    mint=prior.mint,
                    metadata_uri=prior.metadata_uri,
                    credential=prior,
                    token_account=prior.token_account,
                    network=self._ledger.network,
                    replayed=True,
                )

            issued_on, metadata_uri = await self._upload_metadata(
                attempt,
                fields["studentName"],
                fields["courseName"],
                fields["issuerName"],
            )

            attempt.enter(IssuanceStage.SETTLING)
            receipt = await self._ledger.mint_certificate(
                fields["studentPublicKey"], issuer
            )

            attempt.enter(IssuanceStage.PERSISTING)
            credential = await self._store.create(
                Credential.new(
                    mint=receipt.mint,
                    holder_wallet=fields["studentPublicKey"],
                    issuer_wallet=issuer_wallet,
                    holder_name=fields["studentName"],
                    course_name=fields["courseName"],
                    issuer_name=fields["issuerName"],
                    issue_date=issued_on,
                    metadata_uri=metadata_uri,
                    signature=receipt.signature,
                    token_account=receipt.token_account,
                    idempotency_key=key,
                )
            )
        except IssuanceError as err:
            attempt.fail(err)
            raise

        attempt.enter(IssuanceStage.DONE)
        CERTIFICATES_ISSUED.labels(variant="onchain").inc()
        logger.info(
            "Certificate minted on %s mint=%s signature=%s",
            self._ledger.network,
            receipt.mint,
            receipt.signature,
            extra={"mint": receipt.mint, "wallet": credential.holder_wallet},
        )
        return IssuanceResult(
            signature=receipt.signature,
            mint=receipt.mint,
            metadata_uri=metadata_uri,
            credential=credential,
            token_account=receipt.token_account,
            network=self._ledger.network,
        )
