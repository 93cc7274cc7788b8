from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Credential:
    """One issued certificate, keyed by its mint address.

    Immutable once created: there is no update or revocation path, so
    `verified` is always True for records written by the issuance service.
    """

    mint: str
    holder_wallet: str
    issuer_wallet: str
    holder_name: str
    course_name: str
    issuer_name: str
    issue_date: date
    metadata_uri: str
    verified: bool = True
    signature: str | None = None
    token_account: str | None = None
    idempotency_key: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    @staticmethod
    def new(
        *,
        mint: str,
        holder_wallet: str,
        issuer_wallet: str,
        holder_name: str,
        course_name: str,
        issuer_name: str,
        issue_date: date,
        metadata_uri: str,
        signature: str | None = None,
        token_account: str | None = None,
        idempotency_key: str | None = None,
    ) -> Credential:
        return Credential(
            mint=mint,
            holder_wallet=holder_wallet,
            issuer_wallet=issuer_wallet,
            holder_name=holder_name,
            course_name=course_name,
            issuer_name=issuer_name,
            issue_date=issue_date,
            metadata_uri=metadata_uri,
            verified=True,
            signature=signature,
            token_account=token_account,
            idempotency_key=idempotency_key,
        )

    def descriptive_fields(self) -> dict[str, str]:
        return {
            "holder_name": self.holder_name,
            "course_name": self.course_name,
            "issuer_name": self.issuer_name,
            "issue_date": self.issue_date.isoformat(),
            "holder_wallet": self.holder_wallet,
            "issuer_wallet": self.issuer_wallet,
        }
