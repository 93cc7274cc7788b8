"""PostgreSQL implementation of CredentialStore."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.tables import CertificateRow
from app.models.credential import Credential
from app.repos.credential_repo import check_queryable
from app.services.errors import PersistenceError

logger = logging.getLogger(__name__)


class PgCredentialStore:
    """Satisfies the CredentialStore Protocol using PostgreSQL via SQLAlchemy.

    Each call runs in its own session and transaction, so `create` either
    commits the whole row or nothing. The unique constraints on `mint` and
    `idempotency_key` are the hard guarantee against duplicates.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, credential: Credential) -> Credential:
        row = CertificateRow(
            mint=credential.mint,
            holder_wallet=credential.holder_wallet,
            issuer_wallet=credential.issuer_wallet,
            holder_name=credential.holder_name,
            course_name=credential.course_name,
            issuer_name=credential.issuer_name,
            issue_date=credential.issue_date,
            metadata_uri=credential.metadata_uri,
            verified=credential.verified,
            signature=credential.signature,
            token_account=credential.token_account,
            idempotency_key=credential.idempotency_key,
            created_at=credential.created_at,
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(row)
        except IntegrityError as exc:
            logger.warning(
                "Rejected duplicate certificate mint=%s", credential.mint
            )
            raise PersistenceError(
                "a certificate with this mint or issuance key already exists"
            ) from exc
        except SQLAlchemyError as exc:
            logger.exception("Certificate insert failed mint=%s", credential.mint)
            raise PersistenceError("certificate storage is unavailable") from exc
        return credential

    async def query_by_field(self, field: str, value: object) -> list[Credential]:
        check_queryable(field)
        column = getattr(CertificateRow, field)
        stmt = select(CertificateRow).where(column == value).order_by(CertificateRow.id)
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            logger.exception("Certificate query failed field=%s", field)
            raise PersistenceError("certificate storage is unavailable") from exc
        return [_row_to_credential(row) for row in rows]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(CertificateRow)
        try:
            async with self._session_factory() as session:
                return int((await session.execute(stmt)).scalar_one())
        except SQLAlchemyError as exc:
            logger.exception("Certificate count failed")
            raise PersistenceError("certificate storage is unavailable") from exc

    async def status(self) -> dict[str, object]:
        return {"mode": "postgres", "certificate_count": await self.count()}


def _row_to_credential(row: CertificateRow) -> Credential:
    return Credential(
        mint=row.mint,
        holder_wallet=row.holder_wallet,
        issuer_wallet=row.issuer_wallet,
        holder_name=row.holder_name,
        course_name=row.course_name,
        issuer_name=row.issuer_name,
        issue_date=row.issue_date,
        metadata_uri=row.metadata_uri,
        verified=row.verified,
        signature=row.signature,
        token_account=row.token_account,
        idempotency_key=row.idempotency_key,
        created_at=row.created_at,
    )
