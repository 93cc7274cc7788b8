"""Certificate lookup endpoints for holders and verifiers."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.api.dependencies import get_query_service
from app.models.credential import Credential
from app.services.query_service import CredentialQueryService

router = APIRouter(prefix="/user", tags=["user"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CertificateOut(_CamelModel):
    mint: str
    student_name: str
    course_name: str
    issuer_name: str
    date: str
    student: str
    issuer: str
    metadata_uri: str
    verified: bool

    @staticmethod
    def from_credential(c: Credential) -> CertificateOut:
        return CertificateOut(
            mint=c.mint,
            student_name=c.holder_name,
            course_name=c.course_name,
            issuer_name=c.issuer_name,
            date=c.issue_date.isoformat(),
            student=c.holder_wallet,
            issuer=c.issuer_wallet,
            metadata_uri=c.metadata_uri,
            verified=c.verified,
        )


class CertificateListOut(_CamelModel):
    success: bool = True
    wallet: str
    certificates: list[CertificateOut]
    total: int


class CertificateDetailOut(_CamelModel):
    success: bool = True
    certificate: CertificateOut


class VerifyOut(CertificateListOut):
    verified: bool
    message: str


class DatabaseStatusOut(_CamelModel):
    mode: str
    certificate_count: int


class DbStatusOut(_CamelModel):
    success: bool = True
    database: DatabaseStatusOut


@router.get("/certificates/{wallet}", response_model=CertificateListOut)
async def list_certificates(
    wallet: str,
    service: Annotated[CredentialQueryService, Depends(get_query_service)],
) -> CertificateListOut:
    certificates = [
        CertificateOut.from_credential(c) for c in await service.list_by_holder(wallet)
    ]
    return CertificateListOut(
        wallet=wallet, certificates=certificates, total=len(certificates)
    )


@router.get("/certificate/{mint}", response_model=CertificateDetailOut)
async def get_certificate(
    mint: str,
    service: Annotated[CredentialQueryService, Depends(get_query_service)],
) -> CertificateDetailOut:
    credential = await service.get_by_mint(mint)
    return CertificateDetailOut(certificate=CertificateOut.from_credential(credential))


@router.get("/verify/{wallet}", response_model=VerifyOut)
async def verify_certificates(
    wallet: str,
    service: Annotated[CredentialQueryService, Depends(get_query_service)],
) -> VerifyOut:
    certificates = [
        CertificateOut.from_credential(c) for c in await service.list_verified(wallet)
    ]
    found = bool(certificates)
    return VerifyOut(
        wallet=wallet,
        verified=found,
        certificates=certificates,
        total=len(certificates),
        message=(
            "Verified certificates found"
            if found
            else "No verified certificates found for this wallet"
        ),
    )


@router.get("/db-status", response_model=DbStatusOut)
async def db_status(
    service: Annotated[CredentialQueryService, Depends(get_query_service)],
) -> DbStatusOut:
    status = await service.status()
    return DbStatusOut(
        database=DatabaseStatusOut(
            mode=str(status["mode"]),
            certificate_count=int(status["certificate_count"]),  # type: ignore[arg-type]
        )
    )
