"""Issuer endpoints: certificate minting and the issuer registry.

- POST /issuer/mintCertificate      — simulated issuance (registry-gated)
- POST /issuer/mintCertificateReal  — on-chain issuance via the ledger
- POST /issuer/addIssuer            — add a wallet to the registry
- GET  /issuer/check/{publicKey}    — registry membership
- GET  /issuer/authorized           — registry listing with profiles
- GET  /issuer/network-status       — ledger RPC health
- GET  /issuer/balance/{publicKey}  — SOL balance (devnet helper)
- POST /issuer/airdrop              — SOL airdrop (devnet helper)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.api.dependencies import get_issuance_service, get_issuer_service, get_ledger
from app.services.errors import ValidationError
from app.services.issuance_service import IssuanceResult, IssuanceService
from app.services.issuer_service import IssuerService
from app.services.ledger import Ledger

router = APIRouter(prefix="/issuer", tags=["issuer"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Request bodies ---
# Fields are optional at the schema level so that a missing field reaches
# the issuance service and is reported as "Missing required fields".


class MintCertificateIn(_CamelModel):
    issuer_public_key: str | None = None
    student_public_key: str | None = None
    student_name: str | None = None
    course_name: str | None = None
    issuer_name: str | None = None


class MintCertificateRealIn(_CamelModel):
    issuer_private_key: list[int] | str | None = None
    student_public_key: str | None = None
    student_name: str | None = None
    course_name: str | None = None
    issuer_name: str | None = None


class AddIssuerIn(_CamelModel):
    issuer_public_key: str | None = None
    admin_public_key: str | None = None


class AirdropIn(_CamelModel):
    public_key: str | None = None
    amount: float = 1.0


# --- Responses ---


class CertificateSummaryOut(_CamelModel):
    student_name: str
    course_name: str
    issuer_name: str
    date: str
    student: str
    issuer: str


class MintCertificateOut(_CamelModel):
    success: bool = True
    message: str
    signature: str
    mint: str
    metadata_uri: str
    certificate: CertificateSummaryOut


class BlockchainOut(_CamelModel):
    network: str
    explorer: str


class MintCertificateRealOut(MintCertificateOut):
    token_account: str | None
    blockchain: BlockchainOut
    replayed: bool = False


class AddIssuerOut(_CamelModel):
    success: bool = True
    message: str
    issuer: str


class CheckIssuerOut(_CamelModel):
    success: bool = True
    public_key: str
    is_authorized: bool


class IssuerProfileOut(_CamelModel):
    address: str
    name: str
    type: str
    country: str
    verified: bool
    total_certificates: int


class IssuerSummaryOut(_CamelModel):
    universities: int
    corporate_training: int
    government: int
    total_certificates_issued: int


class AuthorizedIssuersOut(_CamelModel):
    success: bool = True
    issuers: list[IssuerProfileOut]
    total: int
    summary: IssuerSummaryOut


class NetworkStatusOut(_CamelModel):
    success: bool = True
    status: dict


class BalanceOut(_CamelModel):
    success: bool = True
    public_key: str
    balance: float


class AirdropOut(_CamelModel):
    success: bool = True
    signature: str
    amount: float
    public_key: str
    explorer: str


def _summary(result: IssuanceResult) -> CertificateSummaryOut:
    c = result.credential
    return CertificateSummaryOut(
        student_name=c.holder_name,
        course_name=c.course_name,
        issuer_name=c.issuer_name,
        date=c.issue_date.isoformat(),
        student=c.holder_wallet,
        issuer=c.issuer_wallet,
    )


# --- Endpoints ---


@router.post("/mintCertificate", response_model=MintCertificateOut)
async def mint_certificate(
    body: MintCertificateIn,
    service: Annotated[IssuanceService, Depends(get_issuance_service)],
) -> MintCertificateOut:
    result = await service.issue_credential(
        body.issuer_public_key,
        body.student_public_key,
        body.student_name,
        body.course_name,
        body.issuer_name,
    )
    return MintCertificateOut(
        message="Certificate minted successfully",
        signature=result.signature,
        mint=result.mint,
        metadata_uri=result.metadata_uri,
        certificate=_summary(result),
    )


@router.post("/mintCertificateReal", response_model=MintCertificateRealOut)
async def mint_certificate_real(
    body: MintCertificateRealIn,
    service: Annotated[IssuanceService, Depends(get_issuance_service)],
) -> MintCertificateRealOut:
    result = await service.issue_credential_on_chain(
        body.issuer_private_key,
        body.student_public_key,
        body.student_name,
        body.course_name,
        body.issuer_name,
    )
    return MintCertificateRealOut(
        message=(
            "Certificate already minted for this request"
            if result.replayed
            else "Certificate minted on blockchain successfully!"
        ),
        signature=result.signature,
        mint=result.mint,
        token_account=result.token_account,
        metadata_uri=result.metadata_uri,
        certificate=_summary(result),
        blockchain=BlockchainOut(
            network=result.network or "",
            explorer=result.explorer_url or "",
        ),
        replayed=result.replayed,
    )


@router.post("/addIssuer", response_model=AddIssuerOut)
async def add_issuer(
    body: AddIssuerIn,
    service: Annotated[IssuerService, Depends(get_issuer_service)],
) -> AddIssuerOut:
    issuer = await service.authorize_issuer(
        body.issuer_public_key, body.admin_public_key
    )
    return AddIssuerOut(message="Issuer added successfully", issuer=issuer)


@router.get("/check/{public_key}", response_model=CheckIssuerOut)
async def check_issuer(
    public_key: str,
    service: Annotated[IssuerService, Depends(get_issuer_service)],
) -> CheckIssuerOut:
    is_authorized = await service.check_issuer(public_key)
    return CheckIssuerOut(public_key=public_key, is_authorized=is_authorized)


@router.get("/authorized", response_model=AuthorizedIssuersOut)
async def authorized_issuers(
    service: Annotated[IssuerService, Depends(get_issuer_service)],
) -> AuthorizedIssuersOut:
    profiles, summary = await service.list_issuers()
    return AuthorizedIssuersOut(
        issuers=[
            IssuerProfileOut(
                address=p.address,
                name=p.name,
                type=p.type,
                country=p.country,
                verified=p.verified,
                total_certificates=p.total_certificates,
            )
            for p in profiles
        ],
        total=len(profiles),
        summary=IssuerSummaryOut(
            universities=summary.universities,
            corporate_training=summary.corporate_training,
            government=summary.government,
            total_certificates_issued=summary.total_certificates_issued,
        ),
    )


@router.get("/network-status", response_model=NetworkStatusOut)
async def network_status(
    ledger: Annotated[Ledger, Depends(get_ledger)],
) -> NetworkStatusOut:
    return NetworkStatusOut(status=await ledger.connection_status())


@router.get("/balance/{public_key}", response_model=BalanceOut)
async def balance(
    public_key: str,
    ledger: Annotated[Ledger, Depends(get_ledger)],
) -> BalanceOut:
    return BalanceOut(public_key=public_key, balance=await ledger.balance(public_key))


@router.post("/airdrop", response_model=AirdropOut)
async def airdrop(
    body: AirdropIn,
    ledger: Annotated[Ledger, Depends(get_ledger)],
) -> AirdropOut:
    if not body.public_key:
        raise ValidationError(
            "Please provide a wallet address", error="Missing publicKey"
        )
    if body.amount <= 0:
        raise ValidationError("amount must be positive", error="Invalid amount")
    signature = await ledger.request_airdrop(body.public_key, body.amount)
    return AirdropOut(
        signature=signature,
        amount=body.amount,
        public_key=body.public_key,
        explorer=(
            f"https://explorer.solana.com/tx/{signature}?cluster={ledger.network}"
        ),
    )
