from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IssuerProfile:
    """Display details for a wallet in the issuer registry."""

    address: str
    name: str
    type: str  # University|Technical University|Corporate Training|...
    country: str = "Kazakhstan"
    verified: bool = True
    total_certificates: int = 0

    @staticmethod
    def unknown(address: str) -> IssuerProfile:
        return IssuerProfile(
            address=address,
            name="Unknown Issuer",
            type="Unknown",
            verified=False,
        )


# Wallets authorized at startup. The first entry is the default demo issuer
# wallet; the rest are placeholder addresses for partner institutions.
SEED_ISSUERS: tuple[IssuerProfile, ...] = (
    IssuerProfile(
        address="Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS",
        name="Demo Issuer",
        type="Demo",
    ),
    IssuerProfile(
        address="Demo1111111111111111111111111111111111",
        name="Dulaty University",
        type="University",
        total_certificates=150,
    ),
    IssuerProfile(
        address="NU11111111111111111111111111111111111111",
        name="Nazarbayev University",
        type="University",
        total_certificates=2547,
    ),
    IssuerProfile(
        address="KNU1111111111111111111111111111111111111",
        name="Al-Farabi Kazakh National University",
        type="University",
        total_certificates=5234,
    ),
    IssuerProfile(
        address="AITU111111111111111111111111111111111111",
        name="Astana IT University",
        type="Technical University",
        total_certificates=892,
    ),
    IssuerProfile(
        address="Kaspi11111111111111111111111111111111111",
        name="Kaspi.kz Academy",
        type="Corporate Training",
        total_certificates=1205,
    ),
    IssuerProfile(
        address="KMG1111111111111111111111111111111111111",
        name="KazMunayGas Corporate Institute",
        type="Corporate Training",
        total_certificates=734,
    ),
    IssuerProfile(
        address="AstanaHub1111111111111111111111111111111",
        name="Astana Hub",
        type="Startup Accelerator",
        total_certificates=12456,
    ),
    IssuerProfile(
        address="DigKZ1111111111111111111111111111111111",
        name="NFactorial",
        type="Accelerator Program",
        total_certificates=856,
    ),
)

SEED_ISSUER_ADDRESSES: tuple[str, ...] = tuple(p.address for p in SEED_ISSUERS)

_PROFILES_BY_ADDRESS = {p.address: p for p in SEED_ISSUERS}


def profile_for(address: str) -> IssuerProfile:
    return _PROFILES_BY_ADDRESS.get(address) or IssuerProfile.unknown(address)
