from __future__ import annotations

import asyncio

import pytest

from app.services.errors import ValidationError
from tests.conftest import AUTHORIZED_ISSUER

NEW_ISSUER = "NewCollege111111111111111111111"


def test_authorize_issuer(issuer_service) -> None:
    assert asyncio.run(issuer_service.authorize_issuer(NEW_ISSUER, AUTHORIZED_ISSUER)) == NEW_ISSUER
    assert asyncio.run(issuer_service.check_issuer(NEW_ISSUER)) is True


@pytest.mark.parametrize(
    "issuer, admin", [(None, AUTHORIZED_ISSUER), (NEW_ISSUER, None), ("", " ")]
)
def test_authorize_issuer_requires_both_wallets(issuer_service, issuer, admin) -> None:
    with pytest.raises(ValidationError, match="Missing required fields"):
        asyncio.run(issuer_service.authorize_issuer(issuer, admin))


def test_authorize_issuer_rejects_short_wallet(issuer_service, registry) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(issuer_service.authorize_issuer("short", AUTHORIZED_ISSUER))
    assert "short" not in asyncio.run(registry.list_all())


def test_list_issuers_summary(issuer_service) -> None:
    profiles, summary = asyncio.run(issuer_service.list_issuers())
    assert len(profiles) == 9
    assert summary.universities == 4
    assert summary.corporate_training == 2
    assert summary.government == 0
    assert summary.total_certificates_issued == sum(p.total_certificates for p in profiles)
