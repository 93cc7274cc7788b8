from __future__ import annotations

import pytest

from app.services.errors import ValidationError
from app.services.wallets import (
    MAX_WALLET_LENGTH,
    require_mint_address,
    require_plausible_wallet,
)


@pytest.mark.parametrize("length", [20, 44, MAX_WALLET_LENGTH])
def test_plausible_wallet_lengths_are_accepted(length) -> None:
    wallet = "W" * length
    assert require_plausible_wallet(wallet) == wallet


@pytest.mark.parametrize("value", ["W" * 19, "W" * (MAX_WALLET_LENGTH + 1), None, 42])
def test_implausible_wallets_are_rejected(value) -> None:
    with pytest.raises(ValidationError) as exc_info:
        require_plausible_wallet(value, error="Invalid issuer public key")
    assert exc_info.value.error == "Invalid issuer public key"


def test_mint_address_must_be_base58() -> None:
    assert require_mint_address("1" * 32) == "1" * 32
    with pytest.raises(ValidationError):
        require_mint_address("0" * 32)
