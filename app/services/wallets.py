from __future__ import annotations

import logging
import re

from app.services.errors import ValidationError

logger = logging.getLogger(__name__)

# Demo wallets such as "Demo1111..." are not valid ed25519 keys and are
# accepted. The upper bound is the width of the wallet columns in the
# certificates table.
MIN_WALLET_LENGTH = 20
MAX_WALLET_LENGTH = 128

_BASE58 = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def require_plausible_wallet(
    value: object, *, error: str = "Invalid wallet address"
) -> str:
    if not isinstance(value, str) or not (
        MIN_WALLET_LENGTH <= len(value) <= MAX_WALLET_LENGTH
    ):
        logger.warning("Rejected implausible wallet=%.40r", value)
        raise ValidationError("Please provide a valid wallet address", error=error)
    return value


def require_mint_address(value: object) -> str:
    if not isinstance(value, str) or not _BASE58.match(value):
        raise ValidationError(
            "Please provide a valid mint address", error="Invalid mint address"
        )
    return value
