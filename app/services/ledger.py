"""Solana ledger client for the on-chain certificate path.

Minting a certificate NFT is three dependent transactions, each signed by
the issuer, sent and confirmed before the next:

  1. create_mint     — allocate a rent-exempt mint account and initialize
                       it: 0 decimals, no freeze authority, the issuer as
                       payer and mint authority
  2. create_account  — the holder's associated token account for that mint
  3. mint_to         — one unit into the holder's account

Each step can fail on its own (timeout, payer out of SOL, RPC error).
Any failure aborts the whole mint with an UpstreamError naming the step.
There is no retry and no compensation: a failure after step 1 leaves an
empty mint on chain. Retried requests are de-duplicated one level up, by
the issuance service's idempotency key, not here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from solders.transaction import Transaction
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import (
    InitializeMintParams,
    MintToParams,
    create_associated_token_account,
    get_associated_token_address,
    initialize_mint,
    mint_to,
)

from app.core.metrics import LEDGER_CALLS
from app.services.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000


@dataclass(frozen=True, slots=True)
class MintReceipt:
    signature: str
    mint: str
    token_account: str
    authority: str


def parse_issuer_secret(secret: object) -> Keypair:
    """Accept a 64-byte keypair as a list of ints or its JSON text.

    That is the format `solana-keygen` writes to keypair files.
    """
    values = secret
    if isinstance(secret, str):
        try:
            values = json.loads(secret)
        except ValueError:
            raise ValidationError(
                "issuer private key must be a JSON array of 64 bytes",
                error="Invalid issuer private key",
            ) from None

    if (
        not isinstance(values, list)
        or len(values) != 64
        or not all(isinstance(v, int) and 0 <= v <= 255 for v in values)
    ):
        raise ValidationError(
            "issuer private key must be a JSON array of 64 bytes",
            error="Invalid issuer private key",
        )
    try:
        return Keypair.from_bytes(bytes(values))
    except ValueError:
        raise ValidationError(
            "issuer private key is not a valid ed25519 keypair",
            error="Invalid issuer private key",
        ) from None


def parse_wallet(wallet: str) -> Pubkey:
    try:
        return Pubkey.from_string(wallet)
    except ValueError:
        raise ValidationError(
            f"{wallet!r} is not a valid Solana address",
            error="Invalid wallet address",
        ) from None


@runtime_checkable
class Ledger(Protocol):
    network: str

    async def mint_certificate(
        self, holder_wallet: str, issuer: Keypair
    ) -> MintReceipt: ...

    async def connection_status(self) -> dict[str, object]: ...

    async def balance(self, wallet: str) -> float: ...

    async def request_airdrop(self, wallet: str, amount_sol: float) -> str: ...


class SolanaLedger:
    def __init__(self, rpc_url: str, network: str = "devnet") -> None:
        self.rpc_url = rpc_url
        self.network = network
        self._client = AsyncClient(rpc_url)

    async def _step(self, step: str, coro):
        try:
            result = await coro
        except Exception as exc:
            LEDGER_CALLS.labels(step=step, result="error").inc()
            logger.exception("Ledger step %s failed", step)
            raise UpstreamError(
                f"ledger {step} failed: {exc}",
                error="Failed to mint certificate on blockchain",
            ) from exc
        LEDGER_CALLS.labels(step=step, result="ok").inc()
        return result

    async def _send(
        self, instructions: list[Instruction], signers: list[Keypair]
    ) -> str:
        """Sign with `signers` (the first pays), send, wait for confirmation."""
        blockhash = (await self._client.get_latest_blockhash()).value.blockhash
        message = Message.new_with_blockhash(
            instructions, signers[0].pubkey(), blockhash
        )
        tx = Transaction(signers, message, blockhash)
        signature = (
            await self._client.send_transaction(
                tx, opts=TxOpts(preflight_commitment=Confirmed)
            )
        ).value
        await self._client.confirm_transaction(signature, commitment=Confirmed)
        return str(signature)

    async def _mint_rent(self) -> int:
        resp = await self._client.get_minimum_balance_for_rent_exemption(MINT_LEN)
        return resp.value

    async def _create_mint(self, issuer: Keypair, mint: Keypair) -> str:
        authority = issuer.pubkey()
        return await self._send(
            [
                create_account(
                    CreateAccountParams(
                        from_pubkey=authority,
                        to_pubkey=mint.pubkey(),
                        lamports=await self._mint_rent(),
                        space=MINT_LEN,
                        owner=TOKEN_PROGRAM_ID,
                    )
                ),
                initialize_mint(
                    InitializeMintParams(
                        decimals=0,
                        program_id=TOKEN_PROGRAM_ID,
                        mint=mint.pubkey(),
                        mint_authority=authority,
                        freeze_authority=None,
                    )
                ),
            ],
            [issuer, mint],
        )

    async def mint_certificate(self, holder_wallet: str, issuer: Keypair) -> MintReceipt:
        holder = parse_wallet(holder_wallet)
        authority = issuer.pubkey()
        mint = Keypair()
        mint_address = str(mint.pubkey())

        await self._step("create_mint", self._create_mint(issuer, mint))
        logger.info("Mint created mint=%s", mint_address, extra={"mint": mint_address})

        token_account = get_associated_token_address(holder, mint.pubkey())
        await self._step(
            "create_account",
            self._send(
                [create_associated_token_account(authority, holder, mint.pubkey())],
                [issuer],
            ),
        )
        logger.info(
            "Token account created account=%s owner=%s", token_account, holder
        )

        signature = await self._step(
            "mint_to",
            self._send(
                [
                    mint_to(
                        MintToParams(
                            program_id=TOKEN_PROGRAM_ID,
                            mint=mint.pubkey(),
                            dest=token_account,
                            mint_authority=authority,
                            amount=1,
                        )
                    )
                ],
                [issuer],
            ),
        )
        logger.info(
            "Certificate NFT minted mint=%s signature=%s",
            mint_address,
            signature,
            extra={"mint": mint_address, "wallet": holder_wallet},
        )
        return MintReceipt(
            signature=signature,
            mint=mint_address,
            token_account=str(token_account),
            authority=str(authority),
        )

    async def connection_status(self) -> dict[str, object]:
        try:
            slot = (await self._client.get_slot()).value
            version = (await self._client.get_version()).value
        except Exception as exc:
            logger.warning("Ledger status check failed: %s", exc)
            return {
                "connected": False,
                "network": self.network,
                "rpc_url": self.rpc_url,
                "error": str(exc),
            }
        return {
            "connected": True,
            "network": self.network,
            "rpc_url": self.rpc_url,
            "current_slot": slot,
            "version": version.solana_core,
        }

    async def balance(self, wallet: str) -> float:
        pubkey = parse_wallet(wallet)
        try:
            lamports = (await self._client.get_balance(pubkey)).value
        except Exception:
            logger.exception("Balance lookup failed wallet=%s", wallet)
            return 0.0
        return lamports / LAMPORTS_PER_SOL

    async def request_airdrop(self, wallet: str, amount_sol: float) -> str:
        pubkey = parse_wallet(wallet)
        lamports = int(amount_sol * LAMPORTS_PER_SOL)
        try:
            signature = (await self._client.request_airdrop(pubkey, lamports)).value
            await self._client.confirm_transaction(signature)
        except Exception as exc:
            logger.exception("Airdrop failed wallet=%s", wallet)
            raise UpstreamError(
                f"airdrop failed: {exc}", error="Failed to airdrop SOL"
            ) from exc
        return str(signature)

    async def close(self) -> None:
        await self._client.close()
