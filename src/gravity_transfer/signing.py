"""Sign-and-broadcast paths for transfers leaving a Cosmos chain."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from .constants import DEFAULT_GAS_LIMIT
from .cosmos.messages import (
    create_send_to_ethereum_amino_message,
    create_send_to_ethereum_message,
)
from .cosmos.tx import create_amino_tx_raw_bytes, create_tx_raw_bytes
from .domain import BroadcastMode, BroadcastSource, SupportedChain, Transfer
from .exceptions import WalletCapabilityError
from .wallets.base import CosmosWallet

logger = logging.getLogger(__name__)


class SigningPath(str, Enum):
    DIRECT = "direct"
    AMINO = "amino"


class SigningDispatcher:
    """Picks the signing path the wallet supports and submits the transfer.

    Direct signing always wins when available. Broadcasts are SYNC (mempool
    acceptance) and are never retried.
    """

    def __init__(
        self,
        wallet: CosmosWallet,
        gas_limit: int = DEFAULT_GAS_LIMIT,
        broadcast_timeout: float | None = None,
    ):
        self.wallet = wallet
        self.gas_limit = gas_limit
        self.broadcast_timeout = broadcast_timeout

    async def select_signing_path(self, chain: SupportedChain) -> SigningPath:
        """Return the signing path for ``chain``.

        Raises:
            WalletCapabilityError: If the wallet supports neither direct nor amino signing.
        """
        if await self.wallet.can_sign_direct(chain):
            return SigningPath.DIRECT
        if await self.wallet.can_sign_amino(chain):
            return SigningPath.AMINO

        logger.error("Wallet cannot sign direct or amino on %s", chain.value)
        raise WalletCapabilityError(
            "Wallet should support direct signing or amino signing!"
        )

    async def dispatch(self, transfer: Transfer) -> str:
        """Sign and broadcast ``transfer``; return the transaction hash."""
        # Input errors surface before any wallet prompt
        proto_message = create_send_to_ethereum_message(transfer)

        path = await self.select_signing_path(transfer.from_chain)
        logger.info("Signing transfer from %s with %s mode", transfer.from_chain.value, path.value)

        if path is SigningPath.DIRECT:
            return await self._broadcast_with_direct_sign(transfer, proto_message)
        return await self._broadcast_with_amino_sign(transfer, proto_message)

    async def _broadcast(
        self, chain: SupportedChain, tx_bytes: bytes, source: BroadcastSource
    ) -> str:
        broadcast = self.wallet.broadcast(chain, tx_bytes, BroadcastMode.SYNC, source)
        if self.broadcast_timeout is None or self.broadcast_timeout <= 0:
            return await broadcast
        async with asyncio.timeout(self.broadcast_timeout):
            return await broadcast

    async def _broadcast_with_direct_sign(self, transfer: Transfer, message) -> str:
        signature = await self.wallet.sign_direct(
            transfer.from_chain,
            [message],
            transfer.tx_fee or "0",
            self.gas_limit,
            transfer.memo or "",
        )
        tx_bytes = create_tx_raw_bytes(signature)
        return await self._broadcast(transfer.from_chain, tx_bytes, BroadcastSource.LCD)

    async def _broadcast_with_amino_sign(self, transfer: Transfer, message) -> str:
        amino_message = create_send_to_ethereum_amino_message(transfer)

        sign_response = await self.wallet.sign_amino(
            transfer.from_chain,
            [amino_message],
            transfer.tx_fee or "0",
            self.gas_limit,
            transfer.memo or "",
        )
        # Body stays protobuf; the amino signature covers the same values
        tx_bytes = create_amino_tx_raw_bytes(sign_response, [message])
        return await self._broadcast(transfer.from_chain, tx_bytes, BroadcastSource.WALLET)
