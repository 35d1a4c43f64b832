"""Wallet collaborator interfaces."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from ..cosmos.lcd import LcdClient
from ..cosmos.tx import AminoSignResponse, DirectSignResponse
from ..domain import BroadcastMode, BroadcastSource, SupportedChain
from ..exceptions import WalletCapabilityError

logger = logging.getLogger(__name__)


class CosmosWallet(ABC):
    """A connected Cosmos wallet session.

    Signing may prompt a human, so one session must not be asked to sign two
    transfers at the same time.
    """

    def __init__(self, lcd_clients: Mapping[SupportedChain, LcdClient] | None = None):
        self.lcd_clients = dict(lcd_clients or {})

    @abstractmethod
    async def can_sign_direct(self, chain: SupportedChain) -> bool:
        """Whether the wallet supports protobuf (direct) signing on ``chain``."""

    @abstractmethod
    async def can_sign_amino(self, chain: SupportedChain) -> bool:
        """Whether the wallet supports legacy amino JSON signing on ``chain``."""

    @abstractmethod
    async def sign_direct(
        self,
        chain: SupportedChain,
        messages: Sequence[Any],
        fee_amount: str,
        gas_limit: int,
        memo: str,
    ) -> DirectSignResponse:
        """Sign protobuf ``Any`` messages in direct mode."""

    @abstractmethod
    async def sign_amino(
        self,
        chain: SupportedChain,
        messages: Sequence[dict[str, Any]],
        fee_amount: str,
        gas_limit: int,
        memo: str,
    ) -> AminoSignResponse:
        """Sign amino JSON messages."""

    @abstractmethod
    async def broadcast_via_wallet(
        self, chain: SupportedChain, tx_bytes: bytes, mode: BroadcastMode
    ) -> str:
        """Submit ``tx_bytes`` through the wallet's own node connection."""

    async def broadcast(
        self,
        chain: SupportedChain,
        tx_bytes: bytes,
        mode: BroadcastMode,
        source: BroadcastSource,
    ) -> str:
        """Submit signed transaction bytes and return the transaction hash."""
        if source is BroadcastSource.WALLET:
            return await self.broadcast_via_wallet(chain, tx_bytes, mode)

        lcd = self.lcd_clients.get(chain)
        if lcd is None:
            raise WalletCapabilityError(f"No LCD endpoint configured for {chain.value}")
        logger.debug("Broadcasting %d bytes to %s via LCD", len(tx_bytes), chain.value)
        return await asyncio.to_thread(lcd.broadcast_tx, tx_bytes, mode)


class EthBridgeHandle(Protocol):
    """Ethereum-side wallet able to approve ERC20 spending and call Gravity.sol."""

    async def approve(
        self, owner: str, token_address: str, spender: str, amount: str
    ) -> Any: ...

    async def send_to_cosmos(
        self,
        contract: str,
        sender: str,
        token_address: str,
        destination: str,
        amount: str,
    ) -> Mapping[str, Any]: ...


class EthWalletManager(Protocol):
    async def get_web3(self, chain: SupportedChain) -> EthBridgeHandle | None: ...
