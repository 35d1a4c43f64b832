"""Per-invocation CLI state and the collaborators built from it."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .domain import SupportedChain
from .fees import FeeEstimator, GravityInfoClient
from .router import TransferRouter
from .settings import TransferSettings
from .wallets import Web3WalletManager


@dataclass
class AppState:
    """Loaded settings plus factories for the clients a command needs.

    Clients are built on demand by the commands that use them.
    """

    settings: TransferSettings
    logger: logging.Logger

    def fee_estimator(self) -> FeeEstimator:
        s = self.settings
        relay = GravityInfoClient(
            url=s.relay_info_url, timeout=s.relay_timeout, max_tries=s.relay_max_tries
        )
        return FeeEstimator(relay, deadline_seconds=s.relay_deadline_seconds)

    def eth_wallets(self) -> Web3WalletManager:
        s = self.settings
        return Web3WalletManager(
            {SupportedChain.ETH: s.eth_rpc},
            s.eth_private_key_value,
            receipt_timeout=s.receipt_timeout,
        )

    def transfer_router(self, eth_wallets: Web3WalletManager | None = None) -> TransferRouter:
        s = self.settings
        return TransferRouter(
            eth_wallets=eth_wallets,
            gravity_contracts={SupportedChain.ETH: s.gravity_contract_address},
            broadcast_timeout=s.broadcast_timeout,
        )
