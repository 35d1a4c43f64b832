from __future__ import annotations

from .base import CosmosWallet, EthBridgeHandle, EthWalletManager
from .web3_wallet import Web3BridgeHandle, Web3WalletManager

__all__ = [
    "CosmosWallet",
    "EthBridgeHandle",
    "EthWalletManager",
    "Web3BridgeHandle",
    "Web3WalletManager",
]
