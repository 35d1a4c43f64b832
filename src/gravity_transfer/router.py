"""Entry point that routes a transfer to its directional handler."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum

from typing_extensions import assert_never

from .constants import DEFAULT_GAS_LIMIT, GRAVITY_ETH_CONTRACT
from .domain import (
    Erc20Token,
    SupportedChain,
    Transfer,
    is_cosmos_chain,
    is_eth_chain,
)
from .exceptions import (
    BroadcastError,
    UnsupportedChainError,
    UnsupportedRouteError,
    WalletCapabilityError,
    WrongTokenTypeError,
)
from .signing import SigningDispatcher
from .units import scale_amount
from .wallets.base import CosmosWallet, EthWalletManager

logger = logging.getLogger(__name__)


class TransferRoute(Enum):
    """Every (source, destination) pair this bridge can carry."""

    GRAVITY_TO_ETH = (SupportedChain.GRAVITY_BRIDGE, SupportedChain.ETH)
    ETH_TO_GRAVITY = (SupportedChain.ETH, SupportedChain.GRAVITY_BRIDGE)


_ROUTES_BY_PAIR = {route.value: route for route in TransferRoute}


def resolve_route(from_chain: SupportedChain, to_chain: SupportedChain) -> TransferRoute:
    route = _ROUTES_BY_PAIR.get((from_chain, to_chain))
    if route is None:
        message = (
            f"Transferring from {from_chain.value} to {to_chain.value} "
            "is not supported on Gravity Bridge!"
        )
        logger.error("[route] %s", message)
        raise UnsupportedRouteError(message)
    return route


def is_supported_route(from_chain: SupportedChain, to_chain: SupportedChain) -> bool:
    return (from_chain, to_chain) in _ROUTES_BY_PAIR


class TransferRouter:
    """Validates a transfer's chain pair and hands it to the matching handler.

    Args:
        cosmos_wallet: Wallet for transfers leaving Gravity Bridge
        eth_wallets: Wallet manager for transfers leaving Ethereum
        gravity_contracts: Gravity.sol address per Ethereum chain
        gas_limit: Gas limit for Cosmos transactions
        broadcast_timeout: Deadline for a Cosmos broadcast, in seconds
    """

    def __init__(
        self,
        cosmos_wallet: CosmosWallet | None = None,
        eth_wallets: EthWalletManager | None = None,
        gravity_contracts: Mapping[SupportedChain, str] | None = None,
        gas_limit: int = DEFAULT_GAS_LIMIT,
        broadcast_timeout: float | None = None,
    ):
        self.cosmos_wallet = cosmos_wallet
        self.eth_wallets = eth_wallets
        self.gravity_contracts = dict(
            gravity_contracts or {SupportedChain.ETH: GRAVITY_ETH_CONTRACT}
        )
        self.gas_limit = gas_limit
        self.broadcast_timeout = broadcast_timeout

    async def route(self, transfer: Transfer) -> str:
        """Submit ``transfer`` and return its transaction hash."""
        logger.info(
            "[route] %s -> %s: %s %s",
            transfer.from_chain.value,
            transfer.to_chain.value,
            transfer.amount,
            getattr(transfer.token, "symbol", "?"),
        )
        route = resolve_route(transfer.from_chain, transfer.to_chain)

        match route:
            case TransferRoute.GRAVITY_TO_ETH:
                return await self.send_to_ethereum(transfer)
            case TransferRoute.ETH_TO_GRAVITY:
                return await self.send_to_cosmos(transfer)
            case _:
                assert_never(route)

    async def send_to_ethereum(self, transfer: Transfer) -> str:
        """Bridge out of a Cosmos chain with a signed ``MsgSendToEth``."""
        if not is_cosmos_chain(transfer.from_chain):
            message = f"{transfer.from_chain.value} is not a supported Cosmos chain!"
            logger.error("[send_to_ethereum] %s", message)
            raise UnsupportedChainError(message)
        if self.cosmos_wallet is None:
            message = "No Cosmos wallet connected"
            logger.error("[send_to_ethereum] %s", message)
            raise WalletCapabilityError(message)

        dispatcher = SigningDispatcher(
            self.cosmos_wallet,
            gas_limit=self.gas_limit,
            broadcast_timeout=self.broadcast_timeout,
        )
        tx_hash = await dispatcher.dispatch(transfer)
        logger.info("[send_to_ethereum] Sending succeed! TX hash: %s", tx_hash)
        return tx_hash

    async def send_to_cosmos(self, transfer: Transfer) -> str:
        """Bridge an ERC20 token from Ethereum into Gravity Bridge."""
        token = transfer.token
        if not isinstance(token, Erc20Token):
            message = "Gravity Transferer only allow ERC20 token!"
            logger.error("[send_to_cosmos] %s", message)
            raise WrongTokenTypeError(message)

        if not is_eth_chain(transfer.from_chain):
            message = f"Transferring from {transfer.from_chain.value} is not supported on Gravity Bridge"
            logger.error("[send_to_cosmos] %s", message)
            raise UnsupportedChainError(message)

        amount = scale_amount(transfer.amount, token.decimals)
        contract = self.gravity_contracts.get(transfer.from_chain)
        if contract is None:
            message = f"No Gravity contract known for {transfer.from_chain.value}"
            logger.error("[send_to_cosmos] %s", message)
            raise UnsupportedChainError(message)

        handle = (
            await self.eth_wallets.get_web3(transfer.from_chain)
            if self.eth_wallets is not None
            else None
        )
        if handle is None:
            message = "Can't get web3 from current wallet!"
            logger.error("[send_to_cosmos] %s", message)
            raise WalletCapabilityError(message)

        await handle.approve(transfer.from_address, token.address, contract, amount)
        response = await handle.send_to_cosmos(
            contract, transfer.from_address, token.address, transfer.to_address, amount
        )

        tx_hash = response.get("transactionHash") if isinstance(response, Mapping) else None
        if not tx_hash:
            raise BroadcastError("No TX hash")

        logger.info("[send_to_cosmos] Sending succeed! TX hash: %s", tx_hash)
        return tx_hash
