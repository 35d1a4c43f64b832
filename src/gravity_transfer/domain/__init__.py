"""Domain models for bridge transfers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..exceptions import MissingTokenInfoError


class SupportedChain(str, Enum):
    GRAVITY_BRIDGE = "gravity-bridge"
    ETH = "eth"
    OSMOSIS = "osmosis"
    COSMOS = "cosmoshub"


HUB_CHAIN = SupportedChain.GRAVITY_BRIDGE

COSMOS_CHAINS = frozenset(
    {SupportedChain.GRAVITY_BRIDGE, SupportedChain.OSMOSIS, SupportedChain.COSMOS}
)
ETH_CHAINS = frozenset({SupportedChain.ETH})


def is_cosmos_chain(chain: SupportedChain) -> bool:
    return chain in COSMOS_CHAINS


def is_eth_chain(chain: SupportedChain) -> bool:
    return chain in ETH_CHAINS


class BroadcastMode(str, Enum):
    """Cosmos SDK broadcast modes; SYNC waits for mempool acceptance only."""

    SYNC = "BROADCAST_MODE_SYNC"
    ASYNC = "BROADCAST_MODE_ASYNC"


class BroadcastSource(str, Enum):
    """Which submission path a signed transaction takes."""

    LCD = "lcd"
    WALLET = "wallet"


@dataclass(frozen=True)
class Erc20Token:
    """An Ethereum ERC20 token, held on Gravity Bridge as a ``gravity0x...`` voucher."""

    address: str
    decimals: int
    symbol: str
    price_denom: str | None = None


@dataclass(frozen=True)
class NativeToken:
    """A Cosmos-native token identified by its on-chain denom."""

    denom: str
    decimals: int
    symbol: str
    price_denom: str | None = None


Token = Union[Erc20Token, NativeToken]


def price_denom_of(token: Token) -> str:
    """Return the identifier the price service quotes ``token`` under.

    Raises:
        MissingTokenInfoError: If ``token`` is neither an ERC20 nor a native token.
    """
    if isinstance(token, Erc20Token):
        return token.price_denom or token.symbol
    if isinstance(token, NativeToken):
        return token.price_denom or token.denom
    raise MissingTokenInfoError("No token info!")


@dataclass(frozen=True)
class Coin:
    """Amount in the smallest unit of ``denom``."""

    denom: str
    amount: str

    def to_dict(self) -> dict[str, str]:
        return {"denom": self.denom, "amount": self.amount}


@dataclass(frozen=True)
class BridgeFee:
    """One selectable bridge fee tier.

    ``amount`` is in token units, ``amount_in_currency`` in the quote currency.
    """

    id: int
    label: str
    denom: str
    amount: str
    amount_in_currency: str

    def to_dict(self) -> dict[str, str | int]:
        return {
            "id": self.id,
            "label": self.label,
            "denom": self.denom,
            "amount": self.amount,
            "amountInCurrency": self.amount_in_currency,
        }


@dataclass(frozen=True)
class Transfer:
    """A single user-initiated transfer request.

    Amounts are human decimal strings. ``tx_fee`` is the network fee handed to
    the signing wallet, already in smallest units.
    """

    from_chain: SupportedChain
    to_chain: SupportedChain
    from_address: str
    to_address: str
    amount: str
    token: Token
    bridge_fee: BridgeFee | None = None
    chain_fee: str | None = None
    tx_fee: str | None = None
    memo: str | None = None
