"""Builders for the Gravity Bridge ``MsgSendToEth`` message.

The same transfer is rendered two ways: a protobuf ``Any`` for direct signing
and the transaction body, and an amino JSON message for wallets that only
sign legacy amino documents. Both are produced from one
:class:`SendToEthAmounts`, so their values cannot drift apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any as AnyType

from typing_extensions import assert_never

from ..constants import (
    DEFAULT_FEE_DECIMALS,
    GRAVITY_DENOM_PREFIX,
    SEND_TO_ETH_AMINO_TYPE,
    SEND_TO_ETH_TYPE_URL,
)
from ..domain import Coin, Erc20Token, NativeToken, Token, Transfer
from ..exceptions import MissingTokenInfoError
from ..units import scale_amount, scale_amount_ceil
from . import protos

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendToEthAmounts:
    """Smallest-unit coins carried by a ``MsgSendToEth``."""

    amount: Coin
    bridge_fee: Coin
    chain_fee: Coin


def _require_token(token: object, caller: str) -> Token:
    if isinstance(token, (Erc20Token, NativeToken)):
        return token
    logger.error("[%s] No token info for %r", caller, token)
    raise MissingTokenInfoError("No token info!")


def convert_token_to_coin(token: Token, amount: str) -> Coin:
    """Wrap a smallest-unit ``amount`` in the denom Gravity Bridge uses for ``token``.

    ERC20 tokens live on Gravity Bridge as ``gravity<address>`` vouchers;
    native tokens keep their denom.
    """
    token = _require_token(token, "convert_token_to_coin")
    if isinstance(token, Erc20Token):
        return Coin(denom=f"{GRAVITY_DENOM_PREFIX}{token.address}", amount=amount)
    elif isinstance(token, NativeToken):
        return Coin(denom=token.denom, amount=amount)
    else:
        assert_never(token)


def convert_token_to_fee(token: Token, amount: str | None) -> Coin:
    """Scale a human chain-fee amount into a coin, rounding up.

    A missing or empty amount is a zero fee.
    """
    token = _require_token(token, "convert_token_to_fee")
    decimals = token.decimals if token.decimals is not None else DEFAULT_FEE_DECIMALS
    fee_amount = scale_amount_ceil(amount or "0", decimals)
    return convert_token_to_coin(token, fee_amount)


def build_send_to_eth_amounts(transfer: Transfer) -> SendToEthAmounts:
    """Compute the three coins of a send-to-Ethereum message.

    The transfer amount and bridge fee are truncated to the token's smallest
    unit; the chain fee is rounded up.

    Raises:
        MissingTokenInfoError: If the transfer token is not an ERC20 or native token.
        InvalidInputError: If an amount is malformed.
    """
    token = _require_token(transfer.token, "build_send_to_eth_amounts")

    amount = scale_amount(transfer.amount, token.decimals)
    bridge_fee_amount = (
        scale_amount(transfer.bridge_fee.amount, token.decimals)
        if transfer.bridge_fee
        else "0"
    )

    return SendToEthAmounts(
        amount=convert_token_to_coin(token, amount),
        bridge_fee=convert_token_to_coin(token, bridge_fee_amount),
        chain_fee=convert_token_to_fee(token, transfer.chain_fee),
    )


def _proto_coin(coin: Coin) -> AnyType:
    return protos.Coin(denom=coin.denom, amount=coin.amount)


def create_send_to_ethereum_message(transfer: Transfer) -> AnyType:
    """Build the protobuf ``MsgSendToEth`` wrapped in ``google.protobuf.Any``."""
    amounts = build_send_to_eth_amounts(transfer)
    message = protos.MsgSendToEth(
        sender=transfer.from_address,
        eth_dest=transfer.to_address,
        amount=_proto_coin(amounts.amount),
        bridge_fee=_proto_coin(amounts.bridge_fee),
        chain_fee=_proto_coin(amounts.chain_fee),
    )
    logger.info(
        "[create_send_to_ethereum_message] MsgSendToEth sender=%s eth_dest=%s "
        "amount=%s bridge_fee=%s chain_fee=%s",
        transfer.from_address,
        transfer.to_address,
        amounts.amount,
        amounts.bridge_fee,
        amounts.chain_fee,
    )

    return protos.Any(type_url=SEND_TO_ETH_TYPE_URL, value=message.SerializeToString())


def create_send_to_ethereum_amino_message(transfer: Transfer) -> dict[str, AnyType]:
    """Build the legacy amino JSON form of ``MsgSendToEth``."""
    amounts = build_send_to_eth_amounts(transfer)
    message = {
        "type": SEND_TO_ETH_AMINO_TYPE,
        "value": {
            "sender": transfer.from_address,
            "eth_dest": transfer.to_address,
            "amount": amounts.amount.to_dict(),
            "bridge_fee": amounts.bridge_fee.to_dict(),
            "chain_fee": amounts.chain_fee.to_dict(),
        },
    }

    logger.info("[create_send_to_ethereum_amino_message] MsgSendToEth: %s", message)
    return message
