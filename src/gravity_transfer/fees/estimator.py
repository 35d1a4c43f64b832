"""Tiered bridge fee quotes from relay congestion."""

from __future__ import annotations

import asyncio
import logging
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, DecimalException, localcontext

from ..constants import FEE_QUOTE_DECIMALS
from ..domain import (
    HUB_CHAIN,
    BridgeFee,
    Erc20Token,
    NativeToken,
    SupportedChain,
    Token,
    price_denom_of,
)
from ..exceptions import FeeRetrievalError, InvalidInputError
from ..units import DECIMAL_PRECISION, format_decimal, parse_decimal
from .relay import GravityInfoClient, PendingBatch

logger = logging.getLogger(__name__)

_QUANTUM = Decimal(1).scaleb(-FEE_QUOTE_DECIMALS)

# (id, label, multiplier of the congestion fee)
FEE_TIERS: tuple[tuple[int, str, int], ...] = (
    (1, "Slow", 1),
    (2, "Fast", 2),
    (3, "Instant", 4),
)


def sum_congestion_fee(batches: list[PendingBatch], contract: str) -> Decimal:
    """Sum ``erc20_fee.amount`` over every pending transaction paying in ``contract``.

    Raises:
        FeeRetrievalError: If the relay reports a sum too large to represent.
    """
    target = contract.lower()
    try:
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            total = sum(
                (
                    tx.erc20_fee.amount
                    for batch in batches
                    for tx in batch.transactions
                    if tx.erc20_fee.contract.lower() == target
                ),
                Decimal(0),
            )
            return total.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    except DecimalException as e:
        logger.error("Congestion fee for %s is out of range", contract)
        raise FeeRetrievalError(
            f"Relay reported an out-of-range congestion fee for {contract}"
        ) from e


def _tier_amounts(
    congestion_fee: Decimal, multiplier: int, price: Decimal
) -> tuple[Decimal, Decimal]:
    """Return (tier in quote currency, tier in token units)."""
    try:
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            tier = congestion_fee * multiplier
            token_amount = (tier / price).quantize(_QUANTUM, rounding=ROUND_DOWN)
    except DecimalException as e:
        logger.error("Fee tier %s / price %s is out of range", congestion_fee, price)
        raise InvalidInputError(
            f"token price {price} is too small to quote a fee"
        ) from e
    return tier, token_amount


def fee_exceeds_balance(fee: BridgeFee, amount: str | None, balance: str) -> bool:
    """Whether sending ``amount`` plus ``fee`` would overdraw ``balance``."""
    total = parse_decimal(amount or "0") + parse_decimal(fee.amount, "fee amount")
    return total > parse_decimal(balance, "balance")


class FeeEstimator:
    """Quotes slow/fast/instant bridge fees for transfers leaving the hub.

    The congestion fee reported by the relay is in the quote currency; tiers
    are converted to token units with the caller-supplied price.
    """

    def __init__(
        self,
        relay: GravityInfoClient,
        deadline_seconds: float | None = None,
        hub_chain: SupportedChain = HUB_CHAIN,
    ):
        self.relay = relay
        self.deadline_seconds = deadline_seconds
        self.hub_chain = hub_chain

    def _validate(
        self, from_chain: SupportedChain, token: Token, token_price: object
    ) -> tuple[Erc20Token, Decimal]:
        price = parse_decimal(token_price, "token price")
        if price == 0:
            raise InvalidInputError("token price must be positive")

        if isinstance(token, NativeToken):
            raise InvalidInputError(
                f"Bridge fees are quoted per ERC20 contract; {token.symbol} is a native token"
            )
        if not isinstance(token, Erc20Token):
            raise InvalidInputError("No token info!")

        if from_chain != self.hub_chain:
            raise InvalidInputError(
                f"Bridge fees are only defined for transfers from {self.hub_chain.value}, "
                f"not {from_chain.value}"
            )
        return token, price

    async def _fetch(self) -> list[PendingBatch]:
        if self.deadline_seconds is None or self.deadline_seconds <= 0:
            return await self.relay.fetch_pending_batches()
        try:
            async with asyncio.timeout(self.deadline_seconds):
                return await self.relay.fetch_pending_batches()
        except TimeoutError as e:
            logger.error("Relay did not answer within %ss", self.deadline_seconds)
            raise FeeRetrievalError(
                f"Relay did not answer within {self.deadline_seconds}s"
            ) from e

    async def get_fees(
        self, from_chain: SupportedChain, token: Token, token_price: object
    ) -> list[BridgeFee]:
        """Return the three fee tiers for bridging ``token`` out of the hub.

        Args:
            from_chain: Source chain of the transfer; must be the hub
            token: ERC20 token being bridged
            token_price: Price of one token in the quote currency

        Returns:
            Slow, Fast and Instant ``BridgeFee`` entries, in that order

        Raises:
            InvalidInputError: If the price, token or chain is unusable
            FeeRetrievalError: If congestion data cannot be fetched or is empty
        """
        erc20, price = self._validate(from_chain, token, token_price)

        batches = await self._fetch()
        if not batches:
            logger.error("Relay returned no pending batches")
            raise FeeRetrievalError("No pending batches to derive a fee from")

        congestion_fee = sum_congestion_fee(batches, erc20.address)
        logger.debug(
            "Congestion fee for %s (priced as %s): %s over %d batch(es)",
            erc20.symbol,
            price_denom_of(erc20),
            congestion_fee,
            len(batches),
        )

        fees: list[BridgeFee] = []
        for fee_id, label, multiplier in FEE_TIERS:
            tier, token_amount = _tier_amounts(congestion_fee, multiplier, price)
            fees.append(
                BridgeFee(
                    id=fee_id,
                    label=label,
                    denom=erc20.symbol,
                    amount=format_decimal(token_amount),
                    amount_in_currency=format_decimal(tier),
                )
            )
        return fees
