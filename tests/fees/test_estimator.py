from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from gravity_transfer.domain import BridgeFee, Erc20Token, NativeToken, SupportedChain
from gravity_transfer.exceptions import FeeRetrievalError, InvalidInputError
from gravity_transfer.fees.estimator import (
    FeeEstimator,
    fee_exceeds_balance,
    sum_congestion_fee,
)
from gravity_transfer.fees.relay import Erc20Fee, PendingBatch, PendingTransaction

USDC = Erc20Token(
    address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", decimals=6, symbol="USDC"
)
OTHER = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def _batch(*fees: tuple[str, str]) -> PendingBatch:
    return PendingBatch(
        transactions=[
            PendingTransaction(erc20_fee=Erc20Fee(contract=c, amount=Decimal(a)))
            for c, a in fees
        ]
    )


class FakeRelay:
    def __init__(self, batches=None, delay: float = 0.0, error: Exception | None = None):
        self.batches = batches if batches is not None else []
        self.delay = delay
        self.error = error
        self.calls = 0

    async def fetch_pending_batches(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.batches


def test_sum_congestion_fee_filters_by_contract_case_insensitive():
    batches = [
        _batch((USDC.address.lower(), "1.25"), (OTHER, "100")),
        _batch((USDC.address.upper().replace("0X", "0x"), "0.75")),
    ]
    assert sum_congestion_fee(batches, USDC.address) == Decimal("2")


def test_sum_congestion_fee_rounds_to_six_places():
    batches = [_batch((USDC.address, "0.0000004"), (USDC.address, "0.0000001"))]
    assert sum_congestion_fee(batches, USDC.address) == Decimal("0.000001")


def test_sum_congestion_fee_without_matches():
    assert sum_congestion_fee([_batch((OTHER, "5"))], USDC.address) == 0


@pytest.mark.asyncio
async def test_get_fees_tiers():
    estimator = FeeEstimator(FakeRelay([_batch((USDC.address, "10"))]))

    fees = await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "3")

    assert [(f.id, f.label) for f in fees] == [(1, "Slow"), (2, "Fast"), (3, "Instant")]
    assert [f.amount for f in fees] == ["3.333333", "6.666666", "13.333333"]
    assert [f.amount_in_currency for f in fees] == ["10", "20", "40"]
    assert all(f.denom == "USDC" for f in fees)


@pytest.mark.asyncio
async def test_get_fees_tiers_strictly_increase():
    estimator = FeeEstimator(FakeRelay([_batch((USDC.address, "0.5"))]))

    fees = await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, Decimal("1"))

    amounts = [Decimal(f.amount) for f in fees]
    assert amounts[0] < amounts[1] < amounts[2]
    assert amounts[1] == amounts[0] * 2
    assert amounts[2] == amounts[0] * 4


@pytest.mark.asyncio
async def test_get_fees_with_no_matching_congestion_is_zero():
    estimator = FeeEstimator(FakeRelay([_batch((OTHER, "5"))]))

    fees = await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "1")

    assert [f.amount for f in fees] == ["0", "0", "0"]


@pytest.mark.asyncio
async def test_get_fees_without_batches_fails():
    estimator = FeeEstimator(FakeRelay([]))

    with pytest.raises(FeeRetrievalError):
        await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "1")


@pytest.mark.asyncio
@pytest.mark.parametrize("price", ["0", "-1", "abc", None])
async def test_get_fees_rejects_bad_price(price):
    relay = FakeRelay([_batch((USDC.address, "1"))])

    with pytest.raises(InvalidInputError):
        await FeeEstimator(relay).get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, price)
    assert relay.calls == 0


@pytest.mark.asyncio
async def test_get_fees_rejects_native_token():
    relay = FakeRelay([_batch((USDC.address, "1"))])
    token = NativeToken(denom="ugraviton", decimals=6, symbol="GRAV")

    with pytest.raises(InvalidInputError, match="native token"):
        await FeeEstimator(relay).get_fees(SupportedChain.GRAVITY_BRIDGE, token, "1")
    assert relay.calls == 0


@pytest.mark.asyncio
async def test_get_fees_rejects_non_hub_source():
    relay = FakeRelay([_batch((USDC.address, "1"))])

    with pytest.raises(InvalidInputError):
        await FeeEstimator(relay).get_fees(SupportedChain.ETH, USDC, "1")
    assert relay.calls == 0


@pytest.mark.asyncio
async def test_get_fees_propagates_relay_failure():
    estimator = FeeEstimator(FakeRelay(error=FeeRetrievalError("down")))

    with pytest.raises(FeeRetrievalError, match="down"):
        await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "1")


@pytest.mark.asyncio
async def test_get_fees_deadline():
    estimator = FeeEstimator(
        FakeRelay([_batch((USDC.address, "1"))], delay=0.5), deadline_seconds=0.05
    )

    with pytest.raises(FeeRetrievalError, match="did not answer"):
        await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "1")


@pytest.mark.asyncio
async def test_get_fees_refetches_every_call():
    relay = FakeRelay([_batch((USDC.address, "1"))])
    estimator = FeeEstimator(relay)

    await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "1")
    await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "1")

    assert relay.calls == 2


def test_fee_exceeds_balance():
    fee = BridgeFee(id=1, label="Slow", denom="USDC", amount="1.5", amount_in_currency="1.5")

    assert fee_exceeds_balance(fee, "9", "10") is True
    assert fee_exceeds_balance(fee, "8.5", "10") is False
    assert fee_exceeds_balance(fee, None, "1") is True


def test_sum_congestion_fee_handles_base_unit_sized_amounts():
    batches = [_batch((USDC.address, "1e23"), (USDC.address, "0.0000005"))]

    total = sum_congestion_fee(batches, USDC.address)

    assert total == Decimal("100000000000000000000000.000001")


def test_sum_congestion_fee_out_of_range():
    batches = [_batch((USDC.address, "1e200"))]

    with pytest.raises(FeeRetrievalError, match="out-of-range"):
        sum_congestion_fee(batches, USDC.address)


@pytest.mark.asyncio
async def test_get_fees_with_tiny_price():
    token = Erc20Token(address=USDC.address, decimals=18, symbol="DUST")
    estimator = FeeEstimator(FakeRelay([_batch((USDC.address, "100"))]))

    fees = await estimator.get_fees(
        SupportedChain.GRAVITY_BRIDGE, token, "0.00000000000000000001"
    )

    assert [f.amount for f in fees] == [
        "10000000000000000000000",
        "20000000000000000000000",
        "40000000000000000000000",
    ]


@pytest.mark.asyncio
async def test_get_fees_price_too_small_to_quote():
    estimator = FeeEstimator(FakeRelay([_batch((USDC.address, "100"))]))

    with pytest.raises(InvalidInputError, match="too small"):
        await estimator.get_fees(SupportedChain.GRAVITY_BRIDGE, USDC, "1e-200")
