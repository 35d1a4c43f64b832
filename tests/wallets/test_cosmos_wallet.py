from __future__ import annotations

from unittest.mock import Mock

import pytest

from gravity_transfer.domain import BroadcastMode, BroadcastSource, SupportedChain
from gravity_transfer.exceptions import WalletCapabilityError
from gravity_transfer.wallets.base import CosmosWallet


class StubWallet(CosmosWallet):
    def __init__(self, lcd_clients=None):
        super().__init__(lcd_clients)
        self.wallet_broadcasts: list[tuple] = []

    async def can_sign_direct(self, chain):
        return True

    async def can_sign_amino(self, chain):
        return True

    async def sign_direct(self, chain, messages, fee_amount, gas_limit, memo):
        raise NotImplementedError

    async def sign_amino(self, chain, messages, fee_amount, gas_limit, memo):
        raise NotImplementedError

    async def broadcast_via_wallet(self, chain, tx_bytes, mode):
        self.wallet_broadcasts.append((chain, tx_bytes, mode))
        return "WALLET_HASH"


@pytest.mark.asyncio
async def test_broadcast_via_lcd():
    lcd = Mock()
    lcd.broadcast_tx.return_value = "LCD_HASH"
    wallet = StubWallet({SupportedChain.GRAVITY_BRIDGE: lcd})

    tx_hash = await wallet.broadcast(
        SupportedChain.GRAVITY_BRIDGE, b"\x01", BroadcastMode.SYNC, BroadcastSource.LCD
    )

    assert tx_hash == "LCD_HASH"
    lcd.broadcast_tx.assert_called_once_with(b"\x01", BroadcastMode.SYNC)
    assert wallet.wallet_broadcasts == []


@pytest.mark.asyncio
async def test_broadcast_via_wallet():
    lcd = Mock()
    wallet = StubWallet({SupportedChain.GRAVITY_BRIDGE: lcd})

    tx_hash = await wallet.broadcast(
        SupportedChain.GRAVITY_BRIDGE, b"\x02", BroadcastMode.SYNC, BroadcastSource.WALLET
    )

    assert tx_hash == "WALLET_HASH"
    assert wallet.wallet_broadcasts == [
        (SupportedChain.GRAVITY_BRIDGE, b"\x02", BroadcastMode.SYNC)
    ]
    lcd.broadcast_tx.assert_not_called()


@pytest.mark.asyncio
async def test_broadcast_via_lcd_without_endpoint():
    wallet = StubWallet()

    with pytest.raises(WalletCapabilityError, match="No LCD endpoint"):
        await wallet.broadcast(
            SupportedChain.OSMOSIS, b"\x01", BroadcastMode.SYNC, BroadcastSource.LCD
        )
