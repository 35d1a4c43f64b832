from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from eth_account import Account

from gravity_transfer.domain import SupportedChain
from gravity_transfer.exceptions import BroadcastError, WalletCapabilityError
from gravity_transfer.wallets.web3_wallet import Web3BridgeHandle, Web3WalletManager

PRIVATE_KEY = "0x" + "11" * 32
ACCOUNT = Account.from_key(PRIVATE_KEY)
TOKEN = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
GRAVITY = "0xa4108aa1ec4967f8b52220a4f7e94a8201f2d906"


@pytest.fixture
def w3():
    mock = MagicMock()
    mock.eth.get_transaction_count.return_value = 3
    mock.eth.chain_id = 1
    mock.eth.send_raw_transaction.return_value = bytes.fromhex("ab" * 32)
    mock.eth.wait_for_transaction_receipt.return_value = {"status": 1}
    return mock


@pytest.fixture
def signing_account():
    account = MagicMock()
    account.address = ACCOUNT.address
    account.sign_transaction.return_value.raw_transaction = b"\xf8signed"
    return account


def _contract(w3, allowance: int = 0):
    contract = w3.eth.contract.return_value
    contract.functions.allowance.return_value.call.return_value = allowance
    return contract


@pytest.mark.asyncio
async def test_approve_sends_transaction_when_allowance_is_short(w3, signing_account):
    contract = _contract(w3, allowance=10)
    handle = Web3BridgeHandle(w3, signing_account, receipt_timeout=5)

    tx_hash = await handle.approve(ACCOUNT.address, TOKEN, GRAVITY, "100")

    assert tx_hash == "0x" + "ab" * 32
    contract.functions.approve.assert_called_once()
    _, amount = contract.functions.approve.call_args.args
    assert amount == 100
    build_args = contract.functions.approve.return_value.build_transaction.call_args.args[0]
    assert build_args == {"from": ACCOUNT.address, "nonce": 3, "chainId": 1}
    w3.eth.send_raw_transaction.assert_called_once_with(b"\xf8signed")
    w3.eth.wait_for_transaction_receipt.assert_called_once()
    assert w3.eth.wait_for_transaction_receipt.call_args.kwargs["timeout"] == 5


@pytest.mark.asyncio
async def test_approve_skipped_when_allowance_covers_amount(w3, signing_account):
    contract = _contract(w3, allowance=100)
    handle = Web3BridgeHandle(w3, signing_account)

    assert await handle.approve(ACCOUNT.address, TOKEN, GRAVITY, "100") is None
    contract.functions.approve.assert_not_called()
    w3.eth.send_raw_transaction.assert_not_called()


@pytest.mark.asyncio
async def test_approve_rejects_foreign_owner(w3, signing_account):
    handle = Web3BridgeHandle(w3, signing_account)
    other = "0x" + "22" * 20

    with pytest.raises(WalletCapabilityError):
        await handle.approve(other, TOKEN, GRAVITY, "1")


@pytest.mark.asyncio
async def test_send_to_cosmos_returns_transaction_hash(w3, signing_account):
    contract = _contract(w3)
    handle = Web3BridgeHandle(w3, signing_account)

    response = await handle.send_to_cosmos(
        GRAVITY, ACCOUNT.address, TOKEN, "gravity1recipient", "2500000"
    )

    assert response == {"transactionHash": "0x" + "ab" * 32}
    token_arg, destination, amount = contract.functions.sendToCosmos.call_args.args
    assert token_arg == "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
    assert destination == "gravity1recipient"
    assert amount == 2500000


@pytest.mark.asyncio
async def test_reverted_transaction_raises(w3, signing_account):
    _contract(w3)
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 0}
    handle = Web3BridgeHandle(w3, signing_account)

    with pytest.raises(BroadcastError, match="reverted"):
        await handle.send_to_cosmos(GRAVITY, ACCOUNT.address, TOKEN, "gravity1r", "1")


@pytest.mark.asyncio
async def test_manager_without_key_returns_none():
    manager = Web3WalletManager({SupportedChain.ETH: "http://localhost:8545"}, None)

    assert manager.address is None
    assert await manager.get_web3(SupportedChain.ETH) is None


@pytest.mark.asyncio
async def test_manager_rejects_non_eth_chain():
    manager = Web3WalletManager({SupportedChain.ETH: "http://localhost:8545"}, PRIVATE_KEY)

    assert await manager.get_web3(SupportedChain.GRAVITY_BRIDGE) is None


@pytest.mark.asyncio
async def test_manager_builds_handle():
    manager = Web3WalletManager(
        {SupportedChain.ETH: "http://localhost:8545"}, PRIVATE_KEY, receipt_timeout=9
    )

    handle = await manager.get_web3(SupportedChain.ETH)

    assert isinstance(handle, Web3BridgeHandle)
    assert handle.account.address == ACCOUNT.address
    assert manager.address == ACCOUNT.address
    assert handle.receipt_timeout == 9
