"""web3.py-backed Ethereum wallet for sending ERC20 tokens to Gravity Bridge."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import URI
from web3 import Web3

from ..abi import load_erc20_abi, load_gravity_abi
from ..domain import SupportedChain, is_eth_chain
from ..exceptions import BroadcastError, WalletCapabilityError

logger = logging.getLogger(__name__)


class Web3BridgeHandle:
    """Signs and sends bridge transactions with a local private key."""

    def __init__(
        self, w3: Web3, account: LocalAccount, receipt_timeout: float = 120.0
    ):
        self.w3 = w3
        self.account = account
        self.receipt_timeout = receipt_timeout

    def _check_owner(self, owner: str) -> None:
        if Web3.to_checksum_address(owner) != self.account.address:
            raise WalletCapabilityError(
                f"Connected account {self.account.address} cannot act for {owner}"
            )

    def _transact(self, call: Any, label: str) -> str:
        """Build, sign and send ``call``; wait for the receipt."""
        tx = call.build_transaction(
            {
                "from": self.account.address,
                "nonce": self.w3.eth.get_transaction_count(self.account.address),
                "chainId": self.w3.eth.chain_id,
            }
        )
        signed = self.account.sign_transaction(tx)

        logger.info("Broadcasting %s transaction", label)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hex = Web3.to_hex(tx_hash)
        logger.info("%s TX hash: %s", label, tx_hex)

        receipt = self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.receipt_timeout
        )
        if receipt["status"] != 1:
            logger.error("%s transaction %s reverted", label, tx_hex)
            raise BroadcastError(f"{label} transaction {tx_hex} reverted")
        return tx_hex

    def _approve(self, owner: str, token_address: str, spender: str, amount: int) -> str | None:
        self._check_owner(owner)
        token = self.w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=load_erc20_abi()
        )
        spender_checksum = Web3.to_checksum_address(spender)

        allowance = token.functions.allowance(self.account.address, spender_checksum).call()
        if allowance >= amount:
            logger.info(
                "Allowance %d already covers %d for %s; skipping approve",
                allowance,
                amount,
                spender_checksum,
            )
            return None

        return self._transact(
            token.functions.approve(spender_checksum, amount), "approve"
        )

    async def approve(
        self, owner: str, token_address: str, spender: str, amount: str
    ) -> str | None:
        """Let ``spender`` pull ``amount`` (smallest units) of the token from ``owner``.

        Returns:
            The approve transaction hash, or None when the allowance already suffices
        """
        return await asyncio.to_thread(
            self._approve, owner, token_address, spender, int(amount)
        )

    def _send_to_cosmos(
        self,
        contract: str,
        sender: str,
        token_address: str,
        destination: str,
        amount: int,
    ) -> dict[str, str]:
        self._check_owner(sender)
        gravity = self.w3.eth.contract(
            address=Web3.to_checksum_address(contract), abi=load_gravity_abi()
        )
        tx_hex = self._transact(
            gravity.functions.sendToCosmos(
                Web3.to_checksum_address(token_address), destination, amount
            ),
            "sendToCosmos",
        )
        return {"transactionHash": tx_hex}

    async def send_to_cosmos(
        self,
        contract: str,
        sender: str,
        token_address: str,
        destination: str,
        amount: str,
    ) -> Mapping[str, Any]:
        """Call ``Gravity.sendToCosmos`` and return ``{"transactionHash": ...}``."""
        return await asyncio.to_thread(
            self._send_to_cosmos,
            contract,
            sender,
            token_address,
            destination,
            int(amount),
        )


class Web3WalletManager:
    """Hands out a :class:`Web3BridgeHandle` per configured Ethereum chain."""

    def __init__(
        self,
        rpc_urls: Mapping[SupportedChain, str],
        private_key: str | None,
        receipt_timeout: float = 120.0,
    ):
        self.rpc_urls = dict(rpc_urls)
        self._account: LocalAccount | None = (
            Account.from_key(private_key) if private_key else None
        )
        self.receipt_timeout = receipt_timeout

    @property
    def address(self) -> str | None:
        return self._account.address if self._account else None

    async def get_web3(self, chain: SupportedChain) -> Web3BridgeHandle | None:
        if self._account is None:
            logger.warning("No Ethereum private key configured")
            return None
        if not is_eth_chain(chain) or chain not in self.rpc_urls:
            logger.warning("No Ethereum RPC configured for %s", chain.value)
            return None

        w3 = Web3(
            Web3.HTTPProvider(URI(self.rpc_urls[chain]), request_kwargs={"timeout": 15})
        )
        return Web3BridgeHandle(w3, self._account, self.receipt_timeout)
