"""LCD (Cosmos REST) client used to submit signed transactions."""

from __future__ import annotations

import base64
import logging

import requests

from ..domain import BroadcastMode
from ..exceptions import BroadcastError

logger = logging.getLogger(__name__)


class LcdClient:
    """Minimal client for the ``cosmos.tx.v1beta1`` REST service.

    Broadcasts are never retried: a resubmitted transaction could be
    included twice.
    """

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def broadcast_tx(
        self, tx_bytes: bytes, mode: BroadcastMode = BroadcastMode.SYNC
    ) -> str:
        """Submit raw transaction bytes and return the transaction hash.

        Args:
            tx_bytes: Serialized ``TxRaw``
            mode: Broadcast mode; SYNC returns once CheckTx has run

        Returns:
            Transaction hash reported by the node

        Raises:
            requests.HTTPError: If the node rejects the request
            BroadcastError: If the node rejects the transaction or omits the hash
        """
        payload = {
            "tx_bytes": base64.b64encode(tx_bytes).decode("ascii"),
            "mode": mode.value,
        }
        response = self.session.post(
            f"{self.base_url}/cosmos/tx/v1beta1/txs",
            json=payload,
            timeout=self.timeout,
        )
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error("Broadcast request failed: %s - %s", e, response.text)
            raise

        tx_response = response.json().get("tx_response") or {}
        code = int(tx_response.get("code", 0) or 0)
        if code != 0:
            raw_log = tx_response.get("raw_log", "")
            logger.error("Transaction rejected (code %d): %s", code, raw_log)
            raise BroadcastError(f"Transaction rejected with code {code}: {raw_log}")

        tx_hash = tx_response.get("txhash")
        if not tx_hash:
            raise BroadcastError("No TX hash")

        logger.info("Broadcast accepted, TX hash: %s", tx_hash)
        return tx_hash
