"""Client for the Gravity Bridge info service's pending-batch snapshot."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

import backoff
import requests

from ..constants import DEFAULT_RELAY_INFO_URL
from ..exceptions import FeeRetrievalError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


@dataclass(frozen=True)
class Erc20Fee:
    contract: str
    amount: Decimal


@dataclass(frozen=True)
class PendingTransaction:
    erc20_fee: Erc20Fee


@dataclass(frozen=True)
class PendingBatch:
    transactions: list[PendingTransaction]


def _giveup(e: Exception) -> bool:
    return (
        isinstance(e, requests.exceptions.HTTPError)
        and e.response is not None
        and e.response.status_code not in RETRYABLE_STATUS_CODES
    )


def _parse_transaction(raw: Mapping[str, Any]) -> PendingTransaction:
    fee = raw["erc20_fee"]
    try:
        amount = Decimal(str(fee["amount"]))
    except InvalidOperation as e:
        raise ValueError(f"Invalid erc20_fee amount: {fee['amount']!r}") from e
    return PendingTransaction(
        erc20_fee=Erc20Fee(contract=str(fee["contract"]), amount=amount)
    )


def parse_pending_batches(data: Any) -> list[PendingBatch]:
    """Extract pending batches from the info service payload.

    Batches are read from ``pending_tx.pending_batches``, falling back to a
    top-level ``pending_batches`` list.

    Raises:
        FeeRetrievalError: If the payload does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise FeeRetrievalError(f"Invalid response structure: {data!r}")

    pending_tx = data.get("pending_tx")
    if isinstance(pending_tx, dict) and "pending_batches" in pending_tx:
        raw_batches = pending_tx["pending_batches"]
    elif "pending_batches" in data:
        raw_batches = data["pending_batches"]
    else:
        raise FeeRetrievalError("Response has no pending_batches")

    if not isinstance(raw_batches, list):
        raise FeeRetrievalError(f"pending_batches is not a list: {raw_batches!r}")

    try:
        return [
            PendingBatch(
                transactions=[_parse_transaction(tx) for tx in batch["transactions"]]
            )
            for batch in raw_batches
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise FeeRetrievalError(f"Malformed pending batch entry: {e}") from e


class GravityInfoClient:
    """Fetches relay congestion data. Nothing is cached between calls."""

    def __init__(
        self,
        url: str = DEFAULT_RELAY_INFO_URL,
        timeout: float = 10.0,
        max_tries: int = 3,
    ):
        self.url = url
        self.timeout = timeout
        self.max_tries = max_tries

    async def _get(self) -> requests.Response:
        logger.debug(f"Calling {self.url}")
        response = await asyncio.to_thread(requests.get, self.url, timeout=self.timeout)
        response.raise_for_status()
        return response

    async def fetch_pending_batches(self) -> list[PendingBatch]:
        """Fetch the current pending-batch snapshot.

        Transient HTTP failures are retried with exponential backoff; the GET
        has no side effects.

        Raises:
            FeeRetrievalError: If the service is unreachable or returns bad data.
        """
        get_with_retry = backoff.on_exception(
            backoff.expo,
            requests.exceptions.RequestException,
            max_tries=self.max_tries,
            giveup=_giveup,
            jitter=backoff.full_jitter,
        )(self._get)

        try:
            response = await get_with_retry()
        except requests.exceptions.RequestException as e:
            logger.error("Failed to fetch pending batches from %s: %s", self.url, e)
            raise FeeRetrievalError(
                "An error occurred while retrieving the fee amount"
            ) from e

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise FeeRetrievalError("Invalid JSON from Gravity Bridge info service") from e

        batches = parse_pending_batches(data)
        logger.debug("Relay reports %d pending batch(es)", len(batches))
        return batches
