from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest
import requests

from gravity_transfer.exceptions import FeeRetrievalError
from gravity_transfer.fees import relay
from gravity_transfer.fees.relay import GravityInfoClient, parse_pending_batches

TOKEN = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def _tx(contract: str, amount) -> dict:
    return {"erc20_fee": {"contract": contract, "amount": amount}}


def _response(payload=None, status: int = 200, json_error: Exception | None = None):
    response = Mock()
    response.status_code = status
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status} error", response=response
        )
    return response


def test_parse_nested_pending_batches():
    data = {"pending_tx": {"pending_batches": [{"transactions": [_tx(TOKEN, "1.5")]}]}}

    (batch,) = parse_pending_batches(data)

    assert batch.transactions[0].erc20_fee.contract == TOKEN
    assert batch.transactions[0].erc20_fee.amount == Decimal("1.5")


def test_parse_top_level_pending_batches():
    data = {"pending_batches": [{"transactions": []}, {"transactions": [_tx(TOKEN, 2)]}]}

    batches = parse_pending_batches(data)

    assert len(batches) == 2
    assert batches[1].transactions[0].erc20_fee.amount == Decimal("2")


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"unrelated": 1},
        {"pending_batches": "nope"},
        {"pending_batches": [{"no_transactions": []}]},
        {"pending_batches": [{"transactions": [{"erc20_fee": {"contract": TOKEN}}]}]},
        {"pending_batches": [{"transactions": [_tx(TOKEN, "lots")]}]},
    ],
)
def test_parse_rejects_bad_shapes(data):
    with pytest.raises(FeeRetrievalError):
        parse_pending_batches(data)


@pytest.mark.asyncio
async def test_fetch_pending_batches(monkeypatch):
    get = Mock(return_value=_response({"pending_batches": [{"transactions": [_tx(TOKEN, "3")]}]}))
    monkeypatch.setattr(relay.requests, "get", get)

    client = GravityInfoClient(url="https://info.example/batches", timeout=4)
    batches = await client.fetch_pending_batches()

    assert batches[0].transactions[0].erc20_fee.amount == Decimal("3")
    get.assert_called_once_with("https://info.example/batches", timeout=4)


@pytest.mark.asyncio
async def test_fetch_retries_server_errors(monkeypatch):
    get = Mock(side_effect=[_response(status=503), _response({"pending_batches": []})])
    monkeypatch.setattr(relay.requests, "get", get)
    monkeypatch.setattr(relay.backoff, "full_jitter", lambda value: 0)

    batches = await GravityInfoClient(max_tries=3).fetch_pending_batches()

    assert batches == []
    assert get.call_count == 2


@pytest.mark.asyncio
async def test_fetch_gives_up_on_client_errors(monkeypatch):
    get = Mock(return_value=_response(status=404))
    monkeypatch.setattr(relay.requests, "get", get)

    with pytest.raises(FeeRetrievalError, match="retrieving the fee amount"):
        await GravityInfoClient(max_tries=3).fetch_pending_batches()
    assert get.call_count == 1


@pytest.mark.asyncio
async def test_fetch_wraps_connection_errors(monkeypatch):
    get = Mock(side_effect=requests.exceptions.ConnectionError("down"))
    monkeypatch.setattr(relay.requests, "get", get)
    monkeypatch.setattr(relay.backoff, "full_jitter", lambda value: 0)

    with pytest.raises(FeeRetrievalError):
        await GravityInfoClient(max_tries=2).fetch_pending_batches()
    assert get.call_count == 2


@pytest.mark.asyncio
async def test_fetch_rejects_invalid_json(monkeypatch):
    get = Mock(return_value=_response(json_error=ValueError("bad json")))
    monkeypatch.setattr(relay.requests, "get", get)

    with pytest.raises(FeeRetrievalError, match="Invalid JSON"):
        await GravityInfoClient().fetch_pending_batches()
