from __future__ import annotations

from .lcd import LcdClient
from .messages import (
    build_send_to_eth_amounts,
    convert_token_to_coin,
    convert_token_to_fee,
    create_send_to_ethereum_amino_message,
    create_send_to_ethereum_message,
)
from .tx import (
    AminoSignResponse,
    DirectSignResponse,
    create_amino_tx_raw_bytes,
    create_tx_raw_bytes,
)

__all__ = [
    "AminoSignResponse",
    "DirectSignResponse",
    "LcdClient",
    "build_send_to_eth_amounts",
    "convert_token_to_coin",
    "convert_token_to_fee",
    "create_amino_tx_raw_bytes",
    "create_send_to_ethereum_amino_message",
    "create_send_to_ethereum_message",
    "create_tx_raw_bytes",
]
