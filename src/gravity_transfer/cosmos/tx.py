"""Raw transaction assembly from wallet sign responses."""

from __future__ import annotations

import base64
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any as AnyType

from ..constants import SECP256K1_AMINO_PUBKEY_TYPE, SECP256K1_PUBKEY_TYPE_URL
from ..domain import Coin
from . import protos

logger = logging.getLogger(__name__)

PUBKEY_TYPE_URLS = {
    SECP256K1_AMINO_PUBKEY_TYPE: SECP256K1_PUBKEY_TYPE_URL,
}


@dataclass(frozen=True)
class StdSignature:
    """Signature plus the signer's public key, as returned by a wallet."""

    pub_key: bytes
    signature: bytes
    pub_key_type: str = SECP256K1_AMINO_PUBKEY_TYPE

    @classmethod
    def from_dict(cls, data: Mapping[str, AnyType]) -> "StdSignature":
        """Parse the wallet JSON form (base64 ``pub_key.value`` and ``signature``)."""
        pub_key = data["pub_key"]
        return cls(
            pub_key=base64.b64decode(pub_key["value"]),
            signature=base64.b64decode(data["signature"]),
            pub_key_type=pub_key.get("type", SECP256K1_AMINO_PUBKEY_TYPE),
        )


@dataclass(frozen=True)
class DirectSignResponse:
    """The signed direct-mode sign doc: body and auth info bytes are final."""

    body_bytes: bytes
    auth_info_bytes: bytes
    signature: StdSignature


@dataclass(frozen=True)
class StdFee:
    amount: list[Coin]
    gas: str
    payer: str | None = None
    granter: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, AnyType]) -> "StdFee":
        return cls(
            amount=[Coin(denom=c["denom"], amount=c["amount"]) for c in data["amount"]],
            gas=str(data["gas"]),
            payer=data.get("payer"),
            granter=data.get("granter"),
        )


@dataclass(frozen=True)
class AminoSignDoc:
    """The amino sign doc as the wallet signed it (it may adjust fee and memo)."""

    chain_id: str
    account_number: str
    sequence: str
    fee: StdFee
    msgs: list[dict[str, AnyType]] = field(default_factory=list)
    memo: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, AnyType]) -> "AminoSignDoc":
        return cls(
            chain_id=data["chain_id"],
            account_number=str(data["account_number"]),
            sequence=str(data["sequence"]),
            fee=StdFee.from_dict(data["fee"]),
            msgs=list(data.get("msgs", [])),
            memo=data.get("memo", ""),
        )


@dataclass(frozen=True)
class AminoSignResponse:
    signed: AminoSignDoc
    signature: StdSignature

    @classmethod
    def from_dict(cls, data: Mapping[str, AnyType]) -> "AminoSignResponse":
        return cls(
            signed=AminoSignDoc.from_dict(data["signed"]),
            signature=StdSignature.from_dict(data["signature"]),
        )


def create_tx_raw_bytes(response: DirectSignResponse) -> bytes:
    """Serialize a direct-signed transaction into ``TxRaw`` bytes."""
    tx_raw = protos.TxRaw(
        body_bytes=response.body_bytes,
        auth_info_bytes=response.auth_info_bytes,
        signatures=[response.signature.signature],
    )
    return tx_raw.SerializeToString()


def _encode_pub_key(signature: StdSignature) -> AnyType:
    type_url = PUBKEY_TYPE_URLS.get(signature.pub_key_type)
    if type_url is None:
        raise ValueError(f"Unsupported public key type: {signature.pub_key_type}")
    return protos.Any(
        type_url=type_url,
        value=protos.PubKey(key=signature.pub_key).SerializeToString(),
    )


def create_amino_tx_raw_bytes(
    response: AminoSignResponse, messages: Sequence[AnyType]
) -> bytes:
    """Serialize an amino-signed transaction into ``TxRaw`` bytes.

    The relay only accepts protobuf transaction bodies, so the body carries
    ``messages`` (the protobuf form of what the wallet signed as amino JSON),
    and the signer info marks the signature as ``SIGN_MODE_LEGACY_AMINO_JSON``.
    Memo, fee, gas and sequence come from the signed doc, not the request.
    """
    signed = response.signed

    body = protos.TxBody(memo=signed.memo)
    for message in messages:
        body.messages.add().CopyFrom(message)

    signer_info = protos.SignerInfo(sequence=int(signed.sequence))
    signer_info.public_key.CopyFrom(_encode_pub_key(response.signature))
    signer_info.mode_info.single.mode = protos.SIGN_MODE_LEGACY_AMINO_JSON

    fee = protos.Fee(gas_limit=int(signed.fee.gas))
    for coin in signed.fee.amount:
        fee.amount.add(denom=coin.denom, amount=coin.amount)
    if signed.fee.payer:
        fee.payer = signed.fee.payer
    if signed.fee.granter:
        fee.granter = signed.fee.granter

    auth_info = protos.AuthInfo()
    auth_info.signer_infos.add().CopyFrom(signer_info)
    auth_info.fee.CopyFrom(fee)

    logger.debug(
        "Assembled amino tx: %d message(s), sequence=%s, gas=%s",
        len(messages),
        signed.sequence,
        signed.fee.gas,
    )

    tx_raw = protos.TxRaw(
        body_bytes=body.SerializeToString(),
        auth_info_bytes=auth_info.SerializeToString(),
        signatures=[response.signature.signature],
    )
    return tx_raw.SerializeToString()
