"""Protobuf schema for the Cosmos SDK and Gravity Bridge messages we encode.

Descriptors are registered in a private pool so they never clash with other
Cosmos libraries loaded in the same process. Field numbers and types mirror
``gravity/v1/msgs.proto``, ``cosmos/base/v1beta1/coin.proto`` and
``cosmos/tx/v1beta1/tx.proto``.
"""

from __future__ import annotations

from google.protobuf import any_pb2, descriptor_pb2, descriptor_pool
from google.protobuf.message_factory import GetMessageClass

_Field = descriptor_pb2.FieldDescriptorProto

STRING = _Field.TYPE_STRING
BYTES = _Field.TYPE_BYTES
UINT64 = _Field.TYPE_UINT64
MESSAGE = _Field.TYPE_MESSAGE
ENUM = _Field.TYPE_ENUM

SIGN_MODE_UNSPECIFIED = 0
SIGN_MODE_DIRECT = 1
SIGN_MODE_LEGACY_AMINO_JSON = 127

POOL = descriptor_pool.DescriptorPool()


def _new_file(
    name: str, package: str, *dependencies: str
) -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(
        name=name, package=package, syntax="proto3"
    )
    proto.dependency.extend(dependencies)
    return proto


def _add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    *,
    type_name: str | None = None,
    repeated: bool = False,
    oneof_index: int | None = None,
) -> None:
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=_Field.LABEL_REPEATED if repeated else _Field.LABEL_OPTIONAL,
    )
    if type_name is not None:
        field.type_name = type_name
    if oneof_index is not None:
        field.oneof_index = oneof_index


def _register_any() -> None:
    POOL.Add(
        descriptor_pb2.FileDescriptorProto.FromString(any_pb2.DESCRIPTOR.serialized_pb)
    )


def _register_coin() -> None:
    proto = _new_file("cosmos/base/v1beta1/coin.proto", "cosmos.base.v1beta1")
    coin = proto.message_type.add(name="Coin")
    _add_field(coin, "denom", 1, STRING)
    _add_field(coin, "amount", 2, STRING)
    POOL.Add(proto)


def _register_gravity_msgs() -> None:
    proto = _new_file(
        "gravity/v1/msgs.proto", "gravity.v1", "cosmos/base/v1beta1/coin.proto"
    )
    msg = proto.message_type.add(name="MsgSendToEth")
    _add_field(msg, "sender", 1, STRING)
    _add_field(msg, "eth_dest", 2, STRING)
    _add_field(msg, "amount", 3, MESSAGE, type_name=".cosmos.base.v1beta1.Coin")
    _add_field(msg, "bridge_fee", 4, MESSAGE, type_name=".cosmos.base.v1beta1.Coin")
    _add_field(msg, "chain_fee", 5, MESSAGE, type_name=".cosmos.base.v1beta1.Coin")
    POOL.Add(proto)


def _register_secp256k1() -> None:
    proto = _new_file("cosmos/crypto/secp256k1/keys.proto", "cosmos.crypto.secp256k1")
    pub_key = proto.message_type.add(name="PubKey")
    _add_field(pub_key, "key", 1, BYTES)
    POOL.Add(proto)


def _register_signing() -> None:
    proto = _new_file(
        "cosmos/tx/signing/v1beta1/signing.proto", "cosmos.tx.signing.v1beta1"
    )
    sign_mode = proto.enum_type.add(name="SignMode")
    sign_mode.value.add(name="SIGN_MODE_UNSPECIFIED", number=SIGN_MODE_UNSPECIFIED)
    sign_mode.value.add(name="SIGN_MODE_DIRECT", number=SIGN_MODE_DIRECT)
    sign_mode.value.add(
        name="SIGN_MODE_LEGACY_AMINO_JSON", number=SIGN_MODE_LEGACY_AMINO_JSON
    )
    POOL.Add(proto)


def _register_tx() -> None:
    proto = _new_file(
        "cosmos/tx/v1beta1/tx.proto",
        "cosmos.tx.v1beta1",
        "google/protobuf/any.proto",
        "cosmos/base/v1beta1/coin.proto",
        "cosmos/tx/signing/v1beta1/signing.proto",
    )

    tx_raw = proto.message_type.add(name="TxRaw")
    _add_field(tx_raw, "body_bytes", 1, BYTES)
    _add_field(tx_raw, "auth_info_bytes", 2, BYTES)
    _add_field(tx_raw, "signatures", 3, BYTES, repeated=True)

    body = proto.message_type.add(name="TxBody")
    _add_field(body, "messages", 1, MESSAGE, type_name=".google.protobuf.Any", repeated=True)
    _add_field(body, "memo", 2, STRING)
    _add_field(body, "timeout_height", 3, UINT64)

    auth_info = proto.message_type.add(name="AuthInfo")
    _add_field(
        auth_info,
        "signer_infos",
        1,
        MESSAGE,
        type_name=".cosmos.tx.v1beta1.SignerInfo",
        repeated=True,
    )
    _add_field(auth_info, "fee", 2, MESSAGE, type_name=".cosmos.tx.v1beta1.Fee")

    signer_info = proto.message_type.add(name="SignerInfo")
    _add_field(signer_info, "public_key", 1, MESSAGE, type_name=".google.protobuf.Any")
    _add_field(signer_info, "mode_info", 2, MESSAGE, type_name=".cosmos.tx.v1beta1.ModeInfo")
    _add_field(signer_info, "sequence", 3, UINT64)

    # Multi-signer mode info is not needed for wallet-signed transfers
    mode_info = proto.message_type.add(name="ModeInfo")
    single = mode_info.nested_type.add(name="Single")
    _add_field(single, "mode", 1, ENUM, type_name=".cosmos.tx.signing.v1beta1.SignMode")
    mode_info.oneof_decl.add(name="sum")
    _add_field(
        mode_info,
        "single",
        1,
        MESSAGE,
        type_name=".cosmos.tx.v1beta1.ModeInfo.Single",
        oneof_index=0,
    )

    fee = proto.message_type.add(name="Fee")
    _add_field(fee, "amount", 1, MESSAGE, type_name=".cosmos.base.v1beta1.Coin", repeated=True)
    _add_field(fee, "gas_limit", 2, UINT64)
    _add_field(fee, "payer", 3, STRING)
    _add_field(fee, "granter", 4, STRING)

    POOL.Add(proto)


def _message_class(full_name: str) -> type:
    return GetMessageClass(POOL.FindMessageTypeByName(full_name))


_register_any()
_register_coin()
_register_gravity_msgs()
_register_secp256k1()
_register_signing()
_register_tx()

Any = _message_class("google.protobuf.Any")
Coin = _message_class("cosmos.base.v1beta1.Coin")
MsgSendToEth = _message_class("gravity.v1.MsgSendToEth")
PubKey = _message_class("cosmos.crypto.secp256k1.PubKey")
TxRaw = _message_class("cosmos.tx.v1beta1.TxRaw")
TxBody = _message_class("cosmos.tx.v1beta1.TxBody")
AuthInfo = _message_class("cosmos.tx.v1beta1.AuthInfo")
SignerInfo = _message_class("cosmos.tx.v1beta1.SignerInfo")
ModeInfo = _message_class("cosmos.tx.v1beta1.ModeInfo")
Fee = _message_class("cosmos.tx.v1beta1.Fee")

__all__ = [
    "POOL",
    "SIGN_MODE_DIRECT",
    "SIGN_MODE_LEGACY_AMINO_JSON",
    "SIGN_MODE_UNSPECIFIED",
    "Any",
    "AuthInfo",
    "Coin",
    "Fee",
    "ModeInfo",
    "MsgSendToEth",
    "PubKey",
    "SignerInfo",
    "TxBody",
    "TxRaw",
]
