# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Protocol Messages
*****************

The subset of the Trezor protobuf schema needed to identify a device, unlock it and derive keys.

The schema is declared here as plain data and compiled at import time into a private
:class:`~google.protobuf.descriptor_pool.DescriptorPool`, so no ``protoc`` step is needed.
Each message class is exposed as a module attribute (``messages.GetAddress`` ...), and
:class:`MessageType` holds the numeric type tag used on the wire.
"""

from enum import IntEnum
from typing import (
    Dict,
    List,
    Tuple,
    Type,
    Union,
)

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, EncodeError, Message

from .errors import MarshalError


class MessageType(IntEnum):
    Initialize = 0
    Ping = 1
    Success = 2
    Failure = 3
    GetPublicKey = 11
    PublicKey = 12
    Features = 17
    PinMatrixRequest = 18
    PinMatrixAck = 19
    Cancel = 20
    ButtonRequest = 26
    ButtonAck = 27
    GetAddress = 29
    Address = 30
    PassphraseRequest = 41
    PassphraseAck = 42
    GetFeatures = 55
    EthereumGetAddress = 56
    EthereumAddress = 57
    EthereumGetPublicKey = 450
    EthereumPublicKey = 451


class FailureType(IntEnum):
    UnexpectedMessage = 1
    ButtonExpected = 2
    DataError = 3
    ActionCancelled = 4
    PinExpected = 5
    PinCancelled = 6
    PinInvalid = 7
    InvalidSignature = 8
    ProcessError = 9
    NotEnoughFunds = 10
    NotInitialized = 11
    PinMismatch = 12
    WipeCodeMismatch = 13
    InvalidSession = 14
    FirmwareError = 99


class ButtonRequestType(IntEnum):
    Other = 1
    FeeOverThreshold = 2
    ConfirmOutput = 3
    ResetDevice = 4
    ConfirmWord = 5
    WipeDevice = 6
    ProtectCall = 7
    SignTx = 8
    FirmwareCheck = 9
    Address = 10
    PublicKey = 11
    MnemonicWordCount = 12
    MnemonicInput = 13
    PassphraseType = 14
    UnknownDerivationPath = 15
    RecoveryHomepage = 16
    Success = 17
    Warning = 18
    PassphraseEntry = 19
    PinEntry = 20


class PinMatrixRequestType(IntEnum):
    Current = 1
    NewFirst = 2
    NewSecond = 3
    WipeCodeFirst = 4
    WipeCodeSecond = 5


class InputScriptType(IntEnum):
    SPENDADDRESS = 0
    SPENDMULTISIG = 1
    EXTERNAL = 2
    SPENDWITNESS = 3
    SPENDP2SHWITNESS = 4
    SPENDTAPROOT = 5


_ENUMS = (FailureType, ButtonRequestType, PinMatrixRequestType, InputScriptType)

_F = descriptor_pb2.FieldDescriptorProto

_SCALARS = {
    "bool": _F.TYPE_BOOL,
    "bytes": _F.TYPE_BYTES,
    "string": _F.TYPE_STRING,
    "uint32": _F.TYPE_UINT32,
}

REPEATED = True

# name -> [(field name, field number, type[, repeated])]
# Field numbers follow the upstream trezor-common definitions.
_SCHEMA: Dict[str, List[Tuple]] = {
    "HDNodeType": [
        ("depth", 1, "uint32"),
        ("fingerprint", 2, "uint32"),
        ("child_num", 3, "uint32"),
        ("chain_code", 4, "bytes"),
        ("private_key", 5, "bytes"),
        ("public_key", 6, "bytes"),
    ],
    "Initialize": [
        ("session_id", 1, "bytes"),
    ],
    "GetFeatures": [],
    "Features": [
        ("vendor", 1, "string"),
        ("major_version", 2, "uint32"),
        ("minor_version", 3, "uint32"),
        ("patch_version", 4, "uint32"),
        ("bootloader_mode", 5, "bool"),
        ("device_id", 6, "string"),
        ("pin_protection", 7, "bool"),
        ("passphrase_protection", 8, "bool"),
        ("language", 9, "string"),
        ("label", 10, "string"),
        ("initialized", 12, "bool"),
        ("imported", 15, "bool"),
        ("unlocked", 16, "bool"),
        ("needs_backup", 19, "bool"),
        ("model", 21, "string"),
    ],
    "Ping": [
        ("message", 1, "string"),
        ("button_protection", 2, "bool"),
        ("pin_protection", 3, "bool"),
        ("passphrase_protection", 4, "bool"),
    ],
    "Success": [
        ("message", 1, "string"),
    ],
    "Failure": [
        ("code", 1, "FailureType"),
        ("message", 2, "string"),
    ],
    "Cancel": [],
    "ButtonRequest": [
        ("code", 1, "ButtonRequestType"),
    ],
    "ButtonAck": [],
    "PinMatrixRequest": [
        ("type", 1, "PinMatrixRequestType"),
    ],
    "PinMatrixAck": [
        ("pin", 1, "string"),
    ],
    "PassphraseRequest": [],
    "PassphraseAck": [
        ("passphrase", 1, "string"),
        ("on_device", 3, "bool"),
    ],
    "GetPublicKey": [
        ("address_n", 1, "uint32", REPEATED),
        ("ecdsa_curve_name", 2, "string"),
        ("show_display", 3, "bool"),
        ("coin_name", 4, "string"),
        ("script_type", 5, "InputScriptType"),
    ],
    "PublicKey": [
        ("node", 1, "HDNodeType"),
        ("xpub", 2, "string"),
    ],
    "GetAddress": [
        ("address_n", 1, "uint32", REPEATED),
        ("coin_name", 2, "string"),
        ("show_display", 3, "bool"),
        ("script_type", 5, "InputScriptType"),
    ],
    "Address": [
        ("address", 1, "string"),
    ],
    "EthereumGetPublicKey": [
        ("address_n", 1, "uint32", REPEATED),
        ("show_display", 2, "bool"),
    ],
    "EthereumPublicKey": [
        ("node", 1, "HDNodeType"),
        ("xpub", 2, "string"),
    ],
    "EthereumGetAddress": [
        ("address_n", 1, "uint32", REPEATED),
        ("show_display", 2, "bool"),
    ],
    "EthereumAddress": [
        ("address", 2, "string"),
    ],
}

_PACKAGE = "tzwire"


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(name="tzwire/messages.proto", package=_PACKAGE, syntax="proto2")
    enum_names = set()
    for enum in _ENUMS:
        edp = fdp.enum_type.add(name=enum.__name__)
        # enum values share the package scope with message names
        for member in enum:
            edp.value.add(name="{}_{}".format(enum.__name__, member.name), number=member.value)
        enum_names.add(enum.__name__)

    for name, fields in _SCHEMA.items():
        mdp = fdp.message_type.add(name=name)
        for field in fields:
            fname, number, ftype = field[:3]
            repeated = len(field) > 3 and field[3]
            fd = mdp.field.add(name=fname, number=number)
            fd.label = _F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL
            if ftype in _SCALARS:
                fd.type = _SCALARS[ftype]
            elif ftype in enum_names:
                fd.type = _F.TYPE_ENUM
                fd.type_name = ".{}.{}".format(_PACKAGE, ftype)
            else:
                fd.type = _F.TYPE_MESSAGE
                fd.type_name = ".{}.{}".format(_PACKAGE, ftype)
    return fdp


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())

_CLASSES: Dict[str, Type[Message]] = {
    name: message_factory.GetMessageClass(_POOL.FindMessageTypeByName("{}.{}".format(_PACKAGE, name)))
    for name in _SCHEMA
}

HDNodeType = _CLASSES["HDNodeType"]
Initialize = _CLASSES["Initialize"]
GetFeatures = _CLASSES["GetFeatures"]
Features = _CLASSES["Features"]
Ping = _CLASSES["Ping"]
Success = _CLASSES["Success"]
Failure = _CLASSES["Failure"]
Cancel = _CLASSES["Cancel"]
ButtonRequest = _CLASSES["ButtonRequest"]
ButtonAck = _CLASSES["ButtonAck"]
PinMatrixRequest = _CLASSES["PinMatrixRequest"]
PinMatrixAck = _CLASSES["PinMatrixAck"]
PassphraseRequest = _CLASSES["PassphraseRequest"]
PassphraseAck = _CLASSES["PassphraseAck"]
GetPublicKey = _CLASSES["GetPublicKey"]
PublicKey = _CLASSES["PublicKey"]
GetAddress = _CLASSES["GetAddress"]
Address = _CLASSES["Address"]
EthereumGetPublicKey = _CLASSES["EthereumGetPublicKey"]
EthereumPublicKey = _CLASSES["EthereumPublicKey"]
EthereumGetAddress = _CLASSES["EthereumGetAddress"]
EthereumAddress = _CLASSES["EthereumAddress"]


def message_type(msg: Union[Message, Type[Message]]) -> int:
    """
    Get the wire type tag of a message instance or message class.

    :param msg: The message or message class
    :return: The type tag
    """
    return MessageType[msg.DESCRIPTOR.name].value


def message_name(msg_type: int) -> str:
    """
    Get a printable name for a wire type tag, including tags that are not in the schema.
    """
    try:
        return MessageType(msg_type).name
    except ValueError:
        return "Unknown({})".format(msg_type)


def get_class(msg_type: int) -> Type[Message]:
    """
    Get the message class for a wire type tag.

    :raises: ValueError: if the tag is not part of the schema
    """
    return _CLASSES[MessageType(msg_type).name]


def serialize(msg: Message) -> bytes:
    try:
        return msg.SerializeToString()
    except EncodeError as e:
        raise MarshalError("Cannot serialize {}: {}".format(msg.DESCRIPTOR.name, e))


def parse(cls: Type[Message], payload: bytes) -> Message:
    try:
        return cls.FromString(payload)
    except DecodeError as e:
        raise MarshalError("Cannot parse {}: {}".format(cls.DESCRIPTOR.name, e))
