"""
Wire Codec

Canonical binary encoding of keys, bit-compatible with other libp2p
implementations (Go, JavaScript, Rust):

    PublicKey / PrivateKey envelope (protobuf):
        0x08 <type varint> 0x12 <length varint> <payload>

    type: 0 = RSA, 1 = Ed25519, 2 = Secp256k1

The two envelope schemas are identical on the wire; callers pick the
decoder that matches what they expect to read.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from google.protobuf.message import DecodeError

from ..errors import MalformedKey, UnsupportedKeyType
from . import keys_pb


class KeyType(IntEnum):
    """Registered key algorithms and their wire discriminants."""
    RSA = 0
    Ed25519 = 1
    Secp256k1 = 2

    @property
    def algorithm(self) -> str:
        """Human readable algorithm name ("RSA", "Ed25519", "secp256k1")."""
        return ALGORITHM_NAMES[self]

    @classmethod
    def parse(cls, value: Union["KeyType", int, str]) -> "KeyType":
        """
        Resolve a member, a wire discriminant or a case-insensitive name.

        Raises:
            UnsupportedKeyType: If the value names no registered algorithm
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            key_type = _BY_NAME.get(value.lower())
            if key_type is not None:
                return key_type
        supported = " / ".join(ALGORITHM_NAMES.values())
        raise UnsupportedKeyType(f"invalid or unsupported key type {value}. Must be {supported}")


ALGORITHM_NAMES = {
    KeyType.RSA: "RSA",
    KeyType.Ed25519: "Ed25519",
    KeyType.Secp256k1: "secp256k1",
}
_BY_NAME = {name.lower(): key_type for key_type, name in ALGORITHM_NAMES.items()}


@dataclass(frozen=True)
class Envelope:
    """Decoded key envelope: discriminant plus opaque payload."""
    key_type: KeyType
    data: bytes


def _encode(message_class, key_type, data: bytes) -> bytes:
    key_type = KeyType.parse(key_type)
    message = message_class(Type=int(key_type), Data=bytes(data))
    return message.SerializeToString()


def _decode(message_class, buf: bytes) -> Envelope:
    if not isinstance(buf, (bytes, bytearray, memoryview)):
        raise MalformedKey(f"Key envelope must be bytes, got {type(buf).__name__}")

    # MergeFromString skips the required-field check so a missing
    # discriminant can be reported as such below
    message = message_class()
    try:
        message.MergeFromString(bytes(buf))
    except DecodeError as exc:
        raise MalformedKey(f"Invalid key envelope: {exc}") from exc

    # proto2 enums are closed: unknown discriminants are not set on the field
    if not message.HasField("Type"):
        raise UnsupportedKeyType("Key envelope has a missing or unknown key type")
    key_type = KeyType.parse(message.Type)

    if not message.HasField("Data"):
        raise MalformedKey("Key envelope has no key data")
    return Envelope(key_type=key_type, data=bytes(message.Data))


def encode_public_key(key_type: Union[KeyType, int, str], data: bytes) -> bytes:
    """Serialize a public key payload into a PublicKey envelope."""
    return _encode(keys_pb.PublicKey, key_type, data)


def encode_private_key(key_type: Union[KeyType, int, str], data: bytes) -> bytes:
    """Serialize a private key payload into a PrivateKey envelope."""
    return _encode(keys_pb.PrivateKey, key_type, data)


def decode_public_key(buf: bytes) -> Envelope:
    """
    Parse a PublicKey envelope.

    Raises:
        UnsupportedKeyType: Unknown or missing discriminant
        MalformedKey: Not a valid envelope
    """
    return _decode(keys_pb.PublicKey, buf)


def decode_private_key(buf: bytes) -> Envelope:
    """
    Parse a PrivateKey envelope.

    Raises:
        UnsupportedKeyType: Unknown or missing discriminant
        MalformedKey: Not a valid envelope
    """
    return _decode(keys_pb.PrivateKey, buf)
