"""
Shared encoding helpers.

- Length checks for fixed-size key material
- base64url <-> big integer (JWK members)
- Multihash (sha2-256 and identity) and base58 key identifiers
- Multibase base64 ('m' prefix) for exported keys
"""

import base64
import binascii
import hashlib
from typing import Optional

import base58

from .errors import MalformedKey


# Multihash codes (see multiformats/multicodec table)
MULTIHASH_IDENTITY = 0x00
MULTIHASH_SHA2_256 = 0x12
SHA2_256_LENGTH = 32

# Multibase prefix for RFC 4648 base64 without padding
MULTIBASE_BASE64 = "m"


def ensure_length(data: bytes, length: int, what: str = "Key") -> bytes:
    """
    Require ``data`` to be exactly ``length`` bytes.

    Never pads or truncates.

    Raises:
        MalformedKey: On any other length or a non-bytes value
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedKey(f"{what} must be bytes, got {type(data).__name__}")
    data = bytes(data)
    if len(data) != length:
        raise MalformedKey(f"{what} must be {length} bytes, got {len(data)}")
    return data


def bytes_to_base64url(data: bytes) -> str:
    """Unpadded base64url."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_to_bytes(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise MalformedKey(f"Invalid base64url value: {exc}") from exc


def int_to_base64url(value: int, length: Optional[int] = None) -> str:
    """
    Encode a non-negative integer as unpadded base64url big-endian bytes.

    Args:
        value: Integer to encode
        length: Left-pad with zero bytes to this many bytes

    Returns:
        base64url text (JWK style)
    """
    if value < 0:
        raise ValueError("Only non-negative integers can be encoded")
    size = max(1, (value.bit_length() + 7) // 8)
    if length is not None:
        size = max(size, length)
    return bytes_to_base64url(value.to_bytes(size, "big"))


def base64url_to_int(text: str) -> int:
    return int.from_bytes(base64url_to_bytes(text), "big")


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128 varint as used by multiformats and protobuf."""
    if value < 0:
        raise ValueError("uvarint cannot encode negative numbers")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def multihash_sha256(data: bytes) -> bytes:
    """sha2-256 multihash: code, digest length, digest (34 bytes)."""
    digest = hashlib.sha256(data).digest()
    return bytes([MULTIHASH_SHA2_256, SHA2_256_LENGTH]) + digest


def multihash_identity(data: bytes) -> bytes:
    """Identity multihash: the data itself behind a code and length."""
    return bytes([MULTIHASH_IDENTITY]) + encode_uvarint(len(data)) + bytes(data)


def base58_encode(data: bytes) -> str:
    """Bitcoin-alphabet base58 (multibase base58btc without prefix)."""
    return base58.b58encode(bytes(data)).decode("ascii")


def base58_decode(text: str) -> bytes:
    try:
        return base58.b58decode(text)
    except ValueError as exc:
        raise MalformedKey(f"Invalid base58 value: {exc}") from exc


def multibase_base64_encode(data: bytes) -> str:
    """Multibase 'm' (RFC 4648 base64, no padding)."""
    body = base64.b64encode(bytes(data)).rstrip(b"=").decode("ascii")
    return MULTIBASE_BASE64 + body


def multibase_base64_decode(text: str) -> bytes:
    """
    Decode multibase 'm' text.

    Raises:
        MalformedKey: If the prefix is not 'm' or the body is not base64
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("ascii")
        except UnicodeDecodeError as exc:
            raise MalformedKey("Multibase text must be ASCII") from exc
    if not isinstance(text, str) or not text.startswith(MULTIBASE_BASE64):
        raise MalformedKey("Not a multibase base64 ('m') string")
    body = text[1:]
    padded = body + "=" * (-len(body) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise MalformedKey(f"Invalid multibase base64 body: {exc}") from exc
