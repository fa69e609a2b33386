"""
HMAC

Keyed digests with the hash names used on the wire by secio-style
handshakes: SHA1, SHA256, SHA512.
"""

from typing import Optional

from ..errors import UnsupportedHash
from .backend import CryptoBackend, get_backend


# Digest lengths in bytes
HASH_LENGTHS = {
    "SHA1": 20,
    "SHA256": 32,
    "SHA512": 64,
}


def validate_hash_type(hash_type: str) -> str:
    """Normalise a hash name, rejecting anything outside HASH_LENGTHS."""
    name = hash_type.upper() if isinstance(hash_type, str) else None
    if name not in HASH_LENGTHS:
        names = " / ".join(HASH_LENGTHS)
        raise UnsupportedHash(f"Hash '{hash_type}' is unknown or not supported. Must be {names}")
    return name


class HmacDigest:
    """HMAC bound to one hash function and one secret."""

    def __init__(self, hash_type: str, secret: bytes,
                 backend: Optional[CryptoBackend] = None):
        self._hash_type = validate_hash_type(hash_type)
        self._secret = bytes(secret)
        self._backend = backend or get_backend()

    @property
    def hash_type(self) -> str:
        return self._hash_type

    @property
    def length(self) -> int:
        """Digest size in bytes."""
        return HASH_LENGTHS[self._hash_type]

    def digest(self, data: bytes) -> bytes:
        return self._backend.hmac_digest(self._hash_type, self._secret, bytes(data))


def create(hash_type: str, secret: bytes,
           backend: Optional[CryptoBackend] = None) -> HmacDigest:
    """
    Create an HMAC digest.

    Args:
        hash_type: "SHA1", "SHA256" or "SHA512"
        secret: HMAC key

    Raises:
        UnsupportedHash: For any other hash name
    """
    return HmacDigest(hash_type, secret, backend)
