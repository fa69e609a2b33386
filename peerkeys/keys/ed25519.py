"""
Ed25519 Keys

Payloads:
    public:  32-byte point
    private: seed (32) || public (32)

The private payload carries the public key for compatibility with older
peers. On input the legacy 96-byte form (the 64-byte key followed by a
redundant public key) is accepted too. Any other length is rejected, and
the embedded public key must match the one derived from the seed.
"""

from typing import Optional

from ..errors import InvalidParameter, MalformedKey
from ..primitives.backend import CryptoBackend, get_backend
from ..util import base58_encode, ensure_length, multihash_identity
from .base import PrivateKey, PublicKey
from .codec import KeyType


PUBLIC_KEY_LENGTH = 32
SEED_LENGTH = 32
PRIVATE_KEY_LENGTH = SEED_LENGTH + PUBLIC_KEY_LENGTH
LEGACY_PRIVATE_KEY_LENGTH = PRIVATE_KEY_LENGTH + PUBLIC_KEY_LENGTH


class Ed25519PublicKey(PublicKey):
    """Ed25519 verification key."""

    key_type = KeyType.Ed25519

    def __init__(self, key: bytes, backend: Optional[CryptoBackend] = None):
        super().__init__(backend)
        self._key = ensure_length(key, PUBLIC_KEY_LENGTH, "Ed25519 public key")
        self._backend.ed25519_validate_public(self._key)

    def verify(self, data: bytes, sig: bytes) -> bool:
        return self._backend.ed25519_verify(self._key, bytes(sig), bytes(data))

    def marshal(self) -> bytes:
        return self._key

    def id(self) -> str:
        """
        Key identifier: the public envelope inlined as an identity
        multihash, base58 encoded (the libp2p peer id form).
        """
        return base58_encode(multihash_identity(self.to_bytes()))


class Ed25519PrivateKey(PrivateKey):
    """
    Ed25519 signing key.

    Args:
        key: 32-byte seed
        public_key: Expected public key; checked against the derived one
    """

    key_type = KeyType.Ed25519

    def __init__(self, key: bytes, public_key: Optional[bytes] = None,
                 backend: Optional[CryptoBackend] = None):
        super().__init__(backend)
        self._key = ensure_length(key, SEED_LENGTH, "Ed25519 private key")
        derived = self._backend.ed25519_public(self._key)
        if public_key is not None:
            public_key = ensure_length(public_key, PUBLIC_KEY_LENGTH, "Ed25519 public key")
            if public_key != derived:
                raise MalformedKey("Ed25519 public key does not match the private key")
        self._public_key = Ed25519PublicKey(derived, self._backend)

    @property
    def public(self) -> Ed25519PublicKey:
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        return self._backend.ed25519_sign(self._key, bytes(message))

    def marshal(self) -> bytes:
        return self._key + self._public_key.marshal()


def unmarshal_ed25519_public_key(data: bytes,
                                 backend: Optional[CryptoBackend] = None) -> Ed25519PublicKey:
    return Ed25519PublicKey(data, backend)


def unmarshal_ed25519_private_key(data: bytes,
                                  backend: Optional[CryptoBackend] = None) -> Ed25519PrivateKey:
    """
    Rebuild a private key from its payload.

    Raises:
        MalformedKey: Length other than 64 or 96 bytes, or mismatching embedded public key
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedKey("Ed25519 private key must be bytes")
    data = bytes(data)

    if len(data) == LEGACY_PRIVATE_KEY_LENGTH:
        if data[PRIVATE_KEY_LENGTH:] != data[SEED_LENGTH:PRIVATE_KEY_LENGTH]:
            raise MalformedKey("Redundant Ed25519 public key does not match")
        data = data[:PRIVATE_KEY_LENGTH]

    if len(data) == PRIVATE_KEY_LENGTH:
        return Ed25519PrivateKey(data[:SEED_LENGTH], data[SEED_LENGTH:], backend)
    raise MalformedKey(
        f"Ed25519 private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(data)}"
    )


def generate_key_pair(backend: Optional[CryptoBackend] = None) -> Ed25519PrivateKey:
    backend = backend or get_backend()
    return Ed25519PrivateKey(backend.ed25519_generate(), backend=backend)


def generate_key_pair_from_seed(seed: bytes,
                                backend: Optional[CryptoBackend] = None) -> Ed25519PrivateKey:
    """
    Deterministically derive a key pair; the seed is the private key.

    Raises:
        InvalidParameter: If seed is not exactly 32 bytes
    """
    if not isinstance(seed, (bytes, bytearray, memoryview)):
        raise InvalidParameter('"seed" must be bytes')
    if len(seed) != SEED_LENGTH:
        raise InvalidParameter(f'"seed" must be {SEED_LENGTH} bytes in length, got {len(seed)}')
    return Ed25519PrivateKey(bytes(seed), backend=backend)
