"""
secp256k1 Keys

Payloads:
    public:  SEC1 point, always marshaled compressed (33 bytes);
             compressed or uncompressed (65 bytes) accepted on input
    private: 32-byte big-endian scalar in [1, n-1]

Signatures are DER-encoded deterministic ECDSA over SHA-256(message)
with low-S normalisation, matching Go and JavaScript peers byte for byte.
"""

from typing import Optional

from ..errors import MalformedKey
from ..primitives.backend import CryptoBackend, get_backend
from ..util import ensure_length
from .base import PrivateKey, PublicKey
from .codec import KeyType


PRIVATE_KEY_LENGTH = 32
COMPRESSED_PUBLIC_KEY_LENGTH = 33
UNCOMPRESSED_PUBLIC_KEY_LENGTH = 65


class Secp256k1PublicKey(PublicKey):
    key_type = KeyType.Secp256k1

    def __init__(self, key: bytes, backend: Optional[CryptoBackend] = None):
        super().__init__(backend)
        if not isinstance(key, (bytes, bytearray, memoryview)):
            raise MalformedKey("secp256k1 public key must be bytes")
        key = bytes(key)
        if len(key) not in (COMPRESSED_PUBLIC_KEY_LENGTH, UNCOMPRESSED_PUBLIC_KEY_LENGTH):
            raise MalformedKey(
                f"secp256k1 public key must be {COMPRESSED_PUBLIC_KEY_LENGTH} or "
                f"{UNCOMPRESSED_PUBLIC_KEY_LENGTH} bytes, got {len(key)}"
            )
        self._key = self._backend.secp256k1_compress(key)

    def verify(self, data: bytes, sig: bytes) -> bool:
        return self._backend.secp256k1_verify(self._key, bytes(sig), bytes(data))

    def marshal(self) -> bytes:
        return self._key


class Secp256k1PrivateKey(PrivateKey):
    key_type = KeyType.Secp256k1

    def __init__(self, key: bytes, public_key: Optional[bytes] = None,
                 backend: Optional[CryptoBackend] = None):
        super().__init__(backend)
        self._key = ensure_length(key, PRIVATE_KEY_LENGTH, "secp256k1 private key")
        self._public_key = Secp256k1PublicKey(
            self._backend.secp256k1_public(self._key), self._backend
        )
        if public_key is not None and not self._public_key.equals(
                Secp256k1PublicKey(public_key, self._backend)):
            raise MalformedKey("secp256k1 public key does not match the private key")

    @property
    def public(self) -> Secp256k1PublicKey:
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        return self._backend.secp256k1_sign(self._key, bytes(message))

    def marshal(self) -> bytes:
        return self._key


def unmarshal_secp256k1_public_key(data: bytes,
                                   backend: Optional[CryptoBackend] = None) -> Secp256k1PublicKey:
    return Secp256k1PublicKey(data, backend)


def unmarshal_secp256k1_private_key(data: bytes,
                                    backend: Optional[CryptoBackend] = None) -> Secp256k1PrivateKey:
    return Secp256k1PrivateKey(data, backend=backend)


def generate_key_pair(backend: Optional[CryptoBackend] = None) -> Secp256k1PrivateKey:
    backend = backend or get_backend()
    return Secp256k1PrivateKey(backend.secp256k1_generate(), backend=backend)
