"""
Key Stretcher

Expands a shared secret (e.g. from ECDH) into two sets of directional
session keys, one per peer.

Derivation (HMAC with ``hash_type``, keyed with the secret):
    a = HMAC(seed)
    while output shorter than 2 * (iv + cipher key + mac key):
        output += HMAC(a || seed)
        a = HMAC(a)

    seed = b"key expansion"

Output layout:
    [ k1.iv | k1.cipher_key | k1.mac_key | k2.iv | k2.cipher_key | k2.mac_key ]
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..errors import UnsupportedCipher, UnsupportedHash
from ..primitives import hmac
from ..primitives.backend import CryptoBackend


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CipherSpec:
    iv_size: int
    key_size: int


CIPHER_MAP = {
    "AES-128": CipherSpec(iv_size=16, key_size=16),
    "AES-256": CipherSpec(iv_size=16, key_size=32),
}
MAC_KEY_SIZE = 20
SEED = b"key expansion"


@dataclass(frozen=True)
class DirectionalKeys:
    """Keys for one direction of a session."""
    iv: bytes = field(repr=False)
    cipher_key: bytes = field(repr=False)
    mac_key: bytes = field(repr=False)


@dataclass(frozen=True)
class StretchedKeys:
    """Both halves of the stretched output."""
    k1: DirectionalKeys
    k2: DirectionalKeys

    def split(self, local_first: bool) -> Tuple[DirectionalKeys, DirectionalKeys]:
        """
        Assign halves to directions.

        The two peers pass opposite flags (usually decided by comparing
        their handshake proposals) so each one's local keys are the
        other's remote keys.

        Returns:
            (local, remote)
        """
        if local_first:
            return self.k1, self.k2
        return self.k2, self.k1


def _split_half(half: bytes, cipher: CipherSpec) -> DirectionalKeys:
    iv_end = cipher.iv_size
    key_end = iv_end + cipher.key_size
    return DirectionalKeys(
        iv=half[:iv_end],
        cipher_key=half[iv_end:key_end],
        mac_key=half[key_end:key_end + MAC_KEY_SIZE],
    )


def key_stretcher(cipher_type: str, hash_type: str, secret: bytes,
                  backend: Optional[CryptoBackend] = None) -> StretchedKeys:
    """
    Generate a set of keys for each party by stretching the shared key.

    Args:
        cipher_type: "AES-128" or "AES-256"
        hash_type: "SHA1", "SHA256" or "SHA512"
        secret: Shared secret

    Returns:
        StretchedKeys(k1, k2)

    Raises:
        UnsupportedCipher: Unknown cipher type
        UnsupportedHash: Missing or unknown hash type
    """
    cipher = CIPHER_MAP.get(cipher_type)
    if cipher is None:
        allowed = " / ".join(CIPHER_MAP)
        raise UnsupportedCipher(f"unknown cipher type '{cipher_type}'. Must be {allowed}")
    if not hash_type:
        raise UnsupportedHash("missing hash type", code="ERR_MISSING_HASH_TYPE")
    hash_type = hmac.validate_hash_type(hash_type)

    half_size = cipher.iv_size + cipher.key_size + MAC_KEY_SIZE
    result_length = 2 * half_size

    mac = hmac.create(hash_type, secret, backend)

    a = mac.digest(SEED)
    result = []
    j = 0
    while j < result_length:
        b = mac.digest(a + SEED)
        result.append(b)
        j += len(b)
        a = mac.digest(a)

    output = b"".join(result)
    logger.debug("Stretched shared secret for %s/%s (%d bytes)", cipher_type, hash_type, result_length)
    return StretchedKeys(
        k1=_split_half(output[:half_size], cipher),
        k2=_split_half(output[half_size:result_length], cipher),
    )
