"""
AES-CTR Stream Cipher

The session cipher fed by the key stretcher. Each direction keeps its
counter state across calls, so a message may be processed in chunks.
"""

from typing import Optional

from ..errors import InvalidParameter
from .backend import CryptoBackend, get_backend


# Key length -> mode
CIPHER_MODES = {
    16: "aes-128-ctr",
    32: "aes-256-ctr",
}
IV_SIZE = 16


def cipher_mode(key: bytes) -> str:
    """Select the AES-CTR mode from the key length."""
    mode = CIPHER_MODES.get(len(key))
    if mode is None:
        modes = " / ".join(f"{length} ({name})" for length, name in CIPHER_MODES.items())
        raise InvalidParameter(
            f"Invalid key length {len(key)} bytes. Must be {modes}",
            code="ERR_INVALID_KEY_LENGTH",
        )
    return mode


class AesCtrCipher:
    """
    AES-CTR encryptor/decryptor pair sharing one key and IV.

    Example:
        >>> cipher = create(key, iv)
        >>> ciphertext = cipher.encrypt(b"hello")
    """

    def __init__(self, key: bytes, iv: bytes,
                 backend: Optional[CryptoBackend] = None):
        self.mode = cipher_mode(key)
        if len(iv) != IV_SIZE:
            raise InvalidParameter(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
        backend = backend or get_backend()
        self._encryptor, self._decryptor = backend.aes_ctr(bytes(key), bytes(iv))

    def encrypt(self, data: bytes) -> bytes:
        return self._encryptor.update(bytes(data))

    def decrypt(self, data: bytes) -> bytes:
        return self._decryptor.update(bytes(data))


def create(key: bytes, iv: bytes, backend: Optional[CryptoBackend] = None) -> AesCtrCipher:
    """
    Create a new AES-CTR cipher.

    Args:
        key: 16 bytes for AES-128, 32 bytes for AES-256
        iv: 16-byte initial counter block
    """
    return AesCtrCipher(key, iv, backend)
