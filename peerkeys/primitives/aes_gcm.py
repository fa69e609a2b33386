"""
AES-GCM Password Envelope

Encrypts arbitrary data under a password:
- PBKDF2 key derivation (32767 iterations, SHA-256 by default)
- Random salt and nonce per message
- AES-GCM authenticated encryption (AES-128 by default)

Format:
    [salt (16) | nonce (12) | ciphertext | tag (16)]

The tag is appended to the ciphertext, never stored separately.
"""

from typing import Optional, Union

from ..config import (
    EXPORT_DIGEST,
    EXPORT_ITERATIONS,
    EXPORT_KEY_LENGTH,
    EXPORT_NONCE_LENGTH,
    EXPORT_SALT_LENGTH,
    EXPORT_TAG_LENGTH,
)
from ..errors import InvalidParameter, MalformedKey
from .backend import CryptoBackend, get_backend


class AesGcmEnvelope:
    """
    Password based AES-GCM encryption with a fixed byte layout.

    Example:
        >>> envelope = AesGcmEnvelope()
        >>> blob = envelope.encrypt(b"secret", "password")
        >>> envelope.decrypt(blob, "password")
        b'secret'
    """

    def __init__(self, algorithm_tag_length: int = EXPORT_TAG_LENGTH,
                 nonce_length: int = EXPORT_NONCE_LENGTH,
                 key_length: int = EXPORT_KEY_LENGTH,
                 digest: str = EXPORT_DIGEST,
                 salt_length: int = EXPORT_SALT_LENGTH,
                 iterations: int = EXPORT_ITERATIONS,
                 backend: Optional[CryptoBackend] = None):
        if algorithm_tag_length != 16:
            raise InvalidParameter("AES-GCM tag length must be 16 bytes")
        if key_length not in (16, 24, 32):
            raise InvalidParameter(f"Invalid AES-GCM key length {key_length}")
        self.algorithm_tag_length = algorithm_tag_length
        self.nonce_length = nonce_length
        self.key_length = key_length
        self.digest = digest
        self.salt_length = salt_length
        self.iterations = iterations
        self._backend = backend or get_backend()

    @property
    def overhead(self) -> int:
        """Bytes added to the plaintext."""
        return self.salt_length + self.nonce_length + self.algorithm_tag_length

    def derive_key(self, password: Union[str, bytes], salt: bytes) -> bytes:
        if isinstance(password, str):
            password = password.encode("utf-8")
        return self._backend.pbkdf2(password, salt, self.iterations,
                                    self.key_length, self.digest)

    def encrypt_with_key(self, data: bytes, key: bytes) -> bytes:
        """
        Encrypt with an already derived key.

        Returns:
            nonce || ciphertext || tag
        """
        nonce = self._backend.random_bytes(self.nonce_length)
        ciphertext_with_tag = self._backend.aes_gcm_encrypt(key, nonce, bytes(data))
        return nonce + ciphertext_with_tag

    def encrypt(self, data: bytes, password: Union[str, bytes]) -> bytes:
        """
        Encrypt under a password.

        Returns:
            salt || nonce || ciphertext || tag
        """
        salt = self._backend.random_bytes(self.salt_length)
        key = self.derive_key(password, salt)
        return salt + self.encrypt_with_key(data, key)

    def decrypt_with_key(self, ciphertext_and_nonce: bytes, key: bytes) -> bytes:
        """
        Decrypt nonce || ciphertext || tag with a derived key.

        Raises:
            MalformedKey: If the data is too short to hold nonce and tag
            DecryptionFailed: If the tag does not verify
        """
        data = bytes(ciphertext_and_nonce)
        if len(data) < self.nonce_length + self.algorithm_tag_length:
            raise MalformedKey("Encrypted data is too short")
        nonce = data[:self.nonce_length]
        ciphertext_with_tag = data[self.nonce_length:]
        return self._backend.aes_gcm_decrypt(key, nonce, ciphertext_with_tag)

    def decrypt(self, data: bytes, password: Union[str, bytes]) -> bytes:
        """
        Decrypt salt || nonce || ciphertext || tag under a password.

        Raises:
            MalformedKey: If the blob is shorter than the fixed overhead
            DecryptionFailed: Wrong password or tampered data
        """
        data = bytes(data)
        if len(data) < self.overhead:
            raise MalformedKey(
                f"Encrypted data must be at least {self.overhead} bytes, got {len(data)}"
            )
        salt = data[:self.salt_length]
        key = self.derive_key(password, salt)
        return self.decrypt_with_key(data[self.salt_length:], key)


def create(**options) -> AesGcmEnvelope:
    """Create an envelope; keyword options as for AesGcmEnvelope."""
    return AesGcmEnvelope(**options)
