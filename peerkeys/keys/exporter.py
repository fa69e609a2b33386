"""
Key Exporter

Password protection for serialized private keys.

Formats:
    libp2p-key (default, every algorithm):
        multibase 'm' ( salt (16) | nonce (12) | ciphertext | tag (16) )
        PBKDF2-SHA256, 32767 iterations -> AES-128-GCM
        plaintext is the PrivateKey wire envelope

    pkcs-8 (RSA only, legacy):
        password-encrypted PKCS#8 PEM

Import never falls back to PEM once the input parsed as an envelope; a
wrong password is always reported as DecryptionFailed.
"""

import logging
from typing import Optional

from ..config import CryptoConfig, load_config
from ..errors import EnvelopeFormatError, InvalidParameter, MalformedKey
from ..primitives.aes_gcm import AesGcmEnvelope
from ..primitives.backend import CryptoBackend, get_backend
from ..util import multibase_base64_decode, multibase_base64_encode


logger = logging.getLogger(__name__)


PEM_HEADER = "-----BEGIN"


def _check_password(password) -> None:
    if not isinstance(password, str):
        raise InvalidParameter("Password must be a string")


class KeyExporter:
    """
    Encrypts and decrypts private key envelopes under a password.

    Example:
        >>> exporter = KeyExporter()
        >>> text = exporter.export_key(key.to_bytes(), "password")
        >>> exporter.import_key(text, "password") == key.to_bytes()
        True
    """

    def __init__(self, backend: Optional[CryptoBackend] = None,
                 config: Optional[CryptoConfig] = None):
        self.config = config or load_config()
        self._backend = backend or get_backend(self.config.backend)
        self._envelope = AesGcmEnvelope(
            nonce_length=self.config.export_nonce_length,
            key_length=self.config.export_key_length,
            digest=self.config.export_digest,
            salt_length=self.config.export_salt_length,
            iterations=self.config.export_iterations,
            backend=self._backend,
        )

    # ========================================================================
    # Binary envelope
    # ========================================================================

    def encrypt(self, plaintext: bytes, password: str) -> bytes:
        """salt || nonce || ciphertext || tag"""
        _check_password(password)
        return self._envelope.encrypt(plaintext, password)

    def decrypt(self, blob: bytes, password: str) -> bytes:
        """
        Raises:
            MalformedKey: Blob shorter than the fixed overhead
            DecryptionFailed: Wrong password or tampered data
        """
        _check_password(password)
        return self._envelope.decrypt(blob, password)

    # ========================================================================
    # libp2p-key text
    # ========================================================================

    def export_key(self, key_bytes: bytes, password: str) -> str:
        """
        Export a PrivateKey envelope as multibase text.

        Args:
            key_bytes: Serialized PrivateKey envelope
            password: Password to encrypt with

        Returns:
            'm'-prefixed base64 text
        """
        blob = self.encrypt(key_bytes, password)
        logger.debug("Exported key envelope (%d bytes)", len(blob))
        return multibase_base64_encode(blob)

    def import_key(self, text: str, password: str) -> bytes:
        """
        Recover a PrivateKey envelope from multibase text.

        Raises:
            EnvelopeFormatError: Text is not a multibase envelope at all
            DecryptionFailed: Wrong password or tampered data
        """
        _check_password(password)
        try:
            blob = multibase_base64_decode(text)
        except MalformedKey as exc:
            raise EnvelopeFormatError(f"Not an encrypted key envelope: {exc}") from exc
        if len(blob) < self._envelope.overhead:
            raise EnvelopeFormatError(
                f"Encrypted key envelope must be at least {self._envelope.overhead} bytes"
            )
        return self.decrypt(blob, password)

    # ========================================================================
    # PKCS#8 PEM (RSA)
    # ========================================================================

    def export_pem(self, private_der: bytes, password: str) -> str:
        """PKCS#1 DER RSA key -> password encrypted PKCS#8 PEM."""
        _check_password(password)
        return self._backend.rsa_export_pem(private_der, password)

    def import_pem(self, text: str, password: str) -> bytes:
        """
        Password encrypted PKCS#8 PEM -> PKCS#1 DER RSA key.

        Raises:
            MalformedKey: Not a protected RSA PEM
            DecryptionFailed: Wrong password
        """
        _check_password(password)
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("ascii", errors="replace")
        if not isinstance(text, str) or PEM_HEADER not in text:
            raise MalformedKey("Not a PEM encoded key")
        return self._backend.rsa_import_pem(text, password)
