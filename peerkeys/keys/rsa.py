"""
RSA Keys

Payloads:
    public:  PKIX (SubjectPublicKeyInfo) DER
    private: PKCS#1 RSAPrivateKey DER

Features:
- PKCS#1 v1.5 signatures over SHA-256
- PKCS#1 v1.5 encryption / decryption
- JWK conversion
- Legacy password protected PKCS#8 PEM export
"""

import logging
from typing import Dict, Mapping, Optional

from ..config import EXPORT_FORMAT_PKCS8, RSA_MAX_BITS, RSA_MIN_BITS
from ..errors import InvalidParameter, MalformedKey, UnsupportedExportFormat
from ..primitives.backend import CryptoBackend, get_backend
from . import jwk as jwk_codec
from .base import PrivateKey, PublicKey
from .codec import KeyType


logger = logging.getLogger(__name__)


SECRET_LENGTH = 16


def _der(data, what: str) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)) or len(data) == 0:
        raise MalformedKey(f"{what} must be non-empty DER bytes")
    return bytes(data)


class RsaPublicKey(PublicKey):
    key_type = KeyType.RSA

    def __init__(self, key: bytes, backend: Optional[CryptoBackend] = None):
        super().__init__(backend)
        self._key = _der(key, "RSA public key")
        self._backend.rsa_validate_public(self._key)

    def verify(self, data: bytes, sig: bytes) -> bool:
        return self._backend.rsa_verify(self._key, bytes(sig), bytes(data))

    def marshal(self) -> bytes:
        return self._key

    def encrypt(self, data: bytes) -> bytes:
        return self._backend.rsa_encrypt(self._key, bytes(data))

    def to_jwk(self) -> Dict[str, str]:
        return jwk_codec.pkix_to_jwk(self._key)


class RsaPrivateKey(PrivateKey):
    """
    RSA private key.

    Args:
        key: PKCS#1 DER private key
        public_key: PKIX DER public key; derived from ``key`` when omitted
    """

    key_type = KeyType.RSA

    def __init__(self, key: bytes, public_key: Optional[bytes] = None,
                 backend: Optional[CryptoBackend] = None):
        super().__init__(backend)
        self._key = _der(key, "RSA private key")
        self._backend.rsa_validate_private(self._key)
        derived = self._backend.rsa_public_from_private(self._key)
        if public_key is not None and bytes(public_key) != derived:
            raise MalformedKey("RSA public key does not match the private key")
        self._public_key = RsaPublicKey(derived, self._backend)

    @property
    def public(self) -> RsaPublicKey:
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        return self._backend.rsa_sign(self._key, bytes(message))

    def decrypt(self, data: bytes) -> bytes:
        return self._backend.rsa_decrypt(self._key, bytes(data))

    def marshal(self) -> bytes:
        return self._key

    def gen_secret(self) -> bytes:
        """Fresh random secret of SECRET_LENGTH bytes."""
        return self._backend.random_bytes(SECRET_LENGTH)

    def to_jwk(self) -> Dict[str, str]:
        return jwk_codec.pkcs1_to_jwk(self._key)

    def _default_export_format(self, exporter) -> str:
        return exporter.config.export_format

    def _export_format(self, format: str, password: str, exporter) -> str:
        if format == EXPORT_FORMAT_PKCS8:
            return exporter.export_pem(self._key, password)
        raise UnsupportedExportFormat(f"export format '{format}' is not supported")


def unmarshal_rsa_public_key(data: bytes,
                             backend: Optional[CryptoBackend] = None) -> RsaPublicKey:
    return RsaPublicKey(data, backend)


def unmarshal_rsa_private_key(data: bytes,
                              backend: Optional[CryptoBackend] = None) -> RsaPrivateKey:
    return RsaPrivateKey(data, backend=backend)


def from_jwk(jwk: Mapping[str, str],
             backend: Optional[CryptoBackend] = None) -> RsaPrivateKey:
    """Build a private key from a private JWK."""
    return RsaPrivateKey(jwk_codec.jwk_to_pkcs1(jwk), backend=backend)


def public_key_from_jwk(jwk: Mapping[str, str],
                        backend: Optional[CryptoBackend] = None) -> RsaPublicKey:
    return RsaPublicKey(jwk_codec.jwk_to_pkix(jwk), backend)


def generate_key_pair(bits: Optional[int],
                      backend: Optional[CryptoBackend] = None,
                      min_bits: int = RSA_MIN_BITS,
                      max_bits: int = RSA_MAX_BITS) -> RsaPrivateKey:
    """
    Generate a new RSA key pair.

    Args:
        bits: Modulus size; required
        backend: Primitive backend
        min_bits: Smallest accepted modulus
        max_bits: Largest accepted modulus

    Raises:
        InvalidParameter: bits missing or out of bounds
        BackendError: The backend failed to generate a key
    """
    if bits is None:
        raise InvalidParameter("RSA key generation requires a bit length")
    if not isinstance(bits, int) or isinstance(bits, bool):
        raise InvalidParameter(f"RSA bit length must be an integer, got {bits!r}")
    if not min_bits <= bits <= max_bits:
        raise InvalidParameter(f"RSA bit length must be between {min_bits} and {max_bits}, got {bits}")

    backend = backend or get_backend()
    key = RsaPrivateKey(backend.rsa_generate(bits), backend=backend)
    logger.debug("Generated %d-bit RSA key %s", bits, key.id())
    return key
