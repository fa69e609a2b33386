"""
Primitive Backend Interface

A backend supplies every raw cryptographic operation the key layer needs,
over plain bytes:

- RSA: generate, sign/verify (PKCS#1 v1.5, SHA-256), encrypt/decrypt
- Ed25519: generate, derive from seed, sign/verify
- secp256k1: generate, sign/verify (deterministic ECDSA over SHA-256)
- HMAC, PBKDF2, AES-GCM, AES-CTR, ECDH, CSPRNG

The backend is chosen once (configuration or explicit injection) and
passed to the registry and key objects. Call sites never probe for
alternative implementations.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

from ..errors import InvalidParameter


class StreamContext(ABC):
    """Stateful cipher stream (one direction of AES-CTR)."""

    @abstractmethod
    def update(self, data: bytes) -> bytes:
        ...


class CryptoBackend(ABC):
    """Capability contract consumed by the key layer."""

    name = "abstract"

    # ------------------------------------------------------------------ RSA

    @abstractmethod
    def rsa_generate(self, bits: int) -> bytes:
        """Generate an RSA key; returns PKCS#1 DER private key."""

    @abstractmethod
    def rsa_public_from_private(self, private_der: bytes) -> bytes:
        """PKIX (SubjectPublicKeyInfo) DER of the matching public key."""

    @abstractmethod
    def rsa_validate_private(self, private_der: bytes) -> None:
        ...

    @abstractmethod
    def rsa_validate_public(self, public_der: bytes) -> None:
        ...

    @abstractmethod
    def rsa_sign(self, private_der: bytes, message: bytes) -> bytes:
        ...

    @abstractmethod
    def rsa_verify(self, public_der: bytes, signature: bytes, message: bytes) -> bool:
        ...

    @abstractmethod
    def rsa_encrypt(self, public_der: bytes, data: bytes) -> bytes:
        ...

    @abstractmethod
    def rsa_decrypt(self, private_der: bytes, data: bytes) -> bytes:
        ...

    @abstractmethod
    def rsa_export_pem(self, private_der: bytes, password: str) -> str:
        """Password-encrypted PKCS#8 PEM."""

    @abstractmethod
    def rsa_import_pem(self, pem: str, password: str) -> bytes:
        """Decrypt a PKCS#8 PEM; returns PKCS#1 DER."""

    # -------------------------------------------------------------- Ed25519

    @abstractmethod
    def ed25519_generate(self) -> bytes:
        """Returns a fresh 32-byte seed."""

    @abstractmethod
    def ed25519_public(self, seed: bytes) -> bytes:
        ...

    @abstractmethod
    def ed25519_validate_public(self, public: bytes) -> None:
        ...

    @abstractmethod
    def ed25519_sign(self, seed: bytes, message: bytes) -> bytes:
        ...

    @abstractmethod
    def ed25519_verify(self, public: bytes, signature: bytes, message: bytes) -> bool:
        ...

    # ------------------------------------------------------------ secp256k1

    @abstractmethod
    def secp256k1_generate(self) -> bytes:
        """Returns a fresh 32-byte private scalar."""

    @abstractmethod
    def secp256k1_public(self, private: bytes) -> bytes:
        """Compressed SEC1 point for a private scalar."""

    @abstractmethod
    def secp256k1_compress(self, public: bytes) -> bytes:
        """Validate a SEC1 point (either form) and return it compressed."""

    @abstractmethod
    def secp256k1_sign(self, private: bytes, message: bytes) -> bytes:
        ...

    @abstractmethod
    def secp256k1_verify(self, public: bytes, signature: bytes, message: bytes) -> bool:
        ...

    # ------------------------------------------------------------ symmetric

    @abstractmethod
    def hmac_digest(self, hash_name: str, key: bytes, data: bytes) -> bytes:
        ...

    @abstractmethod
    def pbkdf2(self, password: bytes, salt: bytes, iterations: int,
               length: int, hash_name: str) -> bytes:
        ...

    @abstractmethod
    def aes_gcm_encrypt(self, key: bytes, nonce: bytes, data: bytes,
                        associated_data: Optional[bytes] = None) -> bytes:
        """Returns ciphertext || tag."""

    @abstractmethod
    def aes_gcm_decrypt(self, key: bytes, nonce: bytes, data: bytes,
                        associated_data: Optional[bytes] = None) -> bytes:
        ...

    @abstractmethod
    def aes_ctr(self, key: bytes, iv: bytes) -> Tuple[StreamContext, StreamContext]:
        """Returns (encryptor, decryptor) stream contexts."""

    @abstractmethod
    def ecdh_generate(self, curve: str) -> Tuple[bytes, bytes]:
        """Returns (private scalar, uncompressed public point)."""

    @abstractmethod
    def ecdh_derive(self, curve: str, private: bytes, peer_public: bytes) -> bytes:
        ...

    @abstractmethod
    def random_bytes(self, length: int) -> bytes:
        ...


# ============================================================================
# Backend selection
# ============================================================================

def _cryptography_backend() -> CryptoBackend:
    from .pyca import CryptographyBackend
    return CryptographyBackend()


BACKEND_FACTORIES: Dict[str, Callable[[], CryptoBackend]] = {
    "cryptography": _cryptography_backend,
}

_instances: Dict[str, CryptoBackend] = {}
_instances_lock = threading.Lock()


def get_backend(name: Optional[str] = None) -> CryptoBackend:
    """
    Return the process-wide backend instance for ``name``.

    Args:
        name: Backend name; defaults to the configured backend

    Raises:
        InvalidParameter: If no backend of that name exists
    """
    if name is None:
        from ..config import load_config
        name = load_config().backend

    factory = BACKEND_FACTORIES.get(name)
    if factory is None:
        names = " / ".join(sorted(BACKEND_FACTORIES))
        raise InvalidParameter(f"Unknown crypto backend '{name}'. Must be {names}")

    with _instances_lock:
        backend = _instances.get(name)
        if backend is None:
            backend = _instances[name] = factory()
        return backend
