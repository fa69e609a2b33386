"""
Key Registry

Dispatches generic key operations to the algorithm selected by a key type:

    KeyType -> KeySpec(generate, generate_from_seed,
                       unmarshal_public, unmarshal_private)

The table is built once and never mutated. A registry carries the
backend and configuration every key it creates is bound to.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple, Union

from ..config import CryptoConfig, load_config
from ..errors import (
    BackendError,
    CryptoError,
    EnvelopeFormatError,
    InvalidParameter,
    UnsupportedDerivation,
)
from ..primitives.backend import CryptoBackend, get_backend
from . import codec, ed25519, rsa, secp256k1
from .base import PrivateKey, PublicKey
from .codec import KeyType
from .exporter import KeyExporter


logger = logging.getLogger(__name__)


KeyTypeLike = Union[KeyType, int, str]


# ============================================================================
# Algorithm table
# ============================================================================

def _generate_rsa(backend: CryptoBackend, bits: Optional[int],
                  config: CryptoConfig) -> PrivateKey:
    return rsa.generate_key_pair(bits, backend, config.rsa_min_bits, config.rsa_max_bits)


def _generate_ed25519(backend: CryptoBackend, bits: Optional[int],
                      config: CryptoConfig) -> PrivateKey:
    return ed25519.generate_key_pair(backend)


def _generate_secp256k1(backend: CryptoBackend, bits: Optional[int],
                        config: CryptoConfig) -> PrivateKey:
    return secp256k1.generate_key_pair(backend)


@dataclass(frozen=True)
class KeySpec:
    """Operations one algorithm provides to the registry."""
    key_type: KeyType
    generate: Callable[[CryptoBackend, Optional[int], CryptoConfig], PrivateKey]
    unmarshal_public: Callable[[bytes, CryptoBackend], PublicKey]
    unmarshal_private: Callable[[bytes, CryptoBackend], PrivateKey]
    generate_from_seed: Optional[Callable[[bytes, CryptoBackend], PrivateKey]] = None

    @property
    def algorithm(self) -> str:
        return self.key_type.algorithm


SUPPORTED_KEYS: Mapping[KeyType, KeySpec] = MappingProxyType({
    KeyType.RSA: KeySpec(
        key_type=KeyType.RSA,
        generate=_generate_rsa,
        unmarshal_public=rsa.unmarshal_rsa_public_key,
        unmarshal_private=rsa.unmarshal_rsa_private_key,
    ),
    KeyType.Ed25519: KeySpec(
        key_type=KeyType.Ed25519,
        generate=_generate_ed25519,
        unmarshal_public=ed25519.unmarshal_ed25519_public_key,
        unmarshal_private=ed25519.unmarshal_ed25519_private_key,
        generate_from_seed=ed25519.generate_key_pair_from_seed,
    ),
    KeyType.Secp256k1: KeySpec(
        key_type=KeyType.Secp256k1,
        generate=_generate_secp256k1,
        unmarshal_public=secp256k1.unmarshal_secp256k1_public_key,
        unmarshal_private=secp256k1.unmarshal_secp256k1_private_key,
    ),
})


# ============================================================================
# Registry
# ============================================================================

class KeyRegistry:
    """
    Entry point for algorithm-agnostic key handling.

    Example:
        >>> registry = KeyRegistry()
        >>> key = registry.generate_key_pair("Ed25519")
        >>> registry.unmarshal_private_key(registry.marshal_private_key(key)) == key
        True
    """

    def __init__(self, backend: Optional[CryptoBackend] = None,
                 config: Optional[CryptoConfig] = None):
        self.config = config or load_config()
        self.backend = backend or get_backend(self.config.backend)
        self.exporter = KeyExporter(backend=self.backend, config=self.config)

    def key_spec(self, key_type: KeyTypeLike) -> KeySpec:
        """
        Raises:
            UnsupportedKeyType: If ``key_type`` names no registered algorithm
        """
        return SUPPORTED_KEYS[KeyType.parse(key_type)]

    def supported_types(self) -> Tuple[KeyType, ...]:
        return tuple(SUPPORTED_KEYS)

    # ========================================================================
    # Generation
    # ========================================================================

    def generate_key_pair(self, key_type: KeyTypeLike, bits: Optional[int] = None) -> PrivateKey:
        """
        Generate a new key pair.

        Args:
            key_type: "RSA", "Ed25519" or "secp256k1" (or a KeyType)
            bits: Modulus size, RSA only

        Raises:
            UnsupportedKeyType: Unknown key type
            InvalidParameter: RSA without bits or out of bounds
            BackendError: The backend failed to generate the key
        """
        spec = self.key_spec(key_type)
        try:
            key = spec.generate(self.backend, bits, self.config)
        except CryptoError:
            raise
        except Exception as exc:
            raise BackendError(f"{spec.algorithm} key generation failed: {exc}") from exc
        logger.debug("Generated %s key %s", spec.algorithm, key.id())
        return key

    def generate_key_pair_from_seed(self, key_type: KeyTypeLike, seed: bytes) -> PrivateKey:
        """
        Deterministically derive a key pair from a 32-byte seed.

        Raises:
            UnsupportedKeyType: Unknown key type
            UnsupportedDerivation: The algorithm has no seed derivation
            InvalidParameter: Seed is not 32 bytes
        """
        spec = self.key_spec(key_type)
        if spec.generate_from_seed is None:
            raise UnsupportedDerivation(
                f"{spec.algorithm} keys cannot be derived from a seed. Must be Ed25519"
            )
        return spec.generate_from_seed(seed, self.backend)

    # ========================================================================
    # Wire format
    # ========================================================================

    def _check_type(self, key, key_type: Optional[KeyTypeLike]) -> None:
        if key_type is not None and self.key_spec(key_type).key_type != key.key_type:
            raise InvalidParameter(
                f"Key is {key.algorithm}, not {KeyType.parse(key_type).algorithm}"
            )

    def marshal_public_key(self, key: PublicKey, key_type: Optional[KeyTypeLike] = None) -> bytes:
        if not isinstance(key, PublicKey):
            raise InvalidParameter("Expected a public key")
        self._check_type(key, key_type)
        return key.to_bytes()

    def marshal_private_key(self, key: PrivateKey, key_type: Optional[KeyTypeLike] = None) -> bytes:
        if not isinstance(key, PrivateKey):
            raise InvalidParameter("Expected a private key")
        self._check_type(key, key_type)
        return key.to_bytes()

    def unmarshal_public_key(self, buf: bytes) -> PublicKey:
        """
        Raises:
            UnsupportedKeyType: Unknown discriminant
            MalformedKey: Invalid envelope or payload
        """
        envelope = codec.decode_public_key(buf)
        return SUPPORTED_KEYS[envelope.key_type].unmarshal_public(envelope.data, self.backend)

    def unmarshal_private_key(self, buf: bytes) -> PrivateKey:
        """
        Raises:
            UnsupportedKeyType: Unknown discriminant
            MalformedKey: Invalid envelope or payload
        """
        envelope = codec.decode_private_key(buf)
        return SUPPORTED_KEYS[envelope.key_type].unmarshal_private(envelope.data, self.backend)

    # ========================================================================
    # Password protected export
    # ========================================================================

    def export_key(self, key: PrivateKey, password: str, format: Optional[str] = None) -> str:
        """
        Export ``key`` encrypted under ``password``.

        Raises:
            UnsupportedExportFormat: Format not available for this algorithm
        """
        if not isinstance(key, PrivateKey):
            raise InvalidParameter("Expected a private key")
        return key.export(password, format, exporter=self.exporter)

    def import_key(self, encrypted_key: str, password: str) -> PrivateKey:
        """
        Import a key exported by export_key (or a legacy RSA PKCS#8 PEM).

        Raises:
            DecryptionFailed: Wrong password or tampered data
            MalformedKey: Decrypted data is not a valid key, or the text is
                neither an envelope nor a protected RSA PEM
        """
        try:
            plaintext = self.exporter.import_key(encrypted_key, password)
        except EnvelopeFormatError:
            logger.warning("Input is not a libp2p-key envelope, trying PKCS#8 PEM import")
            der = self.exporter.import_pem(encrypted_key, password)
            key = rsa.unmarshal_rsa_private_key(der, self.backend)
        else:
            key = self.unmarshal_private_key(plaintext)
        logger.debug("Imported %s key %s", key.algorithm, key.id())
        return key
