# peerkeys
"""
Peer identity keys for libp2p-style networks:
- RSA, Ed25519 and secp256k1 key pairs behind one interface
- Canonical protobuf wire encoding shared with Go / JS / Rust peers
- Password protected key export (PBKDF2 + AES-GCM)
- Session key stretching, ephemeral ECDH, HMAC, AES-CTR

Example:
    >>> from peerkeys import generate_key_pair, unmarshal_public_key
    >>> key = generate_key_pair("Ed25519")
    >>> sig = key.sign(b"hello")
    >>> unmarshal_public_key(key.public.to_bytes()).verify(b"hello", sig)
    True
"""

import logging

from .config import CryptoConfig, load_config
from .errors import (
    CryptoError,
    InvalidParameter,
    UnsupportedExportFormat,
    UnsupportedKeyType,
    UnsupportedDerivation,
    UnsupportedOperation,
    UnsupportedCipher,
    UnsupportedHash,
    UnsupportedCurve,
    MalformedKey,
    EnvelopeFormatError,
    DecryptionFailed,
    BackendError,
)
from .keys import (
    KeyType,
    KeyRegistry,
    PrivateKey,
    PublicKey,
    generate_key_pair,
    generate_key_pair_from_seed,
    marshal_public_key,
    unmarshal_public_key,
    marshal_private_key,
    unmarshal_private_key,
    export_key,
    import_key,
    key_stretcher,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'CryptoConfig',
    'load_config',
    'CryptoError',
    'InvalidParameter',
    'UnsupportedExportFormat',
    'UnsupportedKeyType',
    'UnsupportedDerivation',
    'UnsupportedOperation',
    'UnsupportedCipher',
    'UnsupportedHash',
    'UnsupportedCurve',
    'MalformedKey',
    'EnvelopeFormatError',
    'DecryptionFailed',
    'BackendError',
    'KeyType',
    'KeyRegistry',
    'PrivateKey',
    'PublicKey',
    'generate_key_pair',
    'generate_key_pair_from_seed',
    'marshal_public_key',
    'unmarshal_public_key',
    'marshal_private_key',
    'unmarshal_private_key',
    'export_key',
    'import_key',
    'key_stretcher',
]
