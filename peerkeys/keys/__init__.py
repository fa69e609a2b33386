# Key Management
"""
Public key layer:
- Key value objects for RSA, Ed25519 and secp256k1
- Wire codec (protobuf envelopes)
- Registry dispatching by key type
- Password protected export / import
- Key stretcher for session keys

The module-level functions use a registry built from the environment
configuration on first use.
"""

from functools import lru_cache
from typing import Optional

from .base import PrivateKey, PublicKey
from .codec import Envelope, KeyType
from .exporter import KeyExporter
from .registry import SUPPORTED_KEYS, KeyRegistry, KeySpec
from .stretcher import DirectionalKeys, StretchedKeys, key_stretcher
from .ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from .rsa import RsaPrivateKey, RsaPublicKey
from .secp256k1 import Secp256k1PrivateKey, Secp256k1PublicKey


@lru_cache(maxsize=None)
def default_registry() -> KeyRegistry:
    return KeyRegistry()


def generate_key_pair(key_type, bits: Optional[int] = None) -> PrivateKey:
    return default_registry().generate_key_pair(key_type, bits)


def generate_key_pair_from_seed(key_type, seed: bytes) -> PrivateKey:
    return default_registry().generate_key_pair_from_seed(key_type, seed)


def marshal_public_key(key: PublicKey, key_type=None) -> bytes:
    return default_registry().marshal_public_key(key, key_type)


def unmarshal_public_key(buf: bytes) -> PublicKey:
    return default_registry().unmarshal_public_key(buf)


def marshal_private_key(key: PrivateKey, key_type=None) -> bytes:
    return default_registry().marshal_private_key(key, key_type)


def unmarshal_private_key(buf: bytes) -> PrivateKey:
    return default_registry().unmarshal_private_key(buf)


def export_key(key: PrivateKey, password: str, format: Optional[str] = None) -> str:
    return default_registry().export_key(key, password, format)


def import_key(encrypted_key: str, password: str) -> PrivateKey:
    return default_registry().import_key(encrypted_key, password)


__all__ = [
    'PublicKey',
    'PrivateKey',
    'KeyType',
    'Envelope',
    'KeyExporter',
    'KeyRegistry',
    'KeySpec',
    'SUPPORTED_KEYS',
    'DirectionalKeys',
    'StretchedKeys',
    'key_stretcher',
    'Ed25519PrivateKey',
    'Ed25519PublicKey',
    'RsaPrivateKey',
    'RsaPublicKey',
    'Secp256k1PrivateKey',
    'Secp256k1PublicKey',
    'default_registry',
    'generate_key_pair',
    'generate_key_pair_from_seed',
    'marshal_public_key',
    'unmarshal_public_key',
    'marshal_private_key',
    'unmarshal_private_key',
    'export_key',
    'import_key',
]
