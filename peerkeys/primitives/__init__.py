# Primitive Backends
"""
Primitive cryptographic building blocks:
- Pluggable backend interface (CryptoBackend) and the cryptography backend
- HMAC (SHA1 / SHA256 / SHA512)
- AES-CTR stream cipher
- AES-GCM password envelope
- PBKDF2
- Ephemeral ECDH (P-256 / P-384 / P-521)
- CSPRNG
"""

from .backend import CryptoBackend, StreamContext, get_backend, BACKEND_FACTORIES
from .random import random_bytes
from .pbkdf2 import pbkdf2
from .ecdh import EphemeralKeyPair, generate_ephemeral_key_pair
from . import aes, aes_gcm, hmac

__all__ = [
    'CryptoBackend',
    'StreamContext',
    'get_backend',
    'BACKEND_FACTORIES',
    'random_bytes',
    'pbkdf2',
    'EphemeralKeyPair',
    'generate_ephemeral_key_pair',
    'aes',
    'aes_gcm',
    'hmac',
]
