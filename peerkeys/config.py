"""
peerkeys Configuration

Module-level defaults, optionally overridden from the environment:

    PEERKEYS_BACKEND            primitive backend name ("cryptography")
    PEERKEYS_EXPORT_FORMAT      default export format ("libp2p-key")
    PEERKEYS_EXPORT_ITERATIONS  PBKDF2 iterations for exported keys
    PEERKEYS_RSA_MIN_BITS       smallest RSA modulus accepted for generation

The configuration is read once and handed to the registry; nothing reads
the environment at call sites.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .errors import InvalidParameter


# Backend
DEFAULT_BACKEND = "cryptography"

# Export envelope (PBKDF2 -> AES-GCM)
EXPORT_FORMAT_LIBP2P = "libp2p-key"
EXPORT_FORMAT_PKCS8 = "pkcs-8"
EXPORT_FORMATS = (EXPORT_FORMAT_LIBP2P, EXPORT_FORMAT_PKCS8)
DEFAULT_EXPORT_FORMAT = EXPORT_FORMAT_LIBP2P

EXPORT_ITERATIONS = 32767
EXPORT_SALT_LENGTH = 16     # 128-bit salt
EXPORT_NONCE_LENGTH = 12    # 96-bit GCM nonce
EXPORT_KEY_LENGTH = 16      # AES-128-GCM
EXPORT_TAG_LENGTH = 16      # 128-bit GCM tag
EXPORT_DIGEST = "sha256"


# RSA generation bounds
RSA_MIN_BITS = 1024
RSA_MAX_BITS = 8192

ENV_PREFIX = "PEERKEYS_"


@dataclass(frozen=True)
class CryptoConfig:
    """Complete peerkeys configuration."""
    backend: str = DEFAULT_BACKEND
    export_format: str = DEFAULT_EXPORT_FORMAT
    export_iterations: int = EXPORT_ITERATIONS
    export_salt_length: int = EXPORT_SALT_LENGTH
    export_nonce_length: int = EXPORT_NONCE_LENGTH
    export_key_length: int = EXPORT_KEY_LENGTH
    export_digest: str = EXPORT_DIGEST
    rsa_min_bits: int = RSA_MIN_BITS
    rsa_max_bits: int = RSA_MAX_BITS

    def validate(self) -> "CryptoConfig":
        """Check internal consistency, returning self for chaining."""
        if self.export_format not in EXPORT_FORMATS:
            raise InvalidParameter(
                f"Unknown export format '{self.export_format}'. "
                f"Must be {' / '.join(EXPORT_FORMATS)}"
            )
        if self.export_iterations < 1:
            raise InvalidParameter("Export iterations must be positive")
        if self.export_key_length not in (16, 32):
            raise InvalidParameter("Export key length must be 16 or 32 bytes")
        if self.export_salt_length < 1 or self.export_nonce_length < 1:
            raise InvalidParameter("Salt and nonce lengths must be positive")
        if not 0 < self.rsa_min_bits <= self.rsa_max_bits:
            raise InvalidParameter(
                f"Invalid RSA bit bounds {self.rsa_min_bits}..{self.rsa_max_bits}"
            )
        return self


def _env_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidParameter(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> CryptoConfig:
    """
    Build a configuration from defaults and ``PEERKEYS_*`` variables.

    Args:
        environ: Mapping to read instead of ``os.environ`` (tests)

    Returns:
        Validated CryptoConfig
    """
    if environ is None:
        environ = os.environ

    config = CryptoConfig()
    overrides = {}

    backend = environ.get(ENV_PREFIX + "BACKEND")
    if backend:
        overrides["backend"] = backend

    export_format = environ.get(ENV_PREFIX + "EXPORT_FORMAT")
    if export_format:
        overrides["export_format"] = export_format

    iterations = _env_int(environ, "EXPORT_ITERATIONS")
    if iterations is not None:
        overrides["export_iterations"] = iterations

    min_bits = _env_int(environ, "RSA_MIN_BITS")
    if min_bits is not None:
        overrides["rsa_min_bits"] = min_bits

    return replace(config, **overrides).validate()
