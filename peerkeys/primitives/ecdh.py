"""
Ephemeral ECDH

Generates a one-shot key pair on a NIST curve and computes the shared
secret with a peer's public point. The secret is fed to the key stretcher.

Supported curves: P-256, P-384, P-521
"""

from dataclasses import dataclass, field
from typing import Optional

from ..errors import UnsupportedCurve
from .backend import CryptoBackend, get_backend


CURVE_TYPES = ("P-256", "P-384", "P-521")


def validate_curve_type(curve_types, curve: str) -> None:
    if curve not in curve_types:
        names = " / ".join(curve_types)
        raise UnsupportedCurve(f"Unknown curve: {curve}. Must be {names}")


@dataclass
class EphemeralKeyPair:
    """
    Ephemeral ECDH key pair.

    Attributes:
        curve: Curve name
        key: Public key as an uncompressed SEC1 point (share this)
    """
    curve: str
    key: bytes
    _private: bytes = field(repr=False)
    _backend: CryptoBackend = field(repr=False)

    def gen_shared_key(self, their_public: bytes,
                       force_private: Optional[bytes] = None) -> bytes:
        """
        Derive the shared secret from the peer's public point.

        Args:
            their_public: Peer's public key (SEC1 point)
            force_private: Private scalar to use instead of the generated one

        Returns:
            Raw shared secret (x coordinate)

        Raises:
            MalformedKey: If the peer point is not on the curve
        """
        private = self._private if force_private is None else bytes(force_private)
        return self._backend.ecdh_derive(self.curve, private, bytes(their_public))


def generate_ephemeral_key_pair(curve: str,
                                backend: Optional[CryptoBackend] = None) -> EphemeralKeyPair:
    """
    Generate an ephemeral key pair on ``curve``.

    Raises:
        UnsupportedCurve: For curves outside CURVE_TYPES
    """
    validate_curve_type(CURVE_TYPES, curve)
    backend = backend or get_backend()
    private, public = backend.ecdh_generate(curve)
    return EphemeralKeyPair(curve=curve, key=public, _private=private, _backend=backend)
