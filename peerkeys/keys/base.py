"""
Key Value Objects - shared capability set

Every algorithm provides a PublicKey / PrivateKey pair with:
- marshal(): raw algorithm payload
- to_bytes(): wire envelope (what peers exchange)
- equals(): byte equality of the wire envelope
- hash(): sha2-256 multihash of the wire envelope
- id(): key identifier, identical for a private key and its public key
- verify() on public keys; sign(), public, export() on private keys

encrypt()/decrypt() are only offered by algorithms that support them;
everywhere else they raise UnsupportedOperation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..config import EXPORT_FORMAT_LIBP2P
from ..errors import UnsupportedExportFormat, UnsupportedOperation
from ..primitives.backend import CryptoBackend, get_backend
from ..util import base58_encode, multihash_sha256
from . import codec
from .codec import KeyType


class PublicKey(ABC):
    """Algorithm-agnostic public key."""

    key_type: KeyType

    def __init__(self, backend: Optional[CryptoBackend] = None):
        self._backend = backend or get_backend()

    @property
    def algorithm(self) -> str:
        return self.key_type.algorithm

    @abstractmethod
    def marshal(self) -> bytes:
        """Raw algorithm-specific payload."""

    @abstractmethod
    def verify(self, data: bytes, sig: bytes) -> bool:
        """Check ``sig`` over ``data``; False on any mismatch."""

    def encrypt(self, data: bytes) -> bytes:
        raise UnsupportedOperation(f"{self.algorithm} keys do not support encryption")

    def to_bytes(self) -> bytes:
        """Serialized PublicKey envelope."""
        return codec.encode_public_key(self.key_type, self.marshal())

    def equals(self, other) -> bool:
        if not isinstance(other, PublicKey):
            return False
        return self.to_bytes() == other.to_bytes()

    def hash(self) -> bytes:
        """Content address: sha2-256 multihash of the envelope (34 bytes)."""
        return multihash_sha256(self.to_bytes())

    def id(self) -> str:
        """Key identifier: base58 of the sha2-256 multihash of the envelope."""
        return base58_encode(self.hash())

    def __eq__(self, other):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.equals(other)

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        return f"<{type(self).__name__} {base58_encode(self.hash())}>"


class PrivateKey(ABC):
    """Algorithm-agnostic private key. Owns its public key."""

    key_type: KeyType

    def __init__(self, backend: Optional[CryptoBackend] = None):
        self._backend = backend or get_backend()

    @property
    def algorithm(self) -> str:
        return self.key_type.algorithm

    @property
    @abstractmethod
    def public(self) -> PublicKey:
        ...

    @abstractmethod
    def marshal(self) -> bytes:
        """Raw algorithm-specific payload."""

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        ...

    def decrypt(self, data: bytes) -> bytes:
        raise UnsupportedOperation(f"{self.algorithm} keys do not support decryption")

    def to_bytes(self) -> bytes:
        """Serialized PrivateKey envelope."""
        return codec.encode_private_key(self.key_type, self.marshal())

    def equals(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return False
        return self.to_bytes() == other.to_bytes()

    def hash(self) -> bytes:
        """sha2-256 multihash of the private envelope."""
        return multihash_sha256(self.to_bytes())

    def id(self) -> str:
        """Identifier of the public key, see PublicKey.id()."""
        return self.public.id()

    def export(self, password: str, format: Optional[str] = None, exporter=None) -> str:
        """
        Export the key protected by ``password``.

        Args:
            password: Password to encrypt the key with
            format: Export format, "libp2p-key" unless the algorithm says otherwise
            exporter: KeyExporter to use (defaults to one on this key's backend)

        Returns:
            Encrypted key as text

        Raises:
            UnsupportedExportFormat: If the algorithm cannot export to ``format``
        """
        if exporter is None:
            from .exporter import KeyExporter
            exporter = KeyExporter(backend=self._backend)
        if format is None:
            format = self._default_export_format(exporter)
        if format == EXPORT_FORMAT_LIBP2P:
            return exporter.export_key(self.to_bytes(), password)
        return self._export_format(format, password, exporter)

    def _default_export_format(self, exporter) -> str:
        return EXPORT_FORMAT_LIBP2P

    def _export_format(self, format: str, password: str, exporter) -> str:
        raise UnsupportedExportFormat(f"export format '{format}' is not supported")

    def __eq__(self, other):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.equals(other)

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        # never show key material
        return f"<{type(self).__name__} {self.id()}>"
