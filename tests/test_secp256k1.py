"""
Unit tests for secp256k1 keys.

Tests:
- Deterministic, low-S signatures (RFC 6979 known answer)
- Point compression
- Scalar range checks
- Envelopes as marshaled by Go peers
"""

import pytest
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature, encode_dss_signature,
)
from peerkeys.errors import MalformedKey, UnsupportedOperation
from peerkeys.keys.codec import KeyType
from peerkeys.keys.secp256k1 import (
    Secp256k1PrivateKey, Secp256k1PublicKey,
    generate_key_pair, unmarshal_secp256k1_private_key, unmarshal_secp256k1_public_key,
)
from peerkeys.keys.registry import KeyRegistry
from peerkeys.primitives.pyca import SECP256K1_HALF_ORDER, SECP256K1_ORDER


KEY_ONE = (1).to_bytes(32, "big")
# Generator point G
G_COMPRESSED = bytes.fromhex("0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798")
G_UNCOMPRESSED = bytes.fromhex(
    "0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)


class TestKnownAnswer:
    """Tests against published deterministic ECDSA vectors."""

    def test_public_key_of_one(self):
        """Private key 1 maps to the generator."""
        assert Secp256k1PrivateKey(KEY_ONE).public.marshal() == G_COMPRESSED

    def test_satoshi_vector(self):
        """Key 1 signing 'Satoshi Nakamoto' (SHA-256, RFC 6979, low-S)."""
        expected = encode_dss_signature(
            0x934b1ea10a4b3c1757e2b0c017d0b6143ce3c9a7e6a4a49860d7a6ab210ee3d8,
            0x2442ce9d2b916064108014783e923ec36b49743e2ffa1c4496f01a512aafd9e5,
        )
        key = Secp256k1PrivateKey(KEY_ONE)
        sig = key.sign(b"Satoshi Nakamoto")
        assert sig == expected
        assert key.public.verify(b"Satoshi Nakamoto", sig)


class TestSignVerify:
    """Tests for signatures."""

    def test_sign_verify(self):
        """A signature verifies under the matching public key."""
        key = generate_key_pair()
        sig = key.sign(b"hello world")
        assert key.public.verify(b"hello world", sig)
        assert not key.public.verify(b"hello world!", sig)

    def test_deterministic(self):
        """Signing twice gives identical bytes."""
        key = generate_key_pair()
        assert key.sign(b"data") == key.sign(b"data")

    def test_low_s(self):
        """S is always in the lower half of the order."""
        key = generate_key_pair()
        for i in range(20):
            _, s = decode_dss_signature(key.sign(b"message %d" % i))
            assert 0 < s <= SECP256K1_HALF_ORDER

    def test_garbage_signature(self):
        """Malformed DER verifies as False."""
        key = generate_key_pair()
        assert not key.public.verify(b"data", b"\x30\x02\x00\x00")
        assert not key.public.verify(b"data", b"not a signature")

    def test_wrong_key(self):
        """Verification fails under another key."""
        sig = generate_key_pair().sign(b"data")
        assert not generate_key_pair().public.verify(b"data", sig)


class TestEncoding:
    """Tests for payloads and envelopes."""

    def test_sizes(self):
        """32-byte private scalar, 33-byte compressed public point."""
        key = generate_key_pair()
        assert key.key_type is KeyType.Secp256k1
        assert len(key.marshal()) == 32
        assert len(key.public.marshal()) == 33

    def test_uncompressed_input(self):
        """Uncompressed points are accepted and marshal compressed."""
        public = unmarshal_secp256k1_public_key(G_UNCOMPRESSED)
        assert public.marshal() == G_COMPRESSED
        assert public == Secp256k1PublicKey(G_COMPRESSED)

    def test_private_roundtrip(self):
        """Private payload round trips."""
        key = generate_key_pair()
        assert unmarshal_secp256k1_private_key(key.marshal()) == key

    def test_envelope(self):
        """Public envelope is 08 02 12 21 <point>."""
        public = Secp256k1PrivateKey(KEY_ONE).public
        assert public.to_bytes() == b"\x08\x02\x12\x21" + G_COMPRESSED

    def test_id(self):
        """sha2-256 multihash ids start with Qm."""
        assert generate_key_pair().id().startswith("Qm")

    def test_matching_public_key(self):
        """An explicit public key must match the scalar."""
        assert Secp256k1PrivateKey(KEY_ONE, G_UNCOMPRESSED).public.marshal() == G_COMPRESSED
        with pytest.raises(MalformedKey):
            Secp256k1PrivateKey(KEY_ONE, generate_key_pair().public.marshal())


class TestValidation:
    """Tests for invalid keys."""

    @pytest.mark.parametrize("scalar", [
        b"\x00" * 32,
        SECP256K1_ORDER.to_bytes(32, "big"),
        b"\xff" * 32,
    ])
    def test_scalar_out_of_range(self, scalar):
        """Scalars must be in [1, n-1]."""
        with pytest.raises(MalformedKey):
            unmarshal_secp256k1_private_key(scalar)

    @pytest.mark.parametrize("length", [0, 31, 33])
    def test_private_length(self, length):
        """Private keys must be 32 bytes."""
        with pytest.raises(MalformedKey):
            unmarshal_secp256k1_private_key(b"\x01" * length)

    def test_public_length(self):
        """Public points must be 33 or 65 bytes."""
        with pytest.raises(MalformedKey):
            unmarshal_secp256k1_public_key(G_COMPRESSED[:32])

    def test_point_not_on_curve(self):
        """Invalid points are rejected."""
        with pytest.raises(MalformedKey):
            unmarshal_secp256k1_public_key(b"\x02" + b"\xff" * 32)

    def test_encrypt_unsupported(self):
        """secp256k1 keys cannot encrypt."""
        with pytest.raises(UnsupportedOperation):
            generate_key_pair().public.encrypt(b"data")


class TestInterop:
    """Tests against envelopes laid out the way Go peers marshal them."""

    # PrivateKey{Type: Secp256k1, Data: scalar 1}
    PRIVATE_ENVELOPE = bytes.fromhex(
        "08021220"
        "0000000000000000000000000000000000000000000000000000000000000001"
    )
    # PublicKey{Type: Secp256k1, Data: compressed G}
    PUBLIC_ENVELOPE = bytes.fromhex(
        "08021221"
        "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    )
    MESSAGE = b"Satoshi Nakamoto"
    # DER signature over sha256(MESSAGE), RFC 6979 nonce, low-S
    SIGNATURE = bytes.fromhex(
        "3045"
        "022100934b1ea10a4b3c1757e2b0c017d0b6143ce3c9a7e6a4a49860d7a6ab210ee3d8"
        "02202442ce9d2b916064108014783e923ec36b49743e2ffa1c4496f01a512aafd9e5"
    )

    def test_private_envelope_roundtrip(self):
        """A marshaled private key decodes and re-marshals byte for byte."""
        registry = KeyRegistry()
        key = registry.unmarshal_private_key(self.PRIVATE_ENVELOPE)
        assert key.key_type == KeyType.Secp256k1
        assert registry.marshal_private_key(key) == self.PRIVATE_ENVELOPE
        assert key.public.to_bytes() == self.PUBLIC_ENVELOPE

    def test_public_envelope_roundtrip(self):
        """A marshaled public key decodes and re-marshals byte for byte."""
        registry = KeyRegistry()
        public = registry.unmarshal_public_key(self.PUBLIC_ENVELOPE)
        assert public.key_type == KeyType.Secp256k1
        assert registry.marshal_public_key(public) == self.PUBLIC_ENVELOPE

    def test_signature_matches(self):
        """Signing reproduces the fixed signature byte for byte."""
        key = KeyRegistry().unmarshal_private_key(self.PRIVATE_ENVELOPE)
        assert key.sign(self.MESSAGE) == self.SIGNATURE

    def test_signature_verifies(self):
        """The fixed signature verifies under the decoded public key."""
        public = KeyRegistry().unmarshal_public_key(self.PUBLIC_ENVELOPE)
        assert public.verify(self.MESSAGE, self.SIGNATURE)
        assert not public.verify(b"Satoshi Nakamoto!", self.SIGNATURE)

    def test_ids_agree(self):
        """Private and public keys share one identifier."""
        registry = KeyRegistry()
        key = registry.unmarshal_private_key(self.PRIVATE_ENVELOPE)
        public = registry.unmarshal_public_key(self.PUBLIC_ENVELOPE)
        assert key.id() == public.id()
        assert public.id().startswith("Qm")
