"""
Unit tests for Ed25519 keys.

Tests:
- RFC 8032 known answer
- Private payload forms (64 bytes, legacy 96 bytes; a bare seed is rejected)
- Identifiers and hashes
- Unsupported capabilities
"""

import pytest
from peerkeys.errors import InvalidParameter, MalformedKey, UnsupportedOperation
from peerkeys.keys.codec import KeyType, encode_private_key
from peerkeys.keys.ed25519 import (
    Ed25519PrivateKey, Ed25519PublicKey,
    generate_key_pair, generate_key_pair_from_seed,
    unmarshal_ed25519_private_key, unmarshal_ed25519_public_key,
)
from peerkeys.keys.registry import KeyRegistry


# RFC 8032 section 7.1, test 1
RFC_SEED = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
RFC_PUBLIC = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")
RFC_SIGNATURE = bytes.fromhex(
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)


class TestKnownAnswer:
    """Tests against RFC 8032."""

    def test_public_from_seed(self):
        """The seed derives the published public key."""
        key = generate_key_pair_from_seed(RFC_SEED)
        assert key.public.marshal() == RFC_PUBLIC

    def test_signature(self):
        """Signing the empty message reproduces the published signature."""
        key = generate_key_pair_from_seed(RFC_SEED)
        assert key.sign(b"") == RFC_SIGNATURE
        assert key.public.verify(b"", RFC_SIGNATURE)


class TestGeneration:
    """Tests for key generation."""

    def test_generate(self):
        """Fresh keys have the documented sizes."""
        key = generate_key_pair()
        assert key.key_type is KeyType.Ed25519
        assert key.algorithm == "Ed25519"
        assert len(key.marshal()) == 64
        assert len(key.public.marshal()) == 32

    def test_keys_differ(self):
        """Two generated keys differ."""
        assert generate_key_pair() != generate_key_pair()

    def test_seed_deterministic(self):
        """The same seed gives the same key."""
        seed = bytes(range(32))
        assert generate_key_pair_from_seed(seed) == generate_key_pair_from_seed(seed)

    @pytest.mark.parametrize("seed", [b"\x00" * 31, b"\x00" * 33, b"", "a" * 32])
    def test_seed_length(self, seed):
        """Seeds must be exactly 32 bytes."""
        with pytest.raises(InvalidParameter):
            generate_key_pair_from_seed(seed)


class TestSignVerify:
    """Tests for signatures."""

    def test_sign_verify(self):
        """A signature verifies under the matching public key."""
        key = generate_key_pair()
        sig = key.sign(b"hello world")
        assert len(sig) == 64
        assert key.public.verify(b"hello world", sig)

    def test_wrong_message(self):
        """Verification fails for another message."""
        key = generate_key_pair()
        sig = key.sign(b"hello world")
        assert not key.public.verify(b"hello world!", sig)

    def test_wrong_key(self):
        """Verification fails under another key."""
        sig = generate_key_pair().sign(b"data")
        assert not generate_key_pair().public.verify(b"data", sig)

    def test_tampered_signature(self):
        """Verification fails for a modified signature."""
        key = generate_key_pair()
        sig = bytearray(key.sign(b"data"))
        sig[0] ^= 0xFF
        assert not key.public.verify(b"data", bytes(sig))


class TestUnmarshal:
    """Tests for payload forms."""

    def test_full_payload(self):
        """seed || public round trips."""
        key = generate_key_pair()
        restored = unmarshal_ed25519_private_key(key.marshal())
        assert restored == key
        assert restored.marshal() == key.marshal()

    def test_bare_seed_rejected(self):
        """A 32-byte seed on its own is not a private key payload."""
        with pytest.raises(MalformedKey):
            unmarshal_ed25519_private_key(RFC_SEED)

    def test_bare_seed_envelope_rejected(self):
        """An envelope carrying only a seed is rejected by the registry."""
        envelope = encode_private_key(KeyType.Ed25519, b"\x07" * 32)
        with pytest.raises(MalformedKey):
            KeyRegistry().unmarshal_private_key(envelope)

    def test_legacy_redundant_public(self):
        """The 96-byte legacy form is accepted."""
        payload = RFC_SEED + RFC_PUBLIC + RFC_PUBLIC
        assert unmarshal_ed25519_private_key(payload).marshal() == RFC_SEED + RFC_PUBLIC

    def test_mismatching_public(self):
        """An embedded public key must match the seed."""
        other = generate_key_pair().public.marshal()
        with pytest.raises(MalformedKey):
            unmarshal_ed25519_private_key(RFC_SEED + other)

    @pytest.mark.parametrize("length", [0, 31, 32, 33, 63, 65, 128])
    def test_bad_private_length(self, length):
        """Other lengths are malformed."""
        with pytest.raises(MalformedKey):
            unmarshal_ed25519_private_key(b"\x01" * length)

    @pytest.mark.parametrize("length", [0, 31, 33, 64])
    def test_bad_public_length(self, length):
        """Public keys must be 32 bytes."""
        with pytest.raises(MalformedKey):
            unmarshal_ed25519_public_key(b"\x01" * length)

    def test_public_roundtrip(self):
        """Public keys round trip through marshal."""
        public = generate_key_pair().public
        assert unmarshal_ed25519_public_key(public.marshal()) == public


class TestIdentity:
    """Tests for envelopes, hashes and identifiers."""

    def test_envelope(self):
        """Public envelope is 08 01 12 20 <key>."""
        key = generate_key_pair_from_seed(RFC_SEED)
        assert key.public.to_bytes() == b"\x08\x01\x12\x20" + RFC_PUBLIC
        assert key.to_bytes() == b"\x08\x01\x12\x40" + RFC_SEED + RFC_PUBLIC

    def test_hash(self):
        """hash() is a 34-byte sha2-256 multihash."""
        digest = generate_key_pair().public.hash()
        assert len(digest) == 34
        assert digest[:2] == b"\x12\x20"

    def test_id_is_peer_id(self):
        """Identity multihash ids start with 12D3KooW."""
        key = generate_key_pair()
        assert key.id().startswith("12D3KooW")
        assert key.public.id() == key.id()

    def test_id_stable(self):
        """id() is deterministic."""
        key = generate_key_pair_from_seed(RFC_SEED)
        assert key.id() == generate_key_pair_from_seed(RFC_SEED).id()

    def test_equality_and_hashing(self):
        """Equal keys compare and hash equal."""
        a = generate_key_pair_from_seed(RFC_SEED)
        b = unmarshal_ed25519_private_key(a.marshal())
        assert a.equals(b)
        assert len({a, b}) == 1
        assert a.public == Ed25519PublicKey(RFC_PUBLIC)
        assert a != a.public

    def test_repr_hides_secret(self):
        """repr never includes the seed."""
        key = Ed25519PrivateKey(RFC_SEED)
        assert RFC_SEED.hex() not in repr(key)


class TestUnsupported:
    """Tests for capabilities Ed25519 lacks."""

    def test_encrypt(self):
        """Public keys cannot encrypt."""
        with pytest.raises(UnsupportedOperation):
            generate_key_pair().public.encrypt(b"data")

    def test_decrypt(self):
        """Private keys cannot decrypt."""
        with pytest.raises(UnsupportedOperation):
            generate_key_pair().decrypt(b"data")
