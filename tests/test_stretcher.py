"""
Unit tests for the key stretcher.

Tests:
- Output sizes per cipher
- Agreement with an independent HMAC computation
- Directional split
- Validation before any HMAC work
"""

import hashlib
import hmac as std_hmac

import pytest
from peerkeys.errors import UnsupportedCipher, UnsupportedHash
from peerkeys.keys.stretcher import (
    DirectionalKeys, StretchedKeys, key_stretcher, CIPHER_MAP, MAC_KEY_SIZE,
)
from peerkeys.primitives.pyca import CryptographyBackend


SECRET = bytes(range(32))


def reference_stretch(hash_name, secret, length):
    seed = b"key expansion"
    mac = lambda data: std_hmac.new(secret, data, getattr(hashlib, hash_name)).digest()
    a = mac(seed)
    out = b""
    while len(out) < length:
        out += mac(a + seed)
        a = mac(a)
    return out[:length]


class RecordingBackend(CryptographyBackend):
    """Counts HMAC calls."""

    def __init__(self):
        self.hmac_calls = 0

    def hmac_digest(self, hash_name, key, data):
        self.hmac_calls += 1
        return super().hmac_digest(hash_name, key, data)


class TestSizes:
    """Tests for output sizes."""

    @pytest.mark.parametrize("cipher_type", ["AES-128", "AES-256"])
    @pytest.mark.parametrize("hash_type", ["SHA1", "SHA256", "SHA512"])
    def test_sizes(self, cipher_type, hash_type):
        """Each half has iv, cipher key and a 20-byte MAC key."""
        keys = key_stretcher(cipher_type, hash_type, SECRET)
        spec = CIPHER_MAP[cipher_type]
        for half in (keys.k1, keys.k2):
            assert len(half.iv) == spec.iv_size
            assert len(half.cipher_key) == spec.key_size
            assert len(half.mac_key) == MAC_KEY_SIZE == 20


class TestDerivation:
    """Tests for the derivation itself."""

    @pytest.mark.parametrize("hash_type,hash_name", [("SHA1", "sha1"), ("SHA256", "sha256"), ("SHA512", "sha512")])
    def test_matches_reference(self, hash_type, hash_name):
        """Output matches an independent implementation."""
        keys = key_stretcher("AES-256", hash_type, SECRET)
        expected = reference_stretch(hash_name, SECRET, 2 * (16 + 32 + 20))
        k1 = keys.k1.iv + keys.k1.cipher_key + keys.k1.mac_key
        k2 = keys.k2.iv + keys.k2.cipher_key + keys.k2.mac_key
        assert k1 + k2 == expected

    def test_deterministic(self):
        """Same inputs give the same keys."""
        assert key_stretcher("AES-128", "SHA256", SECRET) == key_stretcher("AES-128", "SHA256", SECRET)

    def test_secret_matters(self):
        """Different secrets give different keys."""
        assert key_stretcher("AES-128", "SHA256", SECRET) != key_stretcher("AES-128", "SHA256", b"other")

    def test_halves_differ(self):
        """The two directions never share keys."""
        keys = key_stretcher("AES-256", "SHA256", SECRET)
        assert keys.k1 != keys.k2

    def test_hash_case_insensitive(self):
        """Hash names are normalised."""
        assert key_stretcher("AES-128", "sha256", SECRET) == key_stretcher("AES-128", "SHA256", SECRET)


class TestSplit:
    """Tests for direction assignment."""

    def test_opposite_flags_pair_up(self):
        """Each peer's local keys are the other's remote keys."""
        keys = key_stretcher("AES-256", "SHA256", SECRET)
        a_local, a_remote = keys.split(True)
        b_local, b_remote = keys.split(False)
        assert a_local == b_remote
        assert a_remote == b_local

    def test_types(self):
        """split returns DirectionalKeys."""
        local, remote = key_stretcher("AES-128", "SHA1", SECRET).split(True)
        assert isinstance(local, DirectionalKeys)
        assert isinstance(remote, DirectionalKeys)

    def test_repr_hides_keys(self):
        """Key bytes are not shown in repr."""
        keys = key_stretcher("AES-128", "SHA256", SECRET)
        assert isinstance(keys, StretchedKeys)
        assert keys.k1.cipher_key.hex() not in repr(keys)


class TestValidation:
    """Tests for rejected parameters."""

    @pytest.mark.parametrize("cipher_type", ["AES-192", "Blowfish", "", None])
    def test_unknown_cipher(self, cipher_type):
        """Only AES-128 and AES-256 are supported."""
        backend = RecordingBackend()
        with pytest.raises(UnsupportedCipher) as exc_info:
            key_stretcher(cipher_type, "SHA256", SECRET, backend)
        assert exc_info.value.code == "ERR_INVALID_CIPHER_TYPE"
        assert backend.hmac_calls == 0

    def test_missing_hash(self):
        """A hash type is required."""
        backend = RecordingBackend()
        with pytest.raises(UnsupportedHash) as exc_info:
            key_stretcher("AES-128", None, SECRET, backend)
        assert exc_info.value.code == "ERR_MISSING_HASH_TYPE"
        assert backend.hmac_calls == 0

    def test_unknown_hash(self):
        """Only SHA1, SHA256 and SHA512 are supported."""
        backend = RecordingBackend()
        with pytest.raises(UnsupportedHash) as exc_info:
            key_stretcher("AES-128", "MD5", SECRET, backend)
        assert exc_info.value.code == "ERR_UNSUPPORTED_HASH_TYPE"
        assert backend.hmac_calls == 0
