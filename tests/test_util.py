"""
Unit tests for shared encoding helpers.

Tests:
- Length checks
- base64url integers (JWK)
- Multihash and base58 identifiers
- Multibase base64 text
"""

import hashlib

import pytest
from peerkeys.errors import MalformedKey
from peerkeys.util import (
    ensure_length, bytes_to_base64url, base64url_to_bytes,
    int_to_base64url, base64url_to_int, encode_uvarint,
    multihash_sha256, multihash_identity,
    base58_encode, base58_decode,
    multibase_base64_encode, multibase_base64_decode,
)


class TestEnsureLength:
    """Tests for fixed-size checks."""

    def test_exact_length(self):
        """Exact length should pass through as bytes."""
        assert ensure_length(bytearray(4), 4) == b"\x00" * 4

    def test_wrong_length(self):
        """Any other length should be rejected, never padded."""
        with pytest.raises(MalformedKey):
            ensure_length(b"\x00" * 3, 4)
        with pytest.raises(MalformedKey):
            ensure_length(b"\x00" * 5, 4)

    def test_not_bytes(self):
        """Non-bytes input should be rejected."""
        with pytest.raises(MalformedKey):
            ensure_length("abcd", 4)


class TestBase64Url:
    """Tests for JWK style encoding."""

    def test_public_exponent(self):
        """65537 is the well-known 'AQAB'."""
        assert int_to_base64url(65537) == "AQAB"
        assert base64url_to_int("AQAB") == 65537

    def test_padding_to_length(self):
        """Length should left-pad with zero bytes."""
        assert base64url_to_bytes(int_to_base64url(1, length=4)) == b"\x00\x00\x00\x01"

    def test_no_padding_characters(self):
        """Output should never contain '='."""
        assert "=" not in bytes_to_base64url(b"\xff")

    def test_negative_rejected(self):
        """Negative integers cannot be encoded."""
        with pytest.raises(ValueError):
            int_to_base64url(-1)


class TestMultihash:
    """Tests for multihash helpers."""

    def test_sha256(self):
        """sha2-256 multihash is code, length, digest."""
        mh = multihash_sha256(b"abc")
        assert len(mh) == 34
        assert mh[:2] == b"\x12\x20"
        assert mh[2:] == hashlib.sha256(b"abc").digest()

    def test_identity(self):
        """Identity multihash inlines the data."""
        assert multihash_identity(b"abc") == b"\x00\x03abc"

    def test_uvarint(self):
        """Varints use 7 bits per byte."""
        assert encode_uvarint(0) == b"\x00"
        assert encode_uvarint(127) == b"\x7f"
        assert encode_uvarint(300) == b"\xac\x02"


class TestBase58:
    """Tests for base58 identifiers."""

    def test_known_value(self):
        """Bitcoin alphabet encoding."""
        assert base58_encode(b"hello world") == "StV1DL6CwTryKyV"
        assert base58_decode("StV1DL6CwTryKyV") == b"hello world"

    def test_invalid_character(self):
        """'0' is not in the alphabet."""
        with pytest.raises(MalformedKey):
            base58_decode("0OIl")


class TestMultibase:
    """Tests for multibase base64 ('m')."""

    def test_prefix_and_no_padding(self):
        """Encoding should prefix 'm' and drop padding."""
        assert multibase_base64_encode(b"f") == "mZg"

    def test_decode(self):
        """Decoding should accept str and bytes."""
        assert multibase_base64_decode("mZg") == b"f"
        assert multibase_base64_decode(b"mZm9v") == b"foo"

    def test_wrong_prefix(self):
        """Other multibase prefixes should be rejected."""
        with pytest.raises(MalformedKey):
            multibase_base64_decode("zZg")

    def test_invalid_body(self):
        """Non-base64 characters should be rejected."""
        with pytest.raises(MalformedKey):
            multibase_base64_decode("m!!!!")
