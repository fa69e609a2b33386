"""
cryptography (pyca) Backend

Implements CryptoBackend on top of the ``cryptography`` package.

Parsed key objects are cached per raw value; keys are immutable so a
cached object is never stale.

secp256k1 signing reproduces libsecp256k1 / go-libp2p output exactly:
ECDSA over SHA-256(message) with RFC 6979 nonces, S normalised to the
lower half of the group order, DER encoded.
"""

import logging
import secrets
from functools import lru_cache
from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature, InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..errors import (
    BackendError,
    DecryptionFailed,
    InvalidParameter,
    MalformedKey,
    UnsupportedCurve,
    UnsupportedHash,
)
from .backend import CryptoBackend, StreamContext


logger = logging.getLogger(__name__)


# Constants
RSA_PUBLIC_EXPONENT = 65537
ED25519_KEY_SIZE = 32
SECP256K1_KEY_SIZE = 32
SECP256K1 = ec.SECP256K1()
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_ORDER = SECP256K1_ORDER // 2

HASHES = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha512": hashes.SHA512,
}

CURVES = {
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
}

_KEY_LOAD_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def _hash(hash_name: str) -> hashes.HashAlgorithm:
    algorithm = HASHES.get(hash_name.lower())
    if algorithm is None:
        names = " / ".join(HASHES)
        raise UnsupportedHash(f"Hash '{hash_name}' is unknown or not supported. Must be {names}")
    return algorithm()


def _curve(curve: str) -> ec.EllipticCurve:
    factory = CURVES.get(curve)
    if factory is None:
        names = " / ".join(CURVES)
        raise UnsupportedCurve(f"Unknown curve: {curve}. Must be {names}")
    return factory()


# ============================================================================
# Cached key loaders
# ============================================================================

@lru_cache(maxsize=256)
def _load_rsa_private(der: bytes) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_der_private_key(der, password=None)
    except _KEY_LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid RSA private key DER: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise MalformedKey("DER private key is not an RSA key")
    canonical = key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    if canonical != der:
        raise MalformedKey("RSA private key must be PKCS#1 DER")
    return key


@lru_cache(maxsize=256)
def _load_rsa_public(der: bytes) -> rsa.RSAPublicKey:
    try:
        key = serialization.load_der_public_key(der)
    except _KEY_LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid RSA public key DER: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise MalformedKey("DER public key is not an RSA key")
    canonical = key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    if canonical != der:
        raise MalformedKey("RSA public key must be PKIX DER")
    return key


@lru_cache(maxsize=256)
def _load_ed25519_private(seed: bytes) -> ed25519.Ed25519PrivateKey:
    try:
        return ed25519.Ed25519PrivateKey.from_private_bytes(seed)
    except _KEY_LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid Ed25519 private key: {exc}") from exc


@lru_cache(maxsize=256)
def _load_ed25519_public(public: bytes) -> ed25519.Ed25519PublicKey:
    try:
        return ed25519.Ed25519PublicKey.from_public_bytes(public)
    except _KEY_LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid Ed25519 public key: {exc}") from exc


@lru_cache(maxsize=256)
def _load_secp256k1_private(scalar: bytes) -> ec.EllipticCurvePrivateKey:
    if len(scalar) != SECP256K1_KEY_SIZE:
        raise MalformedKey(
            f"secp256k1 private key must be {SECP256K1_KEY_SIZE} bytes, got {len(scalar)}"
        )
    value = int.from_bytes(scalar, "big")
    if not 0 < value < SECP256K1_ORDER:
        raise MalformedKey("secp256k1 private key is outside the curve order")
    try:
        return ec.derive_private_key(value, SECP256K1)
    except _KEY_LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid secp256k1 private key: {exc}") from exc


@lru_cache(maxsize=256)
def _load_secp256k1_public(point: bytes) -> ec.EllipticCurvePublicKey:
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(SECP256K1, point)
    except _KEY_LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid secp256k1 public key: {exc}") from exc


# ============================================================================
# Backend
# ============================================================================

class _CipherStream(StreamContext):
    """Wraps a cryptography CipherContext."""

    def __init__(self, context):
        self._context = context

    def update(self, data: bytes) -> bytes:
        return self._context.update(data)


class CryptographyBackend(CryptoBackend):
    """
    Primitive backend using pyca/cryptography.

    Example:
        >>> backend = CryptographyBackend()
        >>> seed = backend.ed25519_generate()
        >>> sig = backend.ed25519_sign(seed, b"msg")
        >>> backend.ed25519_verify(backend.ed25519_public(seed), sig, b"msg")
        True
    """

    name = "cryptography"

    # ------------------------------------------------------------------ RSA

    def rsa_generate(self, bits: int) -> bytes:
        logger.debug("Generating %d-bit RSA key", bits)
        try:
            key = rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=bits)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise BackendError(f"RSA key generation failed ({bits} bits): {exc}") from exc
        return key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def rsa_public_from_private(self, private_der: bytes) -> bytes:
        return _load_rsa_private(private_der).public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def rsa_validate_private(self, private_der: bytes) -> None:
        _load_rsa_private(private_der)

    def rsa_validate_public(self, public_der: bytes) -> None:
        _load_rsa_public(public_der)

    def rsa_sign(self, private_der: bytes, message: bytes) -> bytes:
        return _load_rsa_private(private_der).sign(message, padding.PKCS1v15(), hashes.SHA256())

    def rsa_verify(self, public_der: bytes, signature: bytes, message: bytes) -> bool:
        try:
            _load_rsa_public(public_der).verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
            return True
        except InvalidSignature:
            return False

    def rsa_encrypt(self, public_der: bytes, data: bytes) -> bytes:
        try:
            return _load_rsa_public(public_der).encrypt(data, padding.PKCS1v15())
        except ValueError as exc:
            raise InvalidParameter(f"RSA encryption failed: {exc}") from exc

    def rsa_decrypt(self, private_der: bytes, data: bytes) -> bytes:
        try:
            return _load_rsa_private(private_der).decrypt(data, padding.PKCS1v15())
        except ValueError as exc:
            raise DecryptionFailed("RSA decryption failed") from exc

    def rsa_export_pem(self, private_der: bytes, password: str) -> str:
        key = _load_rsa_private(private_der)
        pem = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
        )
        return pem.decode("ascii")

    def rsa_import_pem(self, pem: str, password: str) -> bytes:
        data = pem.encode("ascii") if isinstance(pem, str) else bytes(pem)
        try:
            key = serialization.load_pem_private_key(data, password=password.encode("utf-8"))
        except TypeError as exc:
            # unencrypted PEM, or an encrypted one without a password
            raise MalformedKey(f"PEM is not a password protected key: {exc}") from exc
        except ValueError as exc:
            raise DecryptionFailed(
                "Cannot read the key, most likely the password is wrong or not a RSA key"
            ) from exc
        except UnsupportedAlgorithm as exc:
            raise MalformedKey(f"Unsupported PEM key: {exc}") from exc
        if not isinstance(key, rsa.RSAPrivateKey):
            raise MalformedKey("PEM key is not an RSA key")
        return key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )

    # -------------------------------------------------------------- Ed25519

    def ed25519_generate(self) -> bytes:
        return ed25519.Ed25519PrivateKey.generate().private_bytes_raw()

    def ed25519_public(self, seed: bytes) -> bytes:
        return _load_ed25519_private(seed).public_key().public_bytes_raw()

    def ed25519_validate_public(self, public: bytes) -> None:
        _load_ed25519_public(public)

    def ed25519_sign(self, seed: bytes, message: bytes) -> bytes:
        return _load_ed25519_private(seed).sign(message)

    def ed25519_verify(self, public: bytes, signature: bytes, message: bytes) -> bool:
        try:
            _load_ed25519_public(public).verify(signature, message)
            return True
        except InvalidSignature:
            return False

    # ------------------------------------------------------------ secp256k1

    def secp256k1_generate(self) -> bytes:
        key = ec.generate_private_key(SECP256K1)
        return key.private_numbers().private_value.to_bytes(SECP256K1_KEY_SIZE, "big")

    def secp256k1_public(self, private: bytes) -> bytes:
        return _load_secp256k1_private(private).public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )

    def secp256k1_compress(self, public: bytes) -> bytes:
        return _load_secp256k1_public(public).public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )

    def secp256k1_sign(self, private: bytes, message: bytes) -> bytes:
        key = _load_secp256k1_private(private)
        try:
            der = key.sign(message, ec.ECDSA(hashes.SHA256(), deterministic_signing=True))
        except UnsupportedAlgorithm as exc:
            raise BackendError(f"Deterministic ECDSA unavailable: {exc}") from exc
        r, s = decode_dss_signature(der)
        if s > SECP256K1_HALF_ORDER:
            s = SECP256K1_ORDER - s
        return encode_dss_signature(r, s)

    def secp256k1_verify(self, public: bytes, signature: bytes, message: bytes) -> bool:
        try:
            _load_secp256k1_public(public).verify(signature, message, ec.ECDSA(hashes.SHA256()))
            return True
        except (InvalidSignature, ValueError):
            return False

    # ------------------------------------------------------------ symmetric

    def hmac_digest(self, hash_name: str, key: bytes, data: bytes) -> bytes:
        mac = hmac.HMAC(key, _hash(hash_name))
        mac.update(data)
        return mac.finalize()

    def pbkdf2(self, password: bytes, salt: bytes, iterations: int,
               length: int, hash_name: str) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=_hash(hash_name),
            length=length,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password)

    def aes_gcm_encrypt(self, key: bytes, nonce: bytes, data: bytes,
                        associated_data: Optional[bytes] = None) -> bytes:
        try:
            aesgcm = AESGCM(key)
        except ValueError as exc:
            raise InvalidParameter(f"Invalid AES-GCM key: {exc}") from exc
        return aesgcm.encrypt(nonce, data, associated_data)

    def aes_gcm_decrypt(self, key: bytes, nonce: bytes, data: bytes,
                        associated_data: Optional[bytes] = None) -> bytes:
        try:
            aesgcm = AESGCM(key)
        except ValueError as exc:
            raise InvalidParameter(f"Invalid AES-GCM key: {exc}") from exc
        try:
            return aesgcm.decrypt(nonce, data, associated_data)
        except InvalidTag as exc:
            raise DecryptionFailed("AES-GCM authentication failed") from exc

    def aes_ctr(self, key: bytes, iv: bytes) -> Tuple[StreamContext, StreamContext]:
        cipher = Cipher(algorithms.AES(key), modes.CTR(iv))
        return _CipherStream(cipher.encryptor()), _CipherStream(cipher.decryptor())

    def ecdh_generate(self, curve: str) -> Tuple[bytes, bytes]:
        named_curve = _curve(curve)
        key = ec.generate_private_key(named_curve)
        size = (named_curve.key_size + 7) // 8
        private = key.private_numbers().private_value.to_bytes(size, "big")
        public = key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint,
        )
        return private, public

    def ecdh_derive(self, curve: str, private: bytes, peer_public: bytes) -> bytes:
        named_curve = _curve(curve)
        try:
            key = ec.derive_private_key(int.from_bytes(private, "big"), named_curve)
        except _KEY_LOAD_ERRORS as exc:
            raise MalformedKey(f"Invalid {curve} private key: {exc}") from exc
        try:
            peer = ec.EllipticCurvePublicKey.from_encoded_point(named_curve, peer_public)
        except _KEY_LOAD_ERRORS as exc:
            raise MalformedKey(f"Invalid {curve} public key: {exc}") from exc
        return key.exchange(ec.ECDH(), peer)

    def random_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)
