"""
RSA JWK Conversions

Translate between the DER forms used on the wire (PKCS#1 private,
PKIX public) and JSON Web Keys (RFC 7517/7518). Integers are unsigned
big-endian, base64url encoded without padding.
"""

from typing import Dict, Mapping

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..errors import MalformedKey
from ..util import base64url_to_int, int_to_base64url


JWK_KTY = "RSA"
JWK_ALG = "RS256"

PUBLIC_MEMBERS = ("n", "e")
PRIVATE_MEMBERS = ("n", "e", "d", "p", "q")

_LOAD_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def _member(jwk: Mapping[str, str], name: str) -> int:
    value = jwk.get(name)
    if not value:
        raise MalformedKey(f"JWK is missing the '{name}' member")
    try:
        return base64url_to_int(value)
    except (ValueError, TypeError) as exc:
        raise MalformedKey(f"JWK member '{name}' is not base64url: {exc}") from exc


def _check_kty(jwk: Mapping[str, str]) -> None:
    if not isinstance(jwk, Mapping):
        raise MalformedKey("JWK must be a mapping")
    kty = jwk.get("kty", JWK_KTY)
    if kty != JWK_KTY:
        raise MalformedKey(f"JWK key type '{kty}' is not RSA")


def _public_members(numbers: rsa.RSAPublicNumbers) -> Dict[str, str]:
    return {
        "kty": JWK_KTY,
        "n": int_to_base64url(numbers.n),
        "e": int_to_base64url(numbers.e),
    }


def pkcs1_to_jwk(der: bytes) -> Dict[str, str]:
    """PKCS#1 DER private key -> private JWK."""
    try:
        key = serialization.load_der_private_key(bytes(der), password=None)
    except _LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid RSA private key DER: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise MalformedKey("DER private key is not an RSA key")

    numbers = key.private_numbers()
    jwk = _public_members(numbers.public_numbers)
    jwk.update({
        "d": int_to_base64url(numbers.d),
        "p": int_to_base64url(numbers.p),
        "q": int_to_base64url(numbers.q),
        "dp": int_to_base64url(numbers.dmp1),
        "dq": int_to_base64url(numbers.dmq1),
        "qi": int_to_base64url(numbers.iqmp),
        "alg": JWK_ALG,
    })
    return jwk


def pkix_to_jwk(der: bytes) -> Dict[str, str]:
    """PKIX (SubjectPublicKeyInfo) DER public key -> public JWK."""
    try:
        key = serialization.load_der_public_key(bytes(der))
    except _LOAD_ERRORS as exc:
        raise MalformedKey(f"Invalid RSA public key DER: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise MalformedKey("DER public key is not an RSA key")

    jwk = _public_members(key.public_numbers())
    jwk["alg"] = JWK_ALG
    return jwk


def _private_key_from_jwk(jwk: Mapping[str, str]) -> rsa.RSAPrivateKey:
    _check_kty(jwk)
    n, e, d, p, q = (_member(jwk, name) for name in PRIVATE_MEMBERS)
    try:
        # CRT members are optional; recompute when absent
        dmp1 = _member(jwk, "dp") if jwk.get("dp") else rsa.rsa_crt_dmp1(d, p)
        dmq1 = _member(jwk, "dq") if jwk.get("dq") else rsa.rsa_crt_dmq1(d, q)
        iqmp = _member(jwk, "qi") if jwk.get("qi") else rsa.rsa_crt_iqmp(p, q)
        numbers = rsa.RSAPrivateNumbers(
            p=p, q=q, d=d, dmp1=dmp1, dmq1=dmq1, iqmp=iqmp,
            public_numbers=rsa.RSAPublicNumbers(e=e, n=n),
        )
        return numbers.private_key()
    except _LOAD_ERRORS as exc:
        raise MalformedKey(f"JWK does not describe a valid RSA key: {exc}") from exc


def _public_key_from_jwk(jwk: Mapping[str, str]) -> rsa.RSAPublicKey:
    _check_kty(jwk)
    n, e = (_member(jwk, name) for name in PUBLIC_MEMBERS)
    try:
        return rsa.RSAPublicNumbers(e=e, n=n).public_key()
    except _LOAD_ERRORS as exc:
        raise MalformedKey(f"JWK does not describe a valid RSA public key: {exc}") from exc


def jwk_to_pkcs1(jwk: Mapping[str, str]) -> bytes:
    """Private JWK -> PKCS#1 DER."""
    return _private_key_from_jwk(jwk).private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


def jwk_to_pkix(jwk: Mapping[str, str]) -> bytes:
    """Public JWK (or the public half of a private one) -> PKIX DER."""
    return _public_key_from_jwk(jwk).public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def jwk_to_pem(jwk: Mapping[str, str]) -> str:
    """
    JWK -> unencrypted PEM.

    Private JWKs (with a 'd' member) produce a PKCS#1 "RSA PRIVATE KEY"
    block, public ones a "PUBLIC KEY" block.
    """
    if isinstance(jwk, Mapping) and jwk.get("d"):
        pem = _private_key_from_jwk(jwk).private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )
    else:
        pem = _public_key_from_jwk(jwk).public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    return pem.decode("ascii")
