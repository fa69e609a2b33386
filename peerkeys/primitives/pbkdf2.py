"""PBKDF2 key derivation with multihash-style hash names."""

from typing import Optional, Union

from ..errors import InvalidParameter, UnsupportedHash
from .backend import CryptoBackend, get_backend


# multihash name -> backend hash name
HASH_NAMES = {
    "sha1": "sha1",
    "sha2-256": "sha256",
    "sha2-512": "sha512",
}


def pbkdf2(password: Union[str, bytes], salt: Union[str, bytes], iterations: int,
           key_size: int, hash: str,
           backend: Optional[CryptoBackend] = None) -> bytes:
    """
    Compute the Password-Based Key Derivation Function 2.

    Args:
        password: The password (str is UTF-8 encoded)
        salt: The salt (str is UTF-8 encoded)
        iterations: Number of iterations to use
        key_size: Size of the output key in bytes
        hash: 'sha1', 'sha2-256' or 'sha2-512'

    Returns:
        Derived key bytes

    Raises:
        UnsupportedHash: For any other hash name
    """
    hasher = HASH_NAMES.get(hash)
    if hasher is None:
        types = " / ".join(HASH_NAMES)
        raise UnsupportedHash(f"Hash '{hash}' is unknown or not supported. Must be {types}")
    if iterations < 1 or key_size < 1:
        raise InvalidParameter("Iterations and key size must be positive")

    if isinstance(password, str):
        password = password.encode("utf-8")
    if isinstance(salt, str):
        salt = salt.encode("utf-8")

    return (backend or get_backend()).pbkdf2(password, salt, iterations, key_size, hasher)
