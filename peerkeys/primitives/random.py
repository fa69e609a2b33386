"""CSPRNG helper."""

from typing import Optional

from ..errors import InvalidParameter
from .backend import CryptoBackend, get_backend


def random_bytes(length: int, backend: Optional[CryptoBackend] = None) -> bytes:
    """
    Generate ``length`` cryptographically secure random bytes.

    Raises:
        InvalidParameter: If length is not a positive integer
    """
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise InvalidParameter(
            "random bytes length must be a Number bigger than 0",
            code="ERR_INVALID_LENGTH",
        )
    return (backend or get_backend()).random_bytes(length)
