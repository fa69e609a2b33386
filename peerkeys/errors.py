"""
Error types for peerkeys.

Every error carries a stable ``code`` string so callers (and peers written
in other languages) can match on it without parsing messages.

Validation errors also derive from ValueError.
"""


class CryptoError(Exception):
    """Base class for all peerkeys errors."""

    code = "ERR_CRYPTO"

    def __init__(self, message: str = "", code: str = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class InvalidParameter(CryptoError, ValueError):
    """A caller-supplied argument is out of range (seed length, bits, ...)."""
    code = "ERR_INVALID_PARAMETER"


class UnsupportedExportFormat(InvalidParameter):
    code = "ERR_INVALID_EXPORT_FORMAT"


class UnsupportedKeyType(CryptoError, ValueError):
    code = "ERR_UNSUPPORTED_KEY_TYPE"


class UnsupportedDerivation(CryptoError, ValueError):
    code = "ERR_UNSUPPORTED_KEY_DERIVATION_TYPE"


class UnsupportedOperation(CryptoError):
    """The key algorithm does not offer this capability (e.g. Ed25519 encrypt)."""
    code = "ERR_UNSUPPORTED_OPERATION"


class UnsupportedCipher(CryptoError, ValueError):
    code = "ERR_INVALID_CIPHER_TYPE"


class UnsupportedHash(CryptoError, ValueError):
    code = "ERR_UNSUPPORTED_HASH_TYPE"


class UnsupportedCurve(CryptoError, ValueError):
    code = "ERR_INVALID_CURVE"


class MalformedKey(CryptoError, ValueError):
    """Structurally invalid payload: wrong length, bad DER, bad curve point."""
    code = "ERR_INVALID_KEY"


class EnvelopeFormatError(MalformedKey):
    """Text is not a password-protected key envelope at all."""
    code = "ERR_INVALID_ENVELOPE"


class DecryptionFailed(CryptoError):
    """
    Authentication failed while decrypting.

    Raised for a wrong password and for tampered data alike; the two are
    indistinguishable.
    """
    code = "ERR_DECRYPTION_FAILED"


class BackendError(CryptoError):
    """A primitive backend failed; the original exception is chained."""
    code = "ERR_BACKEND"
