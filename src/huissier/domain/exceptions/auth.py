"""
Authentication domain exceptions.

Decode and cryptographic failures share one user-facing message so callers
cannot tell which validation stage rejected the proof. The failing field
and reason are kept on the exception for operator logs only.
"""

from huissier.domain.exceptions.base import ErrorKind, HuissierException

AUTH_FAILED_MESSAGE = "Authentication failed"


class DecodeError(HuissierException):
    """Raised when an address, signature or message cannot be decoded."""

    kind = ErrorKind.DECODE

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(AUTH_FAILED_MESSAGE, code="DECODE_ERROR")


class AuthFailure(HuissierException):
    """Raised when a signature is cryptographically invalid."""

    kind = ErrorKind.AUTH

    def __init__(self, reason: str = "invalid signature"):
        self.reason = reason
        super().__init__(AUTH_FAILED_MESSAGE, code="AUTHENTICATION_ERROR")


class NonceRejectedError(AuthFailure):
    """Raised when a nonce is unknown, expired or already used."""

    def __init__(self, reason: str = "nonce rejected"):
        super().__init__(reason)


class WalletCancelledError(HuissierException):
    """Raised when the user cancels signing or the wallet times out."""

    kind = ErrorKind.CANCELLED

    def __init__(self, reason: str = "Signing cancelled by user"):
        super().__init__(reason, code="WALLET_CANCELLED")


class WalletUnavailableError(HuissierException):
    """Raised when no usable wallet provider is present."""

    kind = ErrorKind.UNAVAILABLE

    def __init__(self, reason: str = "Wallet provider not available"):
        super().__init__(reason, code="WALLET_UNAVAILABLE")
