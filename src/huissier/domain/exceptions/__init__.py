"""
Domain exceptions package.
"""

# Auth exceptions
from huissier.domain.exceptions.auth import (
    AUTH_FAILED_MESSAGE,
    AuthFailure,
    DecodeError,
    NonceRejectedError,
    WalletCancelledError,
    WalletUnavailableError,
)

# Base exceptions
from huissier.domain.exceptions.base import (
    ConfigurationFailure,
    ErrorKind,
    HuissierException,
    RequestError,
    StoreFailure,
)

# Identity backend exceptions
from huissier.domain.exceptions.identity import (
    DuplicateAccountError,
    SessionMintError,
)

__all__ = [
    # Base
    "ErrorKind",
    "HuissierException",
    "RequestError",
    "StoreFailure",
    "ConfigurationFailure",
    # Auth
    "AUTH_FAILED_MESSAGE",
    "DecodeError",
    "AuthFailure",
    "NonceRejectedError",
    "WalletCancelledError",
    "WalletUnavailableError",
    # Identity
    "SessionMintError",
    "DuplicateAccountError",
]
