"""
Base domain exceptions.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminator for how a failure must be handled."""

    REQUEST = "request"
    DECODE = "decode"
    AUTH = "auth"
    STORE = "store"
    CONFIGURATION = "configuration"
    CANCELLED = "cancelled"
    UNAVAILABLE = "unavailable"


# Only transient store/backend failures may be retried.
RETRYABLE_KINDS = frozenset({ErrorKind.STORE})


class HuissierException(Exception):
    """Base exception for all Huissier domain errors."""

    kind: ErrorKind = ErrorKind.REQUEST

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        """True if the operation may be attempted again."""
        return self.kind in RETRYABLE_KINDS


class RequestError(HuissierException):
    """Raised when a request is malformed or incomplete."""

    kind = ErrorKind.REQUEST

    def __init__(self, reason: str, details: dict | None = None):
        self.details = details
        super().__init__(reason, code="REQUEST_ERROR")


class StoreFailure(HuissierException):
    """Raised when the identity store or backend fails transiently."""

    kind = ErrorKind.STORE

    def __init__(
        self,
        message: str = "Identity store unavailable",
        code: str = "STORE_FAILURE",
        details: str | None = None,
    ):
        self.details = details
        super().__init__(message, code=code)


class ConfigurationFailure(HuissierException):
    """Raised when backend credentials or configuration are missing."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(
            f"Missing configuration: {setting}", code="CONFIGURATION_ERROR"
        )
