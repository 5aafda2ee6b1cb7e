"""
Identity backend exceptions.
"""

from huissier.domain.exceptions.base import StoreFailure


class SessionMintError(StoreFailure):
    """Raised when the backend cannot issue a session token."""

    def __init__(self, details: str | None = None):
        super().__init__(
            "Session generation failed",
            code="SESSION_MINT_FAILURE",
            details=details,
        )


class DuplicateAccountError(StoreFailure):
    """Raised when the backend already holds an account for a login."""

    def __init__(self, login_email: str):
        self.login_email = login_email
        super().__init__(
            "Account already exists",
            code="DUPLICATE_ACCOUNT",
            details=login_email,
        )
