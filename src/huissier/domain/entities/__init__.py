"""
Domain entities.
"""

from huissier.domain.entities.identity import Identity, derive_login_email
from huissier.domain.entities.issued_nonce import IssuedNonce
from huissier.domain.entities.session import AuthSession

__all__ = [
    "Identity",
    "derive_login_email",
    "IssuedNonce",
    "AuthSession",
]
