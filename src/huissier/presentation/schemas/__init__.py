"""
API schemas.
"""

from huissier.presentation.schemas.auth_schemas import (
    AuthSessionResponse,
    ChallengeResponse,
    ErrorResponse,
    NonceResponse,
    VerifySignatureRequest,
)

__all__ = [
    "AuthSessionResponse",
    "ChallengeResponse",
    "ErrorResponse",
    "NonceResponse",
    "VerifySignatureRequest",
]
