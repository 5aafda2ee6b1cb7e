"""Application use cases."""

from huissier.application.use_cases.authenticate_wallet import (
    AuthenticateWallet,
)
from huissier.application.use_cases.issue_nonce import IssueNonce, generate_nonce
from huissier.application.use_cases.issue_session import IssueSession, extract_token
from huissier.application.use_cases.issue_sign_in_challenge import (
    IssueSignInChallenge,
    origin_host,
)
from huissier.application.use_cases.purge_expired_nonces import PurgeExpiredNonces
from huissier.application.use_cases.resolve_identity import ResolveIdentity

__all__ = [
    "AuthenticateWallet",
    "IssueNonce",
    "IssueSession",
    "IssueSignInChallenge",
    "PurgeExpiredNonces",
    "ResolveIdentity",
    "extract_token",
    "generate_nonce",
    "origin_host",
]
