"""
Domain value objects.
"""

from huissier.domain.value_objects.sign_in_challenge import (
    ParsedSignInMessage,
    SignInChallenge,
    format_timestamp,
    parse_sign_in_message,
)
from huissier.domain.value_objects.signature_proof import SignatureProof
from huissier.domain.value_objects.wallet_address import WalletAddress

__all__ = [
    "SignInChallenge",
    "ParsedSignInMessage",
    "parse_sign_in_message",
    "format_timestamp",
    "SignatureProof",
    "WalletAddress",
]
