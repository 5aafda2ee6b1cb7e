"""
Wallet signature authentication infrastructure.
"""

from huissier.infrastructure.auth.ed25519_verifier import Ed25519SignatureVerifier
from huissier.infrastructure.auth.encoding import decode_base64, normalize_base64

__all__ = ["Ed25519SignatureVerifier", "decode_base64", "normalize_base64"]
