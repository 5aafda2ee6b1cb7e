"""
Domain service interfaces.
"""

from huissier.domain.services.i_identity_backend import IIdentityBackend
from huissier.domain.services.i_signature_verifier import ISignatureVerifier

__all__ = ["IIdentityBackend", "ISignatureVerifier"]
