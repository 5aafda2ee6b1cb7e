"""
Repository interfaces.
"""

from huissier.domain.repositories.i_identity_repository import IIdentityRepository
from huissier.domain.repositories.i_nonce_repository import INonceRepository

__all__ = ["IIdentityRepository", "INonceRepository"]
