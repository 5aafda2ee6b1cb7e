"""
Repository implementations.
"""

from huissier.infrastructure.persistence.repositories.identity_repository import (
    IdentityRepository,
)
from huissier.infrastructure.persistence.repositories.nonce_repository import (
    NonceRepository,
)

__all__ = ["IdentityRepository", "NonceRepository"]
