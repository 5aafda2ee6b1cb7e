"""
Persistence infrastructure.
"""

from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import (
    Base,
    IdentityModel,
    SignInNonceModel,
)

__all__ = ["Database", "Base", "IdentityModel", "SignInNonceModel"]
