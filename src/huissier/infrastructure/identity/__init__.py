"""
Identity backends.
"""

from huissier.infrastructure.identity.local_identity_backend import (
    LocalIdentityBackend,
)
from huissier.infrastructure.identity.supabase_identity_backend import (
    SupabaseIdentityBackend,
)

__all__ = ["LocalIdentityBackend", "SupabaseIdentityBackend"]
