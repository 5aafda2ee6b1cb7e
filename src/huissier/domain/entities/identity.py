"""
Identity entity - Durable account keyed by wallet address.
"""
import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone

LOGIN_EMAIL_DOMAIN = "wallet.huissier.local"


def derive_login_email(wallet_address: str) -> str:
    """
    Derive internal login credential for identity backend account model.

    Not a user secret. Full address is hashed so wallets sharing a prefix
    never collide.
    """
    digest = hashlib.sha256(wallet_address.encode("utf-8")).hexdigest()
    return f"{digest[:32]}@{LOGIN_EMAIL_DOMAIN}"


@dataclass
class Identity:
    """
    Identity entity - minimal Web3 identity.

    Exactly one Identity per wallet address. Created on first successful
    sign-in and never changes afterwards.
    """

    id: str
    wallet_address: str
    login_email: str = field(default="")
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        """Validate identity data after initialization."""
        if not self.id:
            raise ValueError("Identity id is required")
        if not self.wallet_address:
            raise ValueError("Wallet address is required")
        if not self.login_email:
            self.login_email = derive_login_email(self.wallet_address)

    def to_dict(self) -> dict:
        """Convert entity to dictionary representation."""
        return {
            "id": self.id,
            "wallet_address": self.wallet_address,
            "created_at": self.created_at.isoformat(),
        }
