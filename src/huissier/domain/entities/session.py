"""
Session entity - opaque bearer credential issued after sign-in.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AuthSession:
    """
    Session bound to a resolved identity.

    Token structure and TTL belong to the identity backend and are not
    interpreted here.
    """

    identity_id: str
    token: str
    wallet_address: str
    expires_at: Optional[datetime] = None

    def __post_init__(self):
        """Reject partially populated sessions."""
        if not (self.identity_id and self.token and self.wallet_address):
            raise ValueError("Session requires identity_id, token and wallet_address")

    def to_response(self) -> Dict[str, str]:
        """Wire payload returned to the client."""
        return {
            "userId": self.identity_id,
            "token": self.token,
            "walletAddress": self.wallet_address,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form for session caches."""
        data: Dict[str, Any] = self.to_response()
        if self.expires_at:
            data["expiresAt"] = self.expires_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthSession":
        """Rebuild session from to_dict()/response payload."""
        expires_at = data.get("expiresAt")
        return cls(
            identity_id=data["userId"],
            token=data["token"],
            wallet_address=data["walletAddress"],
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
        )

    def __repr__(self) -> str:
        return (
            f"AuthSession(identity_id={self.identity_id!r}, "
            f"token={self.token[:8]}..., wallet_address={self.wallet_address!r})"
        )
