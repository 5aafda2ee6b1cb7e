"""
IssuedNonce entity - single-use sign-in nonce with expiry.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass
class IssuedNonce:
    """Nonce handed to a client, valid until expires_at and usable once."""

    nonce: str
    expires_at: datetime
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    consumed_at: Optional[datetime] = None

    @classmethod
    def issue(cls, nonce: str, ttl_seconds: int) -> "IssuedNonce":
        now = datetime.now(timezone.utc)
        return cls(
            nonce=nonce,
            issued_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )

    @property
    def expires_at_ms(self) -> int:
        """Expiry as epoch milliseconds."""
        return int(self.expires_at.timestamp() * 1000)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at
