"""
WalletAddress value object - Immutable Solana wallet address.
"""

from dataclasses import dataclass, field

import base58

from huissier.domain.exceptions import DecodeError

PUBLIC_KEY_LENGTH = 32


@dataclass(frozen=True)
class WalletAddress:
    """
    Value object representing a validated Solana wallet address.

    Business rules:
    - Must be valid base58 encoded string
    - Must decode to exactly 32 bytes (Ed25519 public key)
    - Surrounding whitespace is stripped
    - Immutable once created
    """

    address: str
    public_key: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate wallet address on creation."""
        if not isinstance(self.address, str) or not self.address.strip():
            raise DecodeError("walletAddress", "wallet address cannot be empty")

        normalized = self.address.strip()
        object.__setattr__(self, "address", normalized)

        try:
            decoded = base58.b58decode(normalized)
        except ValueError as e:
            raise DecodeError("walletAddress", f"invalid base58: {e}") from e

        if len(decoded) != PUBLIC_KEY_LENGTH:
            raise DecodeError(
                "walletAddress",
                f"expected {PUBLIC_KEY_LENGTH} bytes, got {len(decoded)}",
            )

        object.__setattr__(self, "public_key", decoded)

    @classmethod
    def from_public_key(cls, public_key: bytes) -> "WalletAddress":
        """Build address from raw 32-byte public key."""
        return cls(base58.b58encode(bytes(public_key)).decode("ascii"))

    def truncated(self) -> str:
        """Return truncated address for display (e.g., 'ABC...XYZ')."""
        return f"{self.address[:6]}...{self.address[-4:]}"

    def __str__(self) -> str:
        """String representation returns full address."""
        return self.address
