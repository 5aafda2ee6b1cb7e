"""
SignatureProof value object - wallet proof submitted for verification.
"""

import base64
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class SignatureProof:
    """
    Proof that a wallet signed a challenge.

    Holds raw bytes; the wire format (base64 signature and message) is
    produced by to_request(). Consumed exactly once.
    """

    wallet_address: str
    signature: bytes
    signed_message: bytes
    nonce: str

    def to_request(self) -> Dict[str, str]:
        """Build verifySignature request body."""
        return {
            "action": "verifySignature",
            "walletAddress": self.wallet_address,
            "signature": base64.b64encode(self.signature).decode("ascii"),
            "nonce": self.nonce,
            "signedMessage": base64.b64encode(self.signed_message).decode("ascii"),
        }

    def __repr__(self) -> str:
        return (
            f"SignatureProof(wallet_address={self.wallet_address[:6]}..., "
            f"signature={self.signature[:4].hex()}..., nonce={self.nonce[:4]}...)"
        )
