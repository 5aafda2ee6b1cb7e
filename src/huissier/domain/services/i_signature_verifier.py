"""
Signature verifier service interface.
"""

from abc import ABC, abstractmethod


class ISignatureVerifier(ABC):
    """
    Abstract service interface for wallet signature verification.

    Implements signature verification for Web3 authentication:
    - User signs message with wallet private key
    - Backend verifies signature matches wallet address
    """

    @abstractmethod
    def verify(
        self,
        wallet_address: str,
        signature: str,
        signed_message: str,
    ) -> bool:
        """
        Verify wallet signature.

        Args:
            wallet_address: Wallet address claiming ownership (base58)
            signature: Signature (base64, URL-safe and unpadded accepted)
            signed_message: Exact signed bytes (base64)

        Returns:
            True if signature is valid, False otherwise

        Raises:
            DecodeError: If any input is malformed or has wrong length
        """

    @abstractmethod
    def decode_message(self, signed_message: str) -> bytes:
        """
        Decode signed message with the verifier's tolerant rules.

        Raises:
            DecodeError: If message is not valid base64
        """
