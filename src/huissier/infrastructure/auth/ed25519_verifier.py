"""
Solana wallet signature verifier.

Implements wallet signature verification using Ed25519.
"""

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from huissier.domain.exceptions import DecodeError
from huissier.domain.services.i_signature_verifier import ISignatureVerifier
from huissier.domain.value_objects.wallet_address import WalletAddress
from huissier.infrastructure.auth.encoding import decode_base64

SIGNATURE_LENGTH = 64


class Ed25519SignatureVerifier(ISignatureVerifier):
    """
    Solana wallet authentication using Ed25519 signatures.

    Pure and stateless: every input is decoded and length-checked before
    the cryptographic check runs.
    """

    def verify(
        self,
        wallet_address: str,
        signature: str,
        signed_message: str,
    ) -> bool:
        """
        Verify Solana wallet signature.

        Args:
            wallet_address: Solana wallet address (base58)
            signature: Signature (base64)
            signed_message: Exact signed bytes (base64)

        Returns:
            True if signature is valid, False otherwise

        Raises:
            DecodeError: If any input fails to decode or has wrong length
        """
        public_key = WalletAddress(wallet_address).public_key

        signature_bytes = decode_base64(signature, "signature")
        if len(signature_bytes) != SIGNATURE_LENGTH:
            raise DecodeError(
                "signature",
                f"expected {SIGNATURE_LENGTH} bytes, got {len(signature_bytes)}",
            )

        message_bytes = self.decode_message(signed_message)

        try:
            VerifyKey(public_key).verify(message_bytes, signature_bytes)
        except BadSignatureError:
            return False
        return True

    def decode_message(self, signed_message: str) -> bytes:
        """Decode base64 signed message."""
        return decode_base64(signed_message, "signedMessage")
