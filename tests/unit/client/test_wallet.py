"""
Unit tests for wallet providers.
"""

import json

import pytest
from nacl.signing import SigningKey

from huissier.client import (
    KeypairWallet,
    WalletCapability,
    detect_capability,
)
from huissier.domain.exceptions import WalletCancelledError
from huissier.domain.value_objects.sign_in_challenge import SignInChallenge

TEST_SEED = bytes(range(32))


class UnavailableWallet(KeypairWallet):
    def is_available(self) -> bool:
        return False


class TestDetectCapability:
    """Tests for capability probing."""

    def test_no_wallet(self):
        """Test None is unavailable."""
        assert detect_capability(None) == WalletCapability.UNAVAILABLE

    def test_wallet_not_ready(self):
        """Test wallet reporting unavailable is unavailable."""
        wallet = UnavailableWallet.from_seed(TEST_SEED)

        assert detect_capability(wallet) == WalletCapability.UNAVAILABLE

    def test_sign_in_wallet(self):
        """Test sign-in capable wallet is detected."""
        wallet = KeypairWallet.from_seed(TEST_SEED)

        assert detect_capability(wallet) == WalletCapability.SIGN_IN

    def test_sign_message_wallet(self):
        """Test message-only wallet falls back to signing."""
        wallet = KeypairWallet.from_seed(TEST_SEED, supports_sign_in=False)

        assert detect_capability(wallet) == WalletCapability.SIGN_MESSAGE


class TestKeypairWallet:
    """Tests for the local keypair wallet."""

    async def test_connect(self, wallet_address):
        """Test connected account is the key's address."""
        account = await KeypairWallet.from_seed(TEST_SEED).connect()

        assert account.address == wallet_address

    async def test_sign_message(self, signing_key):
        """Test signature verifies under the wallet key."""
        signed = await KeypairWallet.from_seed(TEST_SEED).sign_message(b"hello")

        signing_key.verify_key.verify(b"hello", signed.signature)

    async def test_sign_in_signs_rendered_message(self, wallet_address):
        """Test sign-in output carries exactly the rendered message."""
        challenge = SignInChallenge(
            domain="localhost:3000",
            statement="Sign in",
            nonce="abcDEF123456",
            issued_at="2024-01-02T03:04:05.678Z",
        )

        output = await KeypairWallet.from_seed(TEST_SEED).sign_in(challenge)

        assert output.address == wallet_address
        assert output.signed_message == challenge.to_message(wallet_address).encode()
        assert len(output.signature) == 64

    async def test_rejected_request(self):
        """Test declined request raises WalletCancelledError."""
        wallet = KeypairWallet.from_seed(TEST_SEED, approve=False)

        with pytest.raises(WalletCancelledError):
            await wallet.sign_message(b"hello")

    def test_from_keypair_file(self, tmp_path, wallet_address):
        """Test Solana CLI keypair file is loaded from its seed half."""
        key = SigningKey(TEST_SEED)
        keypair = list(TEST_SEED) + list(bytes(key.verify_key))
        path = tmp_path / "id.json"
        path.write_text(json.dumps(keypair))

        assert KeypairWallet.from_keypair_file(path).address == wallet_address
