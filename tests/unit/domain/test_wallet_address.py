"""
Unit tests for WalletAddress value object.

Tests wallet address decoding, validation and formatting.

Usage:
    pytest tests/unit/domain/test_wallet_address.py
"""

import pytest
from nacl.signing import SigningKey

from huissier.domain.exceptions import DecodeError
from huissier.domain.value_objects.wallet_address import WalletAddress

# Base58 of 32 zero bytes
ZERO_KEY_ADDRESS = "1" * 32


class TestWalletAddress:
    """Unit tests for WalletAddress value object."""

    # ================================================================
    # Creation & Validation tests
    # ================================================================

    def test_create_valid_wallet_address(self):
        """Test creating WalletAddress from a real public key."""
        key = SigningKey(bytes(range(32))).verify_key
        wallet = WalletAddress.from_public_key(bytes(key))

        assert wallet.public_key == bytes(key)
        assert WalletAddress(wallet.address) == wallet

    def test_zero_key_address(self):
        """Test all-zero public key encodes as 32 ones."""
        wallet = WalletAddress(ZERO_KEY_ADDRESS)

        assert wallet.public_key == bytes(32)

    def test_strips_surrounding_whitespace(self):
        """Test surrounding whitespace is removed before decoding."""
        wallet = WalletAddress(f"  {ZERO_KEY_ADDRESS}\n")

        assert wallet.address == ZERO_KEY_ADDRESS

    def test_reject_empty_address(self):
        """Test empty address is a decode error."""
        with pytest.raises(DecodeError) as exc_info:
            WalletAddress("   ")

        assert exc_info.value.field == "walletAddress"

    def test_reject_invalid_base58(self):
        """Test characters outside the base58 alphabet are rejected."""
        with pytest.raises(DecodeError):
            WalletAddress("0OIl" * 11)

    def test_reject_wrong_length(self):
        """Test address that decodes to fewer than 32 bytes is rejected."""
        with pytest.raises(DecodeError) as exc_info:
            WalletAddress("A" * 32)

        assert "expected 32 bytes" in exc_info.value.reason

    def test_decode_error_hides_reason_from_message(self):
        """Test user-facing message is the generic failure text."""
        with pytest.raises(DecodeError) as exc_info:
            WalletAddress("not-an-address")

        assert exc_info.value.message == "Authentication failed"
        assert exc_info.value.code == "DECODE_ERROR"

    # ================================================================
    # Formatting tests
    # ================================================================

    def test_truncated(self):
        """Test truncated display form."""
        wallet = WalletAddress(ZERO_KEY_ADDRESS)

        assert wallet.truncated() == "111111...1111"
        assert str(wallet) == ZERO_KEY_ADDRESS
