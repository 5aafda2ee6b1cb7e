"""
Unit tests for domain entities.

Tests Identity, AuthSession and IssuedNonce.
"""

from datetime import datetime, timedelta, timezone

import pytest

from huissier.domain.entities.identity import Identity, derive_login_email
from huissier.domain.entities.issued_nonce import IssuedNonce
from huissier.domain.entities.session import AuthSession

WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


class TestIdentity:
    """Unit tests for Identity entity."""

    def test_login_email_is_derived(self):
        """Test login email is filled from the wallet address."""
        identity = Identity(id="user-123", wallet_address=WALLET)

        assert identity.login_email == derive_login_email(WALLET)
        assert identity.login_email.endswith("@wallet.huissier.local")

    def test_login_email_is_deterministic(self):
        """Test same wallet always maps to the same login."""
        assert derive_login_email(WALLET) == derive_login_email(WALLET)

    def test_shared_prefix_wallets_do_not_collide(self):
        """Test wallets sharing a long prefix get distinct logins."""
        other = WALLET[:-1] + ("T" if WALLET[-1] != "T" else "S")

        assert derive_login_email(WALLET) != derive_login_email(other)

    def test_reject_missing_id(self):
        """Test identity id is required."""
        with pytest.raises(ValueError):
            Identity(id="", wallet_address=WALLET)


class TestAuthSession:
    """Unit tests for AuthSession entity."""

    def test_to_response(self):
        """Test wire payload carries all three fields."""
        session = AuthSession(
            identity_id="user-123", token="tok", wallet_address=WALLET
        )

        assert session.to_response() == {
            "userId": "user-123",
            "token": "tok",
            "walletAddress": WALLET,
        }

    def test_reject_partial_session(self):
        """Test a session without token cannot exist."""
        with pytest.raises(ValueError):
            AuthSession(identity_id="user-123", token="", wallet_address=WALLET)

    def test_from_dict_with_expiry(self):
        """Test cache form restores expiry."""
        expires_at = datetime(2030, 1, 1, tzinfo=timezone.utc)
        session = AuthSession(
            identity_id="user-123",
            token="tok",
            wallet_address=WALLET,
            expires_at=expires_at,
        )

        assert AuthSession.from_dict(session.to_dict()) == session

    def test_repr_truncates_token(self):
        """Test token never appears in full in repr."""
        session = AuthSession(
            identity_id="user-123",
            token="secret-token-value",
            wallet_address=WALLET,
        )

        assert "secret-token-value" not in repr(session)


class TestIssuedNonce:
    """Unit tests for IssuedNonce entity."""

    def test_issue_sets_expiry(self):
        """Test expiry is issued_at plus TTL."""
        issued = IssuedNonce.issue("abcDEF123456", ttl_seconds=300)

        assert issued.expires_at - issued.issued_at == timedelta(seconds=300)
        assert issued.consumed_at is None
        assert not issued.is_expired()

    def test_is_expired(self):
        """Test nonce is expired at and after its expiry."""
        issued = IssuedNonce.issue("abcDEF123456", ttl_seconds=60)

        assert issued.is_expired(issued.expires_at)
        assert issued.is_expired(issued.expires_at + timedelta(seconds=1))

    def test_expires_at_ms(self):
        """Test epoch millisecond expiry."""
        expires_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        issued = IssuedNonce(nonce="abcDEF123456", expires_at=expires_at)

        assert issued.expires_at_ms == 1704067200000
