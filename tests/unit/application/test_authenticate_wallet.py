"""
Unit tests for AuthenticateWallet use case.

Store and backend are mocked; signature verification is real.

Usage:
    pytest tests/unit/application/test_authenticate_wallet.py
"""

import base64
from unittest.mock import AsyncMock

import pytest

from huissier.application.use_cases import AuthenticateWallet, IssueSession
from huissier.domain.entities.identity import Identity
from huissier.domain.exceptions import (
    AuthFailure,
    DecodeError,
    NonceRejectedError,
    RequestError,
    StoreFailure,
)
from huissier.domain.value_objects.sign_in_challenge import SignInChallenge
from huissier.infrastructure.auth import Ed25519SignatureVerifier
from huissier.infrastructure.identity import LocalIdentityBackend

NONCE = "abcDEF123456"
REDIRECT = "http://localhost:3000"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestAuthenticateWallet:
    """Unit tests for the wallet authentication pipeline."""

    @pytest.fixture
    def nonce_repository(self):
        repository = AsyncMock()
        repository.consume.return_value = True
        return repository

    @pytest.fixture
    def resolve_identity(self, wallet_address):
        resolver = AsyncMock()
        resolver.execute.return_value = Identity(
            id="user-123", wallet_address=wallet_address
        )
        return resolver

    @pytest.fixture
    def use_case(self, nonce_repository, resolve_identity):
        return AuthenticateWallet(
            signature_verifier=Ed25519SignatureVerifier(),
            nonce_repository=nonce_repository,
            resolve_identity=resolve_identity,
            issue_session=IssueSession(LocalIdentityBackend("test-secret-key")),
            allowed_origins=[REDIRECT],
        )

    # ================================================================
    # Success tests
    # ================================================================

    async def test_legacy_nonce_signature(
        self, use_case, nonce_repository, resolve_identity, wallet_address, sign
    ):
        """Test signature over the raw nonce issues a session."""
        session = await use_case.execute(
            wallet_address, sign(NONCE.encode()), NONCE, REDIRECT
        )

        assert session.identity_id == "user-123"
        assert session.wallet_address == wallet_address
        assert session.token
        nonce_repository.consume.assert_awaited_once_with(NONCE)
        resolve_identity.execute.assert_awaited_once_with(wallet_address)

    async def test_sign_in_message_signature(
        self, use_case, nonce_repository, wallet_address, sign
    ):
        """Test signature over a structured sign-in message issues a session."""
        challenge = SignInChallenge(
            domain="localhost:3000",
            statement="Sign in",
            nonce=NONCE,
            issued_at="2024-01-02T03:04:05.678Z",
        )
        message = challenge.to_message(wallet_address).encode("utf-8")

        session = await use_case.execute(
            wallet_address,
            sign(message),
            NONCE,
            REDIRECT,
            signed_message=b64(message),
        )

        assert session.identity_id == "user-123"
        nonce_repository.consume.assert_awaited_once_with(NONCE)

    async def test_nonce_tracking_disabled(
        self, nonce_repository, resolve_identity, wallet_address, sign
    ):
        """Test nonce store is bypassed when issued nonces are not required."""
        use_case = AuthenticateWallet(
            Ed25519SignatureVerifier(),
            nonce_repository,
            resolve_identity,
            IssueSession(LocalIdentityBackend("test-secret-key")),
            require_issued_nonce=False,
        )

        await use_case.execute(wallet_address, sign(NONCE.encode()), NONCE, REDIRECT)

        nonce_repository.consume.assert_not_called()

    # ================================================================
    # Rejection tests
    # ================================================================

    async def test_malformed_signature_is_decode_error(
        self, use_case, nonce_repository, resolve_identity, wallet_address
    ):
        """Test undecodable signature fails before any store access."""
        with pytest.raises(DecodeError) as exc_info:
            await use_case.execute(wallet_address, "not-base64!!", NONCE, REDIRECT)

        assert exc_info.value.message == "Authentication failed"
        nonce_repository.consume.assert_not_called()
        resolve_identity.execute.assert_not_called()

    async def test_short_signature_touches_nothing(
        self, use_case, nonce_repository, resolve_identity, wallet_address
    ):
        """Test 63-byte signature fails before the store is queried."""
        short = b64(bytes(63))

        with pytest.raises(DecodeError):
            await use_case.execute(wallet_address, short, NONCE, REDIRECT)

        nonce_repository.consume.assert_not_called()
        resolve_identity.execute.assert_not_called()

    async def test_invalid_signature_touches_nothing(
        self, use_case, nonce_repository, resolve_identity, wallet_address, sign
    ):
        """Test cryptographic failure makes no store or backend calls."""
        with pytest.raises(AuthFailure):
            await use_case.execute(
                wallet_address, sign(b"other-nonce"), NONCE, REDIRECT
            )

        nonce_repository.consume.assert_not_called()
        resolve_identity.execute.assert_not_called()

    async def test_signed_bytes_not_bound_to_nonce(
        self, use_case, nonce_repository, wallet_address, sign
    ):
        """Test valid signature over unrelated bytes is rejected."""
        other = b"unrelated text"

        with pytest.raises(AuthFailure):
            await use_case.execute(
                wallet_address,
                sign(other),
                NONCE,
                REDIRECT,
                signed_message=b64(other),
            )

        nonce_repository.consume.assert_not_called()

    async def test_sign_in_message_with_other_nonce(
        self, use_case, nonce_repository, wallet_address, sign
    ):
        """Test structured message carrying another nonce is rejected."""
        challenge = SignInChallenge(
            domain="localhost:3000",
            statement="Sign in",
            nonce="zzzZZZ999999",
            issued_at="2024-01-02T03:04:05.678Z",
        )
        message = challenge.to_message(wallet_address).encode("utf-8")

        with pytest.raises(AuthFailure):
            await use_case.execute(
                wallet_address,
                sign(message),
                NONCE,
                REDIRECT,
                signed_message=b64(message),
            )

        nonce_repository.consume.assert_not_called()

    async def test_sign_in_message_for_other_wallet(
        self, use_case, wallet_address, sign
    ):
        """Test structured message naming another address is rejected."""
        challenge = SignInChallenge(
            domain="localhost:3000",
            statement="Sign in",
            nonce=NONCE,
            issued_at="2024-01-02T03:04:05.678Z",
        )
        message = challenge.to_message("1" * 32).encode("utf-8")

        with pytest.raises(AuthFailure):
            await use_case.execute(
                wallet_address,
                sign(message),
                NONCE,
                REDIRECT,
                signed_message=b64(message),
            )

    async def test_sign_in_message_for_foreign_domain(
        self, use_case, nonce_repository, wallet_address, sign
    ):
        """Test structured message for a domain off the allow-list is rejected."""
        challenge = SignInChallenge(
            domain="evil.example",
            statement="Sign in",
            nonce=NONCE,
            issued_at="2024-01-02T03:04:05.678Z",
        )
        message = challenge.to_message(wallet_address).encode("utf-8")

        with pytest.raises(AuthFailure):
            await use_case.execute(
                wallet_address,
                sign(message),
                NONCE,
                REDIRECT,
                signed_message=b64(message),
            )

        nonce_repository.consume.assert_not_called()

    async def test_replayed_nonce(
        self, use_case, nonce_repository, resolve_identity, wallet_address, sign
    ):
        """Test nonce that cannot be consumed is rejected."""
        nonce_repository.consume.return_value = False

        with pytest.raises(NonceRejectedError) as exc_info:
            await use_case.execute(
                wallet_address, sign(NONCE.encode()), NONCE, REDIRECT
            )

        assert exc_info.value.code == "AUTHENTICATION_ERROR"
        resolve_identity.execute.assert_not_called()

    async def test_missing_nonce(self, use_case, wallet_address, sign):
        """Test empty nonce is a request error."""
        with pytest.raises(RequestError):
            await use_case.execute(wallet_address, sign(b""), "", REDIRECT)

    async def test_store_failure_propagates(
        self, use_case, resolve_identity, wallet_address, sign
    ):
        """Test transient store failure surfaces as retryable."""
        resolve_identity.execute.side_effect = StoreFailure()

        with pytest.raises(StoreFailure) as exc_info:
            await use_case.execute(
                wallet_address, sign(NONCE.encode()), NONCE, REDIRECT
            )

        assert exc_info.value.retryable
