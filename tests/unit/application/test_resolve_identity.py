"""
Unit tests for ResolveIdentity use case.
"""

from typing import Dict, Optional
from unittest.mock import AsyncMock

import pytest

from huissier.application.use_cases import ResolveIdentity
from huissier.domain.entities.identity import Identity, derive_login_email
from huissier.domain.exceptions import DuplicateAccountError, StoreFailure
from huissier.domain.repositories.i_identity_repository import IIdentityRepository

WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


class InMemoryIdentityRepository(IIdentityRepository):
    """Identity repository backed by a dict."""

    def __init__(self):
        self.identities: Dict[str, Identity] = {}

    async def get_by_wallet(self, wallet_address: str) -> Optional[Identity]:
        return self.identities.get(wallet_address)

    async def get_by_id(self, identity_id: str) -> Optional[Identity]:
        for identity in self.identities.values():
            if identity.id == identity_id:
                return identity
        return None

    async def create_or_get(self, identity: Identity) -> Identity:
        return self.identities.setdefault(identity.wallet_address, identity)


class TestResolveIdentity:
    """Unit tests for identity resolution."""

    @pytest.fixture
    def repository(self) -> InMemoryIdentityRepository:
        return InMemoryIdentityRepository()

    @pytest.fixture
    def backend(self):
        backend = AsyncMock()
        backend.allocate_account.return_value = "user-123"
        return backend

    async def test_first_sign_in_creates_identity(self, repository, backend):
        """Test new wallet gets an identity from the backend account id."""
        identity = await ResolveIdentity(repository, backend).execute(WALLET)

        assert identity.id == "user-123"
        assert identity.wallet_address == WALLET
        backend.allocate_account.assert_awaited_once_with(
            derive_login_email(WALLET), WALLET
        )

    async def test_second_sign_in_returns_same_identity(self, repository, backend):
        """Test resolving twice yields the same id and one allocation."""
        use_case = ResolveIdentity(repository, backend)

        first = await use_case.execute(WALLET)
        second = await use_case.execute(WALLET)

        assert first.id == second.id == "user-123"
        assert backend.allocate_account.await_count == 1

    async def test_duplicate_account_returns_winner(self, backend):
        """Test losing a creation race returns the winner's identity."""
        winner = Identity(id="user-999", wallet_address=WALLET)
        repository = AsyncMock()
        repository.get_by_wallet.side_effect = [None, winner]
        backend.allocate_account.side_effect = DuplicateAccountError("a@wallet")

        identity = await ResolveIdentity(repository, backend).execute(WALLET)

        assert identity is winner
        repository.create_or_get.assert_not_called()

    async def test_orphaned_backend_account_is_relinked(self, repository, backend):
        """Test backend account left by a rolled-back request is reused."""
        backend.allocate_account.side_effect = DuplicateAccountError("a@wallet")
        backend.find_account_id.return_value = "user-orphan"

        identity = await ResolveIdentity(repository, backend).execute(WALLET)

        assert identity.id == "user-orphan"
        assert repository.identities[WALLET].id == "user-orphan"
        backend.find_account_id.assert_awaited_once_with(
            derive_login_email(WALLET), WALLET
        )

    async def test_orphaned_account_then_normal_sign_in(self, repository, backend):
        """Test later sign-ins resolve the relinked identity locally."""
        backend.allocate_account.side_effect = DuplicateAccountError("a@wallet")
        backend.find_account_id.return_value = "user-orphan"
        use_case = ResolveIdentity(repository, backend)

        await use_case.execute(WALLET)
        again = await use_case.execute(WALLET)

        assert again.id == "user-orphan"
        assert backend.allocate_account.await_count == 1

    async def test_duplicate_account_not_found(self, repository, backend):
        """Test duplicate the backend cannot locate is retryable."""
        backend.allocate_account.side_effect = DuplicateAccountError("a@wallet")
        backend.find_account_id.return_value = None

        with pytest.raises(StoreFailure) as exc_info:
            await ResolveIdentity(repository, backend).execute(WALLET)

        assert exc_info.value.retryable
        assert repository.identities == {}

    async def test_backend_failure_propagates(self, repository, backend):
        """Test backend store failure is not swallowed."""
        backend.allocate_account.side_effect = StoreFailure()

        with pytest.raises(StoreFailure):
            await ResolveIdentity(repository, backend).execute(WALLET)

        assert repository.identities == {}
