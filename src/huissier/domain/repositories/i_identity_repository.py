"""
Identity repository interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from huissier.domain.entities.identity import Identity


class IIdentityRepository(ABC):
    """Interface for identity persistence operations."""

    @abstractmethod
    async def get_by_wallet(self, wallet_address: str) -> Optional[Identity]:
        """
        Get identity by exact wallet address match.

        Args:
            wallet_address: Wallet address

        Returns:
            Identity entity if found, None otherwise

        Raises:
            StoreFailure: If the store cannot be queried
        """

    @abstractmethod
    async def get_by_id(self, identity_id: str) -> Optional[Identity]:
        """
        Get identity by ID.

        Args:
            identity_id: Backend-assigned identity id

        Returns:
            Identity entity if found, None otherwise
        """

    @abstractmethod
    async def create_or_get(self, identity: Identity) -> Identity:
        """
        Insert identity, or return the row that already holds its wallet.

        Uniqueness of wallet_address is enforced by the store. When a
        concurrent insert wins, the existing row is returned instead of
        raising.

        Args:
            identity: Identity entity to create

        Returns:
            Stored identity (new or pre-existing)

        Raises:
            StoreFailure: If the store fails or the winning row is not visible
        """
