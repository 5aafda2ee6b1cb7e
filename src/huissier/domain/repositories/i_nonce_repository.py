"""
Nonce repository interface.
"""

from abc import ABC, abstractmethod

from huissier.domain.entities.issued_nonce import IssuedNonce


class INonceRepository(ABC):
    """Interface for single-use nonce tracking."""

    @abstractmethod
    async def add(self, issued: IssuedNonce) -> IssuedNonce:
        """
        Record newly issued nonce.

        Args:
            issued: Nonce with expiry

        Returns:
            Stored nonce
        """

    @abstractmethod
    async def consume(self, nonce: str) -> bool:
        """
        Atomically mark nonce as used.

        Args:
            nonce: Nonce string presented by client

        Returns:
            True if nonce was known, unexpired and unused; False otherwise
        """

    @abstractmethod
    async def purge_expired(self) -> int:
        """
        Delete expired nonces.

        Returns:
            Number of rows deleted
        """
