"""
Identity backend service interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IIdentityBackend(ABC):
    """
    Abstract identity backend holding accounts and issuing credentials.

    The backend owns account ids and session tokens; both are opaque here.
    """

    @abstractmethod
    async def allocate_account(self, login_email: str, wallet_address: str) -> str:
        """
        Create backend account for a new wallet.

        Args:
            login_email: Internal login credential derived from the wallet
            wallet_address: Wallet address stored as account metadata

        Returns:
            Backend-assigned account id

        Raises:
            DuplicateAccountError: If login already has an account
            StoreFailure: On backend I/O failure or timeout
            ConfigurationFailure: If backend credentials are missing
        """

    @abstractmethod
    async def find_account_id(
        self, login_email: str, wallet_address: str
    ) -> Optional[str]:
        """
        Look up the id of an account that already exists for a login.

        Used when allocation reports a duplicate but no local identity row
        exists, e.g. after a request that created the backend account was
        rolled back.

        Returns:
            Account id, or None if the backend has no such account

        Raises:
            StoreFailure: On backend I/O failure or timeout
            ConfigurationFailure: If backend credentials are missing
        """

    @abstractmethod
    async def generate_action_link(
        self,
        login_email: str,
        redirect_to: str,
        wallet_address: Optional[str] = None,
    ) -> str:
        """
        Request magic-link style callback URL for an account.

        Args:
            login_email: Account login
            redirect_to: Callback base URL
            wallet_address: Wallet bound to the account, if known

        Returns:
            Action link whose `token` query parameter is the session token

        Raises:
            SessionMintError: If backend refuses or fails
            ConfigurationFailure: If backend credentials are missing
        """

    async def close(self) -> None:
        """Release backend resources."""
