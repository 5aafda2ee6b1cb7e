"""
Resolve Identity use case.
"""

from huissier.domain.entities.identity import Identity, derive_login_email
from huissier.domain.exceptions import DuplicateAccountError, StoreFailure
from huissier.domain.repositories.i_identity_repository import IIdentityRepository
from huissier.domain.services.i_identity_backend import IIdentityBackend
from huissier.infrastructure.monitoring import events, get_logger, log_auth_event
from huissier.infrastructure.monitoring.metrics import identities_created_total

logger = get_logger(__name__)


class ResolveIdentity:
    """
    Find or create the identity bound to a verified wallet.

    Business rules:
    - Exactly one identity per wallet address
    - Existing identity is returned unchanged
    - Concurrent first sign-ins converge on the same identity
    """

    def __init__(
        self,
        identity_repository: IIdentityRepository,
        identity_backend: IIdentityBackend,
    ):
        """
        Initialize use case with dependencies.

        Args:
            identity_repository: Repository for identity persistence
            identity_backend: Backend allocating account ids
        """
        self.identity_repository = identity_repository
        self.identity_backend = identity_backend

    async def execute(self, wallet_address: str) -> Identity:
        """
        Resolve identity for wallet address.

        Must only be called after the wallet signature was verified.

        Args:
            wallet_address: Verified wallet address

        Returns:
            Existing or newly created Identity

        Raises:
            StoreFailure: If the store or backend fails (retryable)
        """
        existing = await self.identity_repository.get_by_wallet(wallet_address)
        if existing:
            log_auth_event(
                logger,
                events.IDENTITY_RESOLVED,
                identity_id=existing.id,
                new_identity=False,
            )
            return existing

        login_email = derive_login_email(wallet_address)
        recovered = False
        try:
            account_id = await self.identity_backend.allocate_account(
                login_email, wallet_address
            )
        except DuplicateAccountError:
            # Another sign-in allocated the account first
            winner = await self.identity_repository.get_by_wallet(wallet_address)
            if winner is not None:
                log_auth_event(
                    logger,
                    events.IDENTITY_RESOLVED,
                    identity_id=winner.id,
                    new_identity=False,
                )
                return winner

            # Backend account outlived a rolled-back request; link it again
            account_id = await self.identity_backend.find_account_id(
                login_email, wallet_address
            )
            if account_id is None:
                raise StoreFailure(
                    details="backend account exists but cannot be found"
                )
            recovered = True

        identity = await self.identity_repository.create_or_get(
            Identity(
                id=account_id,
                wallet_address=wallet_address,
                login_email=login_email,
            )
        )

        identities_created_total.inc()
        log_auth_event(
            logger,
            events.IDENTITY_CREATED,
            identity_id=identity.id,
            wallet=events.truncate(wallet_address),
            recovered_account=recovered,
        )
        return identity
