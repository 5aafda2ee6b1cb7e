"""
Purge Expired Nonces use case.
"""

from huissier.domain.repositories.i_nonce_repository import INonceRepository
from huissier.infrastructure.monitoring import get_logger
from huissier.infrastructure.monitoring.metrics import nonces_purged_total

logger = get_logger(__name__)


class PurgeExpiredNonces:
    """
    Delete nonces past their expiry.

    Every unauthenticated getNonce or challenge call adds a row; expired
    rows can never be consumed, so they are safe to drop.
    """

    def __init__(self, nonce_repository: INonceRepository):
        self.nonce_repository = nonce_repository

    async def execute(self) -> int:
        """
        Returns:
            Number of nonces deleted

        Raises:
            StoreFailure: If the delete fails
        """
        purged = await self.nonce_repository.purge_expired()
        if purged:
            nonces_purged_total.inc(purged)
            logger.info(f"Purged {purged} expired nonces")
        return purged
