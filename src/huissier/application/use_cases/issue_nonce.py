"""
Issue Nonce use case (legacy sign-message flow).
"""

import secrets
import string

from huissier.domain.entities.issued_nonce import IssuedNonce
from huissier.domain.repositories.i_nonce_repository import INonceRepository
from huissier.infrastructure.monitoring import events, get_logger, log_auth_event
from huissier.infrastructure.monitoring.metrics import nonces_issued_total

logger = get_logger(__name__)

NONCE_ALPHABET = string.ascii_letters + string.digits


def generate_nonce(length: int = 12) -> str:
    """Generate alphanumeric nonce from the OS CSPRNG."""
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))


class IssueNonce:
    """
    Issue single-use nonce for the sign-message flow.

    Business rules:
    - Nonce is alphanumeric, drawn from a CSPRNG
    - Nonce is recorded with its expiry before it is returned
    """

    def __init__(
        self,
        nonce_repository: INonceRepository,
        nonce_length: int = 12,
        ttl_seconds: int = 300,
    ):
        self.nonce_repository = nonce_repository
        self.nonce_length = nonce_length
        self.ttl_seconds = ttl_seconds

    async def execute(self) -> IssuedNonce:
        """
        Issue and record new nonce.

        Returns:
            IssuedNonce with expiry

        Raises:
            StoreFailure: If the nonce cannot be recorded
        """
        issued = IssuedNonce.issue(generate_nonce(self.nonce_length), self.ttl_seconds)
        await self.nonce_repository.add(issued)

        nonces_issued_total.labels(kind="legacy").inc()
        log_auth_event(
            logger,
            events.NONCE_ISSUED,
            nonce=events.truncate(issued.nonce, 4),
            expires_at=issued.expires_at_ms,
        )
        return issued
