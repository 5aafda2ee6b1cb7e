"""
Issue Sign-In Challenge use case.
"""

from datetime import timedelta
from typing import Iterable, Optional, Sequence
from urllib.parse import urlsplit

from huissier.application.use_cases.issue_nonce import generate_nonce
from huissier.domain.entities.issued_nonce import IssuedNonce
from huissier.domain.exceptions import RequestError
from huissier.domain.repositories.i_nonce_repository import INonceRepository
from huissier.domain.value_objects.sign_in_challenge import (
    SignInChallenge,
    format_timestamp,
)
from huissier.infrastructure.monitoring import events, get_logger, log_auth_event
from huissier.infrastructure.monitoring.metrics import nonces_issued_total

logger = get_logger(__name__)


def origin_host(origin: str) -> str:
    """Return host[:port] of an origin URL or a bare Host header value."""
    origin = origin.strip()
    if "://" not in origin:
        origin = f"//{origin}"
    return urlsplit(origin).netloc.lower()


class IssueSignInChallenge:
    """
    Build structured Sign-In With Solana challenge.

    Business rules:
    - Domain must be one of the allowed origin hosts
    - Nonce is fresh, single-use and recorded with its expiry
    - Statement, version, chain id and resources come from configuration
    """

    def __init__(
        self,
        nonce_repository: INonceRepository,
        allowed_origins: Iterable[str],
        statement: str,
        version: str = "1",
        chain_id: str = "mainnet",
        resources: Sequence[str] = (),
        nonce_length: int = 12,
        ttl_seconds: int = 300,
    ):
        """
        Initialize use case with dependencies.

        Args:
            nonce_repository: Store for issued nonces
            allowed_origins: CORS allow-list; their hosts are valid domains
            statement: Human-readable statement shown by the wallet
            version: SIWS version
            chain_id: Solana cluster identifier
            resources: Resource URIs listed in the message
            nonce_length: Nonce length in characters
            ttl_seconds: Nonce validity window
        """
        self.nonce_repository = nonce_repository
        self.allowed_hosts = {origin_host(o) for o in allowed_origins}
        self.statement = statement
        self.version = version
        self.chain_id = chain_id
        self.resources = tuple(resources)
        self.nonce_length = nonce_length
        self.ttl_seconds = ttl_seconds

    async def execute(self, domain: str, uri: Optional[str] = None) -> SignInChallenge:
        """
        Issue challenge for requesting domain.

        Args:
            domain: Requesting host (from Origin, else Host header)
            uri: Requesting origin URL

        Returns:
            SignInChallenge ready to hand to the wallet

        Raises:
            RequestError: If domain is missing or not allowed
            StoreFailure: If the nonce cannot be recorded
        """
        if not domain:
            raise RequestError("Missing request origin")

        host = origin_host(domain)
        if host not in self.allowed_hosts:
            raise RequestError("Origin not allowed", details={"domain": host})

        issued = IssuedNonce.issue(generate_nonce(self.nonce_length), self.ttl_seconds)
        await self.nonce_repository.add(issued)

        challenge = SignInChallenge(
            domain=host,
            statement=self.statement,
            nonce=issued.nonce,
            issued_at=format_timestamp(issued.issued_at),
            version=self.version,
            chain_id=self.chain_id,
            resources=self.resources,
            uri=uri,
            expiration_time=format_timestamp(
                issued.issued_at + timedelta(seconds=self.ttl_seconds)
            ),
        )

        nonces_issued_total.labels(kind="siws").inc()
        log_auth_event(
            logger,
            events.CHALLENGE_ISSUED,
            domain=host,
            nonce=events.truncate(issued.nonce, 4),
        )
        return challenge
