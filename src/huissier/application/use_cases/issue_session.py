"""
Issue Session use case.
"""

from urllib.parse import parse_qs, urlsplit

from huissier.domain.entities.identity import Identity
from huissier.domain.entities.session import AuthSession
from huissier.domain.exceptions import SessionMintError
from huissier.domain.services.i_identity_backend import IIdentityBackend
from huissier.infrastructure.monitoring import events, get_logger, log_auth_event

logger = get_logger(__name__)


def extract_token(action_link: str) -> str:
    """
    Extract `token` query parameter from action link.

    Raises:
        SessionMintError: If link carries no token
    """
    query = parse_qs(urlsplit(action_link).query)
    tokens = query.get("token")
    if not tokens or not tokens[0]:
        raise SessionMintError(details="action link carries no token")
    return tokens[0]


class IssueSession:
    """Mint opaque session credential for a resolved identity."""

    def __init__(self, identity_backend: IIdentityBackend):
        self.identity_backend = identity_backend

    async def execute(self, identity: Identity, redirect_to: str) -> AuthSession:
        """
        Issue session for identity.

        Args:
            identity: Resolved identity
            redirect_to: Callback base URL for the action link

        Returns:
            AuthSession with all fields populated

        Raises:
            SessionMintError: If the backend fails or returns no token
            ConfigurationFailure: If backend credentials are missing
        """
        action_link = await self.identity_backend.generate_action_link(
            identity.login_email,
            redirect_to,
            wallet_address=identity.wallet_address,
        )
        token = extract_token(action_link)

        session = AuthSession(
            identity_id=identity.id,
            token=token,
            wallet_address=identity.wallet_address,
        )
        log_auth_event(
            logger,
            events.SESSION_MINTED,
            identity_id=identity.id,
            token_prefix=events.truncate(token),
        )
        return session
