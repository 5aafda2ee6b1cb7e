"""
Self-contained identity backend.

Account ids are derived deterministically from the wallet address and
sessions are HS256 JWTs carried in a magic-link style URL.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit
from uuid import UUID, uuid5

from jose import JWTError, jwt

from huissier.domain.exceptions import ConfigurationFailure, SessionMintError
from huissier.domain.services.i_identity_backend import IIdentityBackend

ACCOUNT_NAMESPACE = UUID("6f1d2c4e-8a1b-5c3d-9e7f-0a1b2c3d4e5f")
TOKEN_TYPE = "magiclink"


class LocalIdentityBackend(IIdentityBackend):
    """Identity backend that needs nothing beyond a JWT secret."""

    def __init__(
        self,
        secret_key: Optional[str],
        algorithm: str = "HS256",
        ttl_minutes: int = 60,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl_minutes = ttl_minutes

    async def allocate_account(self, login_email: str, wallet_address: str) -> str:
        """Return stable account id for wallet."""
        return str(uuid5(ACCOUNT_NAMESPACE, wallet_address))

    async def find_account_id(
        self, login_email: str, wallet_address: str
    ) -> Optional[str]:
        """Account ids are derived, so every wallet already has one."""
        return str(uuid5(ACCOUNT_NAMESPACE, wallet_address))

    async def generate_action_link(
        self,
        login_email: str,
        redirect_to: str,
        wallet_address: Optional[str] = None,
    ) -> str:
        """
        Build action link carrying a signed session token.

        Raises:
            ConfigurationFailure: If JWT_SECRET_KEY is not set
            SessionMintError: If the token cannot be encoded
        """
        if not self.secret_key:
            raise ConfigurationFailure("JWT_SECRET_KEY")

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": login_email,
            "iat": now,
            "exp": now + timedelta(minutes=self.ttl_minutes),
            "type": TOKEN_TYPE,
        }
        if wallet_address:
            payload["wallet"] = wallet_address

        try:
            token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except JWTError as e:
            raise SessionMintError(details=f"token encoding failed: {e}") from e

        parts = urlsplit(redirect_to)
        query = urlencode({"token": token, "type": TOKEN_TYPE})
        if parts.query:
            query = f"{parts.query}&{query}"
        return urlunsplit(
            (parts.scheme, parts.netloc, parts.path or "/", query, parts.fragment)
        )

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate session token.

        Raises:
            ConfigurationFailure: If JWT_SECRET_KEY is not set
            JWTError: If token is invalid or expired
        """
        if not self.secret_key:
            raise ConfigurationFailure("JWT_SECRET_KEY")
        return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
