"""
Supabase (GoTrue admin API) identity backend.

Accounts are created with an internal login email and a random password
that is never used; sessions are minted as magic links.
"""

import secrets
from typing import Any, Dict, Optional

import httpx

from huissier.domain.exceptions import (
    ConfigurationFailure,
    DuplicateAccountError,
    SessionMintError,
    StoreFailure,
)
from huissier.domain.services.i_identity_backend import IIdentityBackend
from huissier.infrastructure.monitoring import get_logger
from huissier.infrastructure.monitoring.metrics import (
    backend_request_duration_seconds,
)

logger = get_logger(__name__)

USERS_PATH = "/auth/v1/admin/users"
GENERATE_LINK_PATH = "/auth/v1/admin/generate_link"


class SupabaseIdentityBackend(IIdentityBackend):
    """
    Identity backend over the Supabase auth admin endpoints.

    Attributes:
        supabase_url: Project base URL
        service_role_key: Admin key (never logged)
        timeout: HTTP request timeout in seconds
    """

    def __init__(
        self,
        supabase_url: Optional[str],
        service_role_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.supabase_url = (supabase_url or "").rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if not self.supabase_url:
            raise ConfigurationFailure("SUPABASE_URL")
        if not self.service_role_key:
            raise ConfigurationFailure("SUPABASE_SERVICE_ROLE_KEY")

        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.supabase_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "apikey": self.service_role_key,
                    "Authorization": f"Bearer {self.service_role_key}",
                },
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._client

    async def allocate_account(self, login_email: str, wallet_address: str) -> str:
        """
        Create auth user for wallet.

        Raises:
            DuplicateAccountError: If the login email is already registered
            StoreFailure: On timeout, connection error or 5xx
            ConfigurationFailure: If Supabase credentials are missing
        """
        body = {
            "email": login_email,
            "password": secrets.token_urlsafe(32),
            "email_confirm": True,
            "user_metadata": {"wallet_address": wallet_address},
        }
        response = await self._post("create_user", USERS_PATH, body)

        if response.status_code in (409, 422) and "already" in response.text.lower():
            raise DuplicateAccountError(login_email)
        if response.status_code >= 400:
            raise StoreFailure(
                details=f"create user failed: HTTP {response.status_code}"
            )

        data = self._json(response)
        user = data.get("user", data)
        account_id = user.get("id") if isinstance(user, dict) else None
        if not account_id:
            raise StoreFailure(details="create user response missing id")
        return str(account_id)

    async def find_account_id(
        self, login_email: str, wallet_address: str
    ) -> Optional[str]:
        """
        Recover id of an existing auth user.

        The admin API has no lookup by email, but generate_link answers with
        the user record of the login it was asked about. The link itself is
        discarded.

        Raises:
            StoreFailure: On timeout, connection error or 5xx
            ConfigurationFailure: If Supabase credentials are missing
        """
        body = {"type": "magiclink", "email": login_email}
        response = await self._post("lookup_user", GENERATE_LINK_PATH, body)

        if response.status_code in (400, 404, 422):
            return None
        if response.status_code >= 400:
            raise StoreFailure(
                details=f"user lookup failed: HTTP {response.status_code}"
            )

        data = self._json(response)
        user = data.get("user") if isinstance(data.get("user"), dict) else data
        account_id = user.get("id")
        return str(account_id) if account_id else None

    async def generate_action_link(
        self,
        login_email: str,
        redirect_to: str,
        wallet_address: Optional[str] = None,
    ) -> str:
        """
        Generate magic link for account.

        Raises:
            SessionMintError: If the backend fails or returns no link
            ConfigurationFailure: If Supabase credentials are missing
        """
        body = {
            "type": "magiclink",
            "email": login_email,
            "redirect_to": redirect_to,
        }
        try:
            response = await self._post("generate_link", GENERATE_LINK_PATH, body)
        except StoreFailure as e:
            raise SessionMintError(details=e.details) from e

        if response.status_code >= 400:
            raise SessionMintError(
                details=f"generate link failed: HTTP {response.status_code}"
            )

        data = self._json(response)
        properties = data.get("properties") or {}
        action_link = data.get("action_link") or properties.get("action_link")
        if not action_link:
            raise SessionMintError(details="generate link response missing link")
        return action_link

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _post(
        self, operation: str, path: str, body: Dict[str, Any]
    ) -> httpx.Response:
        """POST to admin API, mapping transport failures to StoreFailure."""
        client = self.client
        try:
            with backend_request_duration_seconds.labels(operation=operation).time():
                response = await client.post(path, json=body)
        except httpx.TimeoutException as e:
            logger.warning(f"Supabase {operation} timed out")
            raise StoreFailure(details=f"{operation} timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"Supabase {operation} failed: {type(e).__name__}")
            raise StoreFailure(details=f"{operation} failed: {type(e).__name__}") from e

        if response.status_code >= 500:
            logger.warning(
                f"Supabase {operation} returned HTTP {response.status_code}"
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise StoreFailure(details="backend returned invalid JSON") from e
        if not isinstance(data, dict):
            raise StoreFailure(details="backend returned unexpected payload")
        return data
