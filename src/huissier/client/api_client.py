"""
HTTP client for the Huissier auth API.

Maps error responses back to the domain exception types so callers decide
on retries from `exc.retryable`, never from message text.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from huissier.domain.entities.issued_nonce import IssuedNonce
from huissier.domain.entities.session import AuthSession
from huissier.domain.exceptions import (
    AuthFailure,
    ConfigurationFailure,
    DecodeError,
    HuissierException,
    RequestError,
    SessionMintError,
    StoreFailure,
)
from huissier.domain.value_objects.sign_in_challenge import SignInChallenge
from huissier.domain.value_objects.signature_proof import SignatureProof
from huissier.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

AUTH_PATH = "/api/auth"
CHALLENGE_PATH = "/api/auth/challenge"


def error_from_response(response: httpx.Response) -> HuissierException:
    """
    Rebuild domain exception from an error response.

    Uses the `code` field, falling back to the status code.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    code = body.get("code")
    message = body.get("error") or response.reason_phrase or "Request failed"
    details = body.get("details")

    if code == "REQUEST_ERROR":
        return RequestError(message, details=details)
    if code == "DECODE_ERROR":
        return DecodeError("response", message)
    if code == "AUTHENTICATION_ERROR":
        return AuthFailure(message)
    if code == "SESSION_MINT_FAILURE":
        return SessionMintError(details=str(details) if details else None)
    if code in ("STORE_FAILURE", "DUPLICATE_ACCOUNT"):
        return StoreFailure(message, code=code)
    if code == "CONFIGURATION_ERROR":
        return ConfigurationFailure(str(details or "server"))

    status_code = response.status_code
    if status_code == 400:
        return DecodeError("response", message)
    if status_code == 401:
        return AuthFailure(message)
    if status_code >= 500:
        return StoreFailure(message, details=f"HTTP {status_code}")
    return RequestError(message, details={"status": status_code})


class HuissierClient:
    """
    Async client for challenge, nonce and verification calls.

    Attributes:
        base_url: Service base URL
        timeout: HTTP request timeout in seconds
        origin: Origin header sent with requests (web app origin)

    Examples:
        async with HuissierClient("http://localhost:8000") as client:
            nonce = await client.get_nonce()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        origin: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.origin = origin
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.origin:
                headers["Origin"] = self.origin
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def get_challenge(self) -> SignInChallenge:
        """Fetch structured Sign-In With Solana challenge."""
        data = await self._request("GET", CHALLENGE_PATH)
        try:
            return SignInChallenge.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreFailure(details=f"malformed challenge: {e}") from e

    async def get_nonce(self) -> IssuedNonce:
        """Fetch legacy nonce."""
        data = await self._request("POST", AUTH_PATH, {"action": "getNonce"})
        try:
            expires_at = datetime.fromtimestamp(
                int(data["expiresAt"]) / 1000, tz=timezone.utc
            )
            return IssuedNonce(nonce=str(data["nonce"]), expires_at=expires_at)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreFailure(details=f"malformed nonce response: {e}") from e

    async def verify(self, proof: SignatureProof) -> AuthSession:
        """
        Submit signature proof and return the session.

        Raises:
            DecodeError / AuthFailure: Proof rejected (not retryable)
            StoreFailure: Server or network failure (retryable)
        """
        data = await self._request("POST", AUTH_PATH, proof.to_request())
        try:
            return AuthSession.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreFailure(details="incomplete session payload") from e

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "HuissierClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(
        self, method: str, path: str, body: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            response = await self.client.request(method, path, json=body)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise StoreFailure(details="request timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {type(e).__name__}")
            raise StoreFailure(details=f"transport error: {type(e).__name__}") from e

        if response.status_code >= 400:
            raise error_from_response(response)

        try:
            data = response.json()
        except ValueError as e:
            raise StoreFailure(details="invalid JSON response") from e
        if not isinstance(data, dict):
            raise StoreFailure(details="unexpected response payload")
        return data
