"""
Authenticate Wallet use case.
"""

import base64
import logging
from typing import Iterable, Optional

from huissier.application.use_cases.issue_session import IssueSession
from huissier.application.use_cases.issue_sign_in_challenge import origin_host
from huissier.application.use_cases.resolve_identity import ResolveIdentity
from huissier.domain.entities.session import AuthSession
from huissier.domain.exceptions import (
    AuthFailure,
    ErrorKind,
    HuissierException,
    NonceRejectedError,
    RequestError,
)
from huissier.domain.repositories.i_nonce_repository import INonceRepository
from huissier.domain.services.i_signature_verifier import ISignatureVerifier
from huissier.domain.value_objects.sign_in_challenge import parse_sign_in_message
from huissier.domain.value_objects.wallet_address import WalletAddress
from huissier.infrastructure.monitoring import events, get_logger, log_auth_event
from huissier.infrastructure.monitoring.metrics import auth_attempts_total

logger = get_logger(__name__)


class AuthenticateWallet:
    """
    Authenticate user via wallet signature and issue a session.

    Business rules:
    - Signature is verified before any store access
    - Signed bytes must be bound to the presented nonce (and wallet)
    - A signed sign-in message must name an allowed domain
    - Nonce is single-use and must not be expired
    - Identity is created on first successful sign-in
    - Result is all-or-nothing: no partial session is ever returned

    Nonce consumption and identity creation run in the caller's database
    transaction, so a failure in a later step rolls them back.
    """

    def __init__(
        self,
        signature_verifier: ISignatureVerifier,
        nonce_repository: INonceRepository,
        resolve_identity: ResolveIdentity,
        issue_session: IssueSession,
        require_issued_nonce: bool = True,
        allowed_origins: Iterable[str] = (),
    ):
        """
        Initialize use case with dependencies.

        Args:
            signature_verifier: Ed25519 verifier
            nonce_repository: Store for issued nonces
            resolve_identity: Identity resolver
            issue_session: Session issuer
            require_issued_nonce: Reject nonces not issued by this service
            allowed_origins: CORS allow-list; sign-in messages must name
                one of their hosts
        """
        self.signature_verifier = signature_verifier
        self.nonce_repository = nonce_repository
        self.resolve_identity = resolve_identity
        self.issue_session = issue_session
        self.require_issued_nonce = require_issued_nonce
        self.allowed_hosts = {origin_host(o) for o in allowed_origins}

    async def execute(
        self,
        wallet_address: str,
        signature: str,
        nonce: str,
        redirect_to: str,
        signed_message: Optional[str] = None,
    ) -> AuthSession:
        """
        Execute wallet authentication.

        Args:
            wallet_address: Wallet address claiming ownership (base58)
            signature: Ed25519 signature (base64)
            nonce: Nonce the client was issued
            redirect_to: Callback base URL for the session link
            signed_message: Exact signed bytes (base64); defaults to the
                UTF-8 nonce for the legacy flow

        Returns:
            AuthSession with identity id, token and wallet address

        Raises:
            RequestError: If nonce is missing
            DecodeError: If any input is malformed
            AuthFailure: If the signature, binding or nonce is rejected
            StoreFailure: If the store or backend fails (retryable)
            ConfigurationFailure: If backend credentials are missing
        """
        try:
            session = await self._authenticate(
                wallet_address, signature, nonce, redirect_to, signed_message
            )
        except HuissierException as e:
            auth_attempts_total.labels(outcome=e.kind.value).inc()
            log_auth_event(
                logger,
                events.AUTH_FAILED,
                level=(
                    logging.ERROR
                    if e.kind == ErrorKind.CONFIGURATION
                    else logging.WARNING
                ),
                kind=e.kind.value,
                code=e.code,
                field=getattr(e, "field", None),
                reason=getattr(e, "reason", None) or getattr(e, "details", None),
                wallet=events.truncate(wallet_address),
            )
            raise

        auth_attempts_total.labels(outcome="success").inc()
        return session

    async def _authenticate(
        self,
        wallet_address: str,
        signature: str,
        nonce: str,
        redirect_to: str,
        signed_message: Optional[str],
    ) -> AuthSession:
        if not nonce:
            raise RequestError("Missing required field: nonce")

        if signed_message is None:
            signed_message = base64.b64encode(nonce.encode("utf-8")).decode("ascii")

        # 1. Verify signature (no I/O)
        is_valid = self.signature_verifier.verify(
            wallet_address, signature, signed_message
        )
        if not is_valid:
            raise AuthFailure("invalid signature")

        address = WalletAddress(wallet_address).address
        log_auth_event(
            logger,
            events.SIGNATURE_VERIFIED,
            wallet=events.truncate(address),
            signature_prefix=events.truncate(signature),
        )

        # 2. Signed bytes must carry this nonce
        self._check_binding(
            address, nonce, self.signature_verifier.decode_message(signed_message)
        )

        # 3. Consume nonce
        if self.require_issued_nonce:
            if not await self.nonce_repository.consume(nonce):
                raise NonceRejectedError("nonce unknown, expired or already used")
            log_auth_event(
                logger, events.NONCE_CONSUMED, nonce=events.truncate(nonce, 4)
            )

        # 4. Resolve identity
        identity = await self.resolve_identity.execute(address)

        # 5. Issue session
        return await self.issue_session.execute(identity, redirect_to)

    def _check_binding(self, address: str, nonce: str, message: bytes) -> None:
        """
        Check signed bytes belong to this nonce, wallet and an allowed domain.

        Raises:
            AuthFailure: If message is not bound to the request
        """
        if message == nonce.encode("utf-8"):
            return

        try:
            parsed = parse_sign_in_message(message.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise AuthFailure("signed message not bound to nonce") from e

        if parsed.nonce != nonce:
            raise AuthFailure("signed message nonce mismatch")
        if parsed.address and parsed.address != address:
            raise AuthFailure("signed message address mismatch")
        if parsed.domain.lower() not in self.allowed_hosts:
            raise AuthFailure("signed message domain not allowed")
