"""
Client-side sign-in orchestration.

Drives one sign-in attempt through its states:

    IDLE -> CHALLENGE_ISSUED -> SIGNED -> VERIFYING
    VERIFYING -> AUTHENTICATED | REJECTED | TRANSIENT_FAILURE
    TRANSIENT_FAILURE -> VERIFYING (up to max_attempts) | EXHAUSTED

plus CANCELLED (user rejection, signing timeout, cancellation token) and
FAILED (no wallet, no challenge). Only transient failures are retried; the
same signed proof is resubmitted because the server rolls back nonce
consumption when a later step fails.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, List, Optional, TypeVar
from uuid import uuid4

from huissier.client.api_client import HuissierClient
from huissier.client.retry import RetryPolicy
from huissier.client.session_cache import InMemorySessionCache, SessionCache
from huissier.client.wallet import (
    WalletCapability,
    WalletProvider,
    detect_capability,
)
from huissier.domain.entities.session import AuthSession
from huissier.domain.exceptions import (
    HuissierException,
    WalletCancelledError,
    WalletUnavailableError,
)
from huissier.domain.value_objects.signature_proof import SignatureProof
from huissier.infrastructure.monitoring import events, get_logger, log_auth_event

logger = get_logger(__name__)

T = TypeVar("T")


class AttemptState(str, Enum):
    """Sign-in attempt state."""

    IDLE = "idle"
    CHALLENGE_ISSUED = "challenge_issued"
    SIGNED = "signed"
    VERIFYING = "verifying"
    TRANSIENT_FAILURE = "transient_failure"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    FAILED = "failed"


TERMINAL_STATES = frozenset(
    {
        AttemptState.AUTHENTICATED,
        AttemptState.REJECTED,
        AttemptState.EXHAUSTED,
        AttemptState.CANCELLED,
        AttemptState.FAILED,
    }
)


class CancellationToken:
    """Signals that the user abandoned the sign-in."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


@dataclass
class AttemptResult:
    """Outcome of one sign-in attempt."""

    attempt_id: str
    state: AttemptState = AttemptState.IDLE
    session: Optional[AuthSession] = None
    error: Optional[HuissierException] = None
    attempts: int = 0
    transitions: List[AttemptState] = field(
        default_factory=lambda: [AttemptState.IDLE]
    )

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def succeeded(self) -> bool:
        return self.state == AttemptState.AUTHENTICATED


class _Stop(Exception):
    """Ends an attempt in a terminal state."""

    def __init__(self, state: AttemptState, error: HuissierException):
        self.state = state
        self.error = error
        super().__init__(state.value)


class SignInOrchestrator:
    """
    Coordinates wallet, API client and session cache for sign-in.

    Attributes:
        api_client: Huissier API client
        wallet: Wallet provider (None means no wallet installed)
        session_cache: Where the resulting session is stored
        retry_policy: Verification retry policy
        signing_timeout: Seconds to wait for the wallet to respond
    """

    def __init__(
        self,
        api_client: HuissierClient,
        wallet: Optional[WalletProvider],
        session_cache: Optional[SessionCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        signing_timeout: float = 120.0,
    ):
        self.api_client = api_client
        self.wallet = wallet
        self.session_cache = session_cache or InMemorySessionCache()
        self.retry_policy = retry_policy or RetryPolicy()
        self.signing_timeout = signing_timeout

    @property
    def current_session(self) -> Optional[AuthSession]:
        """Session from the cache, if signed in."""
        return self.session_cache.get()

    def sign_out(self) -> None:
        """Forget the current session."""
        self.session_cache.clear()
        logger.info("Signed out")

    async def sign_in(
        self, cancel_token: Optional[CancellationToken] = None
    ) -> AttemptResult:
        """
        Run one sign-in attempt to a terminal state.

        Args:
            cancel_token: Optional token to abandon the attempt

        Returns:
            AttemptResult; every terminal state except AUTHENTICATED
            carries the error that ended it
        """
        result = AttemptResult(attempt_id=str(uuid4()))
        try:
            proof = await self._obtain_proof(result, cancel_token)
            await self._verify_with_retry(result, proof, cancel_token)
        except _Stop as stop:
            result.error = stop.error
            self._transition(result, stop.state)
        return result

    async def _obtain_proof(
        self,
        result: AttemptResult,
        cancel_token: Optional[CancellationToken],
    ) -> SignatureProof:
        """Fetch challenge and have the wallet sign it."""
        capability = detect_capability(self.wallet)
        if capability == WalletCapability.UNAVAILABLE:
            raise _Stop(AttemptState.FAILED, WalletUnavailableError())

        self._check_cancelled(cancel_token)

        if capability == WalletCapability.SIGN_IN:
            challenge = await self._fetch(self.api_client.get_challenge())
            self._transition(result, AttemptState.CHALLENGE_ISSUED)
            self._check_cancelled(cancel_token)

            output = await self._with_wallet(self.wallet.sign_in(challenge))
            proof = SignatureProof(
                wallet_address=output.address,
                signature=output.signature,
                signed_message=output.signed_message,
                nonce=challenge.nonce,
            )
        else:
            account = await self._with_wallet(self.wallet.connect())
            self._check_cancelled(cancel_token)

            issued = await self._fetch(self.api_client.get_nonce())
            self._transition(result, AttemptState.CHALLENGE_ISSUED)
            self._check_cancelled(cancel_token)

            message = issued.nonce.encode("utf-8")
            signed = await self._with_wallet(self.wallet.sign_message(message))
            proof = SignatureProof(
                wallet_address=account.address,
                signature=signed.signature,
                signed_message=message,
                nonce=issued.nonce,
            )

        self._transition(result, AttemptState.SIGNED)
        return proof

    async def _verify_with_retry(
        self,
        result: AttemptResult,
        proof: SignatureProof,
        cancel_token: Optional[CancellationToken],
    ) -> None:
        policy = self.retry_policy
        for attempt in range(policy.max_attempts):
            self._check_cancelled(cancel_token)
            self._transition(result, AttemptState.VERIFYING)
            result.attempts += 1

            try:
                session = await self.api_client.verify(proof)
            except HuissierException as e:
                if not policy.should_retry(e):
                    raise _Stop(AttemptState.REJECTED, e)

                result.error = e
                self._transition(result, AttemptState.TRANSIENT_FAILURE)
                if attempt + 1 >= policy.max_attempts:
                    raise _Stop(AttemptState.EXHAUSTED, e)
                await self._sleep(policy.compute_delay(attempt), cancel_token)
                continue

            self.session_cache.set(session)
            result.session = session
            result.error = None
            self._transition(result, AttemptState.AUTHENTICATED)
            return

    async def _with_wallet(self, step: Awaitable[T]) -> T:
        """Await wallet step under the signing timeout."""
        try:
            return await asyncio.wait_for(step, timeout=self.signing_timeout)
        except asyncio.TimeoutError:
            raise _Stop(
                AttemptState.CANCELLED,
                WalletCancelledError("Wallet did not respond in time"),
            )
        except WalletCancelledError as e:
            raise _Stop(AttemptState.CANCELLED, e)

    async def _fetch(self, step: Awaitable[T]) -> T:
        """Await challenge request; any failure ends the attempt."""
        try:
            return await step
        except HuissierException as e:
            raise _Stop(AttemptState.FAILED, e)

    @staticmethod
    def _check_cancelled(cancel_token: Optional[CancellationToken]) -> None:
        if cancel_token is not None and cancel_token.cancelled:
            raise _Stop(
                AttemptState.CANCELLED,
                WalletCancelledError("Sign-in cancelled"),
            )

    @staticmethod
    async def _sleep(delay: float, cancel_token: Optional[CancellationToken]) -> None:
        """Sleep between attempts, waking early on cancellation."""
        if cancel_token is None:
            await asyncio.sleep(delay)
            return
        try:
            await asyncio.wait_for(cancel_token.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    @staticmethod
    def _transition(result: AttemptResult, state: AttemptState) -> None:
        previous = result.state
        result.state = state
        result.transitions.append(state)
        log_auth_event(
            logger,
            events.ATTEMPT_TRANSITION,
            attempt_id=result.attempt_id,
            from_state=previous.value,
            to_state=state.value,
            attempt=result.attempts or None,
            error_code=result.error.code if result.error else None,
        )
