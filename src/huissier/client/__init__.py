"""
Sign-in client: API client, wallet interface, session cache and
orchestrator.
"""

from huissier.client.api_client import HuissierClient, error_from_response
from huissier.client.orchestrator import (
    AttemptResult,
    AttemptState,
    CancellationToken,
    SignInOrchestrator,
)
from huissier.client.retry import BackoffStrategy, RetryPolicy
from huissier.client.session_cache import (
    FileSessionCache,
    InMemorySessionCache,
    SessionCache,
)
from huissier.client.wallet import (
    KeypairWallet,
    SignedMessage,
    SignInOutput,
    WalletAccount,
    WalletCapability,
    WalletProvider,
    detect_capability,
)

__all__ = [
    "AttemptResult",
    "AttemptState",
    "BackoffStrategy",
    "CancellationToken",
    "FileSessionCache",
    "HuissierClient",
    "InMemorySessionCache",
    "KeypairWallet",
    "RetryPolicy",
    "SessionCache",
    "SignInOrchestrator",
    "SignInOutput",
    "SignedMessage",
    "WalletAccount",
    "WalletCapability",
    "WalletProvider",
    "detect_capability",
    "error_from_response",
]
