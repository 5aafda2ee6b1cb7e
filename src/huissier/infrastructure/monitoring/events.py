"""
Structured authentication events.

Events are emitted at pipeline boundaries and keyed by attempt id. Secrets
(signatures, keys, tokens) are only ever logged as short prefixes.
"""

import logging
from typing import Any, Optional

from huissier.infrastructure.monitoring.logger import get_request_id

CHALLENGE_ISSUED = "challenge_issued"
NONCE_ISSUED = "nonce_issued"
SIGNATURE_VERIFIED = "signature_verified"
NONCE_CONSUMED = "nonce_consumed"
IDENTITY_RESOLVED = "identity_resolved"
IDENTITY_CREATED = "identity_created"
SESSION_MINTED = "session_minted"
AUTH_FAILED = "auth_failed"
ATTEMPT_TRANSITION = "attempt_transition"

PREFIX_LENGTH = 8


def truncate(value: Optional[Any], length: int = PREFIX_LENGTH) -> Optional[str]:
    """Return short prefix of a sensitive value."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).hex()
    text = str(value)
    if len(text) <= length:
        return text
    return f"{text[:length]}..."


def log_auth_event(
    logger: logging.Logger,
    event: str,
    attempt_id: Optional[str] = None,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit structured auth event.

    Args:
        logger: Target logger
        event: Event name (one of the module constants)
        attempt_id: Attempt id; defaults to current request id
        level: Log level
        **fields: Additional non-secret fields
    """
    extra = {
        "event": event,
        "attempt_id": attempt_id or get_request_id(),
    }
    extra.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, event, extra=extra)
