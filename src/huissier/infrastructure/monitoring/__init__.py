"""
Monitoring and observability infrastructure.
"""

from huissier.infrastructure.monitoring import events, metrics
from huissier.infrastructure.monitoring.events import log_auth_event, truncate
from huissier.infrastructure.monitoring.logger import (
    get_logger,
    get_request_id,
    reset_request_id,
    set_request_id,
    setup_logging,
)

__all__ = [
    "events",
    "metrics",
    "get_logger",
    "get_request_id",
    "reset_request_id",
    "set_request_id",
    "setup_logging",
    "log_auth_event",
    "truncate",
]
