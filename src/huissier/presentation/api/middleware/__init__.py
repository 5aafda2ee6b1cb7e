"""
API middleware.
"""

from huissier.presentation.api.middleware.error_handler import (
    huissier_exception_handler,
    validation_exception_handler,
)
from huissier.presentation.api.middleware.metrics_middleware import MetricsMiddleware
from huissier.presentation.api.middleware.request_id_middleware import (
    RequestIDMiddleware,
)

__all__ = [
    "huissier_exception_handler",
    "validation_exception_handler",
    "MetricsMiddleware",
    "RequestIDMiddleware",
]
