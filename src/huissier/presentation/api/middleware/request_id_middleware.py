"""
Request id propagation.

The request id doubles as the attempt id of server-side auth events.
"""

import re
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from huissier.infrastructure.monitoring.logger import (
    get_request_id,
    reset_request_id,
    set_request_id,
)

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids end up in logs; anything else is replaced
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def accepted_request_id(value: Optional[str]) -> Optional[str]:
    """Return client request id if it is safe to log, else None."""
    if value and _VALID_REQUEST_ID.match(value):
        return value
    return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the duration of each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        token = set_request_id(
            accepted_request_id(request.headers.get(REQUEST_ID_HEADER))
        )
        request_id = get_request_id()
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
