"""
Global error handling.

Every failure is answered with `{error, code, details?}`. Decode and
signature failures share one message; backend details never leave the
server for configuration errors.
"""

from typing import Any, Dict

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from huissier.domain.exceptions import ErrorKind, HuissierException
from huissier.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

STATUS_CODE_MAP = {
    "REQUEST_ERROR": status.HTTP_400_BAD_REQUEST,
    "DECODE_ERROR": status.HTTP_400_BAD_REQUEST,
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
}


def error_body(message: str, code: str, details: Any = None) -> Dict[str, Any]:
    """Build error response payload."""
    body: Dict[str, Any] = {"error": message, "code": code}
    if details:
        body["details"] = details
    return body


async def huissier_exception_handler(
    request: Request, exc: HuissierException
) -> JSONResponse:
    """
    Handle Huissier domain exceptions.

    Converts domain exceptions to appropriate HTTP responses.
    """
    status_code = STATUS_CODE_MAP.get(
        exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    details = None
    if exc.kind == ErrorKind.REQUEST:
        details = getattr(exc, "details", None)
    elif exc.kind == ErrorKind.STORE:
        logger.warning(
            f"{exc.code}: {exc.message}",
            extra={"details": getattr(exc, "details", None)},
        )
        details = "Please retry"
    elif exc.kind == ErrorKind.CONFIGURATION:
        logger.error(f"{exc.code}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.message, exc.code, details),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer malformed request bodies with 400 instead of 422."""
    fields = [
        ".".join(str(part) for part in error.get("loc", ())[1:])
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "Invalid request",
            "REQUEST_ERROR",
            {"fields": [f for f in fields if f]},
        ),
    )
