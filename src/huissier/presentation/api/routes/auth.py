"""
Authentication API routes.

`POST /auth` dispatches on the `action` field of the JSON body, matching
the wire protocol wallets and web clients already speak.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from huissier.application.use_cases.authenticate_wallet import AuthenticateWallet
from huissier.application.use_cases.issue_nonce import IssueNonce
from huissier.application.use_cases.issue_sign_in_challenge import (
    IssueSignInChallenge,
    origin_host,
)
from huissier.config.settings import get_settings
from huissier.di.dependencies import (
    commit_request,
    get_authenticate_wallet,
    get_db_session,
    get_issue_nonce,
    get_issue_sign_in_challenge,
)
from huissier.domain.exceptions import RequestError
from huissier.presentation.schemas.auth_schemas import (
    AuthSessionResponse,
    ChallengeResponse,
    ErrorResponse,
    NonceResponse,
    VerifySignatureRequest,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def _read_json(request: Request) -> Dict[str, Any]:
    """Parse request body as a JSON object."""
    raw = await request.body()
    try:
        body = json.loads(raw or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RequestError("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise RequestError("Request body must be a JSON object")
    return body


def _redirect_url(origin: Optional[str]) -> str:
    """Origin of the calling app if allowed, else the configured default."""
    settings = get_settings()
    if origin and origin in settings.CORS_ORIGINS:
        return f"{origin.rstrip('/')}/"
    return settings.DEFAULT_REDIRECT_URL


@router.post(
    "",
    response_model=AuthSessionResponse | NonceResponse,
    responses=ERROR_RESPONSES,
)
async def auth(
    request: Request,
    authenticate_wallet: AuthenticateWallet = Depends(get_authenticate_wallet),
    issue_nonce: IssueNonce = Depends(get_issue_nonce),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Wallet authentication endpoint.

    Actions:
    - getNonce: issue single-use nonce for the sign-message flow
    - verifySignature: verify signed nonce/challenge and return session

    The transaction is committed before a response is built, so a client
    never holds a nonce or session the store did not keep.

    Raises:
        RequestError: Malformed body, missing fields or unknown action (400)
        DecodeError: Undecodable address, signature or message (400)
        AuthFailure: Invalid signature or rejected nonce (401)
    """
    body = await _read_json(request)
    action = body.get("action")

    if action == "getNonce":
        issued = await issue_nonce.execute()
        await commit_request(db)
        return NonceResponse(nonce=issued.nonce, expires_at=issued.expires_at_ms)

    if action == "verifySignature":
        try:
            payload = VerifySignatureRequest.model_validate(body)
        except ValidationError as e:
            fields = sorted(
                {str(error["loc"][0]) for error in e.errors() if error.get("loc")}
            )
            raise RequestError(
                "Missing or invalid fields", details={"fields": fields}
            ) from e

        session = await authenticate_wallet.execute(
            wallet_address=payload.wallet_address,
            signature=payload.signature,
            nonce=payload.nonce,
            signed_message=payload.signed_message,
            redirect_to=_redirect_url(request.headers.get("origin")),
        )
        await commit_request(db)
        return AuthSessionResponse(**session.to_response())

    raise RequestError("Invalid action", details={"action": action})


@router.get(
    "/challenge",
    response_model=ChallengeResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def challenge(
    request: Request,
    issue_challenge: IssueSignInChallenge = Depends(get_issue_sign_in_challenge),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Issue structured Sign-In With Solana challenge.

    The domain is taken from the Origin header, falling back to Host.
    """
    origin = request.headers.get("origin")
    domain = origin_host(origin) if origin else request.headers.get("host", "")

    result = await issue_challenge.execute(domain=domain, uri=origin)
    await commit_request(db)
    return ChallengeResponse(**result.to_dict())
