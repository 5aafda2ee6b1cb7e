"""
Authentication API schemas.

Wire names are camelCase; Python attributes are snake_case.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)


# ================================================================
# Request Schemas
# ================================================================


class VerifySignatureRequest(CamelModel):
    """Request to verify wallet signature and sign in."""

    action: Literal["verifySignature"] = "verifySignature"
    wallet_address: str = Field(
        ...,
        alias="walletAddress",
        min_length=1,
        description="Solana wallet address (base58)",
    )
    signature: str = Field(..., min_length=1, description="Signature (base64)")
    nonce: str = Field(..., min_length=1, description="Issued nonce")
    signed_message: Optional[str] = Field(
        None,
        alias="signedMessage",
        description="Exact signed bytes (base64); UTF-8 nonce if omitted",
    )


# ================================================================
# Response Schemas
# ================================================================


class AuthSessionResponse(CamelModel):
    """Successful sign-in. Every field is required."""

    user_id: str = Field(..., alias="userId")
    token: str = Field(...)
    wallet_address: str = Field(..., alias="walletAddress")


class NonceResponse(CamelModel):
    """Legacy nonce with expiry in epoch milliseconds."""

    nonce: str
    expires_at: int = Field(..., alias="expiresAt")


class ChallengeResponse(CamelModel):
    """Structured Sign-In With Solana input."""

    domain: str
    statement: str
    version: str
    nonce: str
    chain_id: str = Field(..., alias="chainId")
    issued_at: str = Field(..., alias="issuedAt")
    expiration_time: Optional[str] = Field(None, alias="expirationTime")
    resources: List[str] = Field(default_factory=list)
    uri: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error payload for every failed request."""

    error: str
    code: str
    details: Optional[object] = None
