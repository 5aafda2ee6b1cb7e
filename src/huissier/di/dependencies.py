"""
FastAPI dependency injection.

Provides dependencies for FastAPI routes using the DI container.
"""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from huissier.application.use_cases.authenticate_wallet import AuthenticateWallet
from huissier.application.use_cases.issue_nonce import IssueNonce
from huissier.application.use_cases.issue_sign_in_challenge import (
    IssueSignInChallenge,
)
from huissier.di.container import get_container
from huissier.domain.exceptions import StoreFailure
from huissier.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

# ================================================================
# Database Dependencies
# ================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session dependency.

    Yields async database session from container. Routes commit through
    `commit_request` before they build a response; the session context
    rolls back whatever is left if the route raises.
    """
    container = get_container()
    async with container.database.session() as session:
        yield session


async def commit_request(session: AsyncSession) -> None:
    """
    Commit the request transaction.

    Dependency teardown runs after the response is sent, so a commit there
    could fail behind a success response. Routes call this first instead.

    Raises:
        StoreFailure: If the commit fails (retryable)
    """
    try:
        await session.commit()
    except SQLAlchemyError as e:
        logger.warning(f"Request commit failed: {type(e).__name__}")
        raise StoreFailure(details="commit failed") from e


# ================================================================
# Use Case Dependencies
# ================================================================


def get_issue_nonce(
    session: AsyncSession = Depends(get_db_session),
) -> IssueNonce:
    """Get IssueNonce use case dependency."""
    return get_container().get_issue_nonce(session)


def get_issue_sign_in_challenge(
    session: AsyncSession = Depends(get_db_session),
) -> IssueSignInChallenge:
    """Get IssueSignInChallenge use case dependency."""
    return get_container().get_issue_sign_in_challenge(session)


def get_authenticate_wallet(
    session: AsyncSession = Depends(get_db_session),
) -> AuthenticateWallet:
    """Get AuthenticateWallet use case dependency."""
    return get_container().get_authenticate_wallet(session)
