"""
Sign-in nonce repository implementation.
"""

from datetime import datetime, timezone

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from huissier.domain.entities.issued_nonce import IssuedNonce
from huissier.domain.exceptions import StoreFailure
from huissier.domain.repositories.i_nonce_repository import INonceRepository
from huissier.infrastructure.persistence.models import SignInNonceModel


class NonceRepository(INonceRepository):
    """
    SQLAlchemy implementation of single-use nonce tracking.

    Consumption is one conditional UPDATE, so two requests presenting the
    same nonce cannot both succeed.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, issued: IssuedNonce) -> IssuedNonce:
        """Record newly issued nonce."""
        model = SignInNonceModel(
            nonce=issued.nonce,
            issued_at=issued.issued_at,
            expires_at=issued.expires_at,
            consumed_at=None,
        )
        try:
            self.session.add(model)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StoreFailure(details=f"nonce insert failed: {e}") from e
        return issued

    async def consume(self, nonce: str) -> bool:
        """Mark nonce used if it is known, unexpired and unused."""
        now = datetime.now(timezone.utc)
        stmt = (
            update(SignInNonceModel)
            .where(
                SignInNonceModel.nonce == nonce,
                SignInNonceModel.consumed_at.is_(None),
                SignInNonceModel.expires_at > now,
            )
            .values(consumed_at=now)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreFailure(details=f"nonce consume failed: {e}") from e
        return result.rowcount == 1

    async def purge_expired(self) -> int:
        """Delete expired nonces."""
        now = datetime.now(timezone.utc)
        stmt = delete(SignInNonceModel).where(SignInNonceModel.expires_at <= now)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreFailure(details=f"nonce purge failed: {e}") from e
        return result.rowcount
