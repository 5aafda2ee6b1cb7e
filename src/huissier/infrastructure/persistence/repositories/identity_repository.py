"""
Identity repository implementation.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from huissier.domain.entities.identity import Identity
from huissier.domain.exceptions import StoreFailure
from huissier.domain.repositories.i_identity_repository import IIdentityRepository
from huissier.infrastructure.monitoring import get_logger
from huissier.infrastructure.persistence.models import IdentityModel

logger = get_logger(__name__)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes returned by SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class IdentityRepository(IIdentityRepository):
    """
    SQLAlchemy implementation of identity repository.

    Store errors surface as StoreFailure so callers can retry them.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_wallet(self, wallet_address: str) -> Optional[Identity]:
        """Get identity by wallet address."""
        try:
            return await self._fetch_by_wallet(wallet_address)
        except SQLAlchemyError as e:
            raise StoreFailure(details=f"identity lookup failed: {e}") from e

    async def get_by_id(self, identity_id: str) -> Optional[Identity]:
        """Get identity by ID."""
        try:
            stmt = select(IdentityModel).where(IdentityModel.id == identity_id)
            result = await self.session.execute(stmt)
            model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreFailure(details=f"identity lookup failed: {e}") from e
        return self._to_entity(model) if model else None

    async def create_or_get(self, identity: Identity) -> Identity:
        """
        Insert identity inside a savepoint.

        A uniqueness violation means a concurrent sign-in created the row
        first; the savepoint is rolled back and the winning row returned.
        """
        model = IdentityModel(
            id=identity.id,
            wallet_address=identity.wallet_address,
            login_email=identity.login_email,
            created_at=identity.created_at,
        )

        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError:
            logger.info(
                "Identity insert lost race, re-resolving",
                extra={"wallet": identity.wallet_address[:8]},
            )
            existing = await self.get_by_wallet(identity.wallet_address)
            if existing is None:
                raise StoreFailure(
                    details="identity conflict but existing row not visible"
                )
            return existing
        except SQLAlchemyError as e:
            raise StoreFailure(details=f"identity insert failed: {e}") from e

        return self._to_entity(model)

    async def _fetch_by_wallet(self, wallet_address: str) -> Optional[Identity]:
        """Fetch identity by wallet from database."""
        stmt = select(IdentityModel).where(
            IdentityModel.wallet_address == wallet_address
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    def _to_entity(self, model: IdentityModel) -> Identity:
        """
        Convert IdentityModel to Identity entity.

        Args:
            model: SQLAlchemy model

        Returns:
            Identity domain entity
        """
        return Identity(
            id=model.id,
            wallet_address=model.wallet_address,
            login_email=model.login_email,
            created_at=as_utc(model.created_at),
        )
