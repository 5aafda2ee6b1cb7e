"""
Dependency Injection Container for Huissier.

Manages all service instances and their dependencies.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from huissier.application.use_cases.authenticate_wallet import AuthenticateWallet
from huissier.application.use_cases.issue_nonce import IssueNonce
from huissier.application.use_cases.issue_session import IssueSession
from huissier.application.use_cases.issue_sign_in_challenge import (
    IssueSignInChallenge,
)
from huissier.application.use_cases.purge_expired_nonces import PurgeExpiredNonces
from huissier.application.use_cases.resolve_identity import ResolveIdentity
from huissier.config.settings import get_settings
from huissier.domain.repositories.i_identity_repository import IIdentityRepository
from huissier.domain.repositories.i_nonce_repository import INonceRepository
from huissier.domain.services.i_identity_backend import IIdentityBackend
from huissier.domain.services.i_signature_verifier import ISignatureVerifier
from huissier.infrastructure.auth.ed25519_verifier import Ed25519SignatureVerifier
from huissier.infrastructure.identity.local_identity_backend import (
    LocalIdentityBackend,
)
from huissier.infrastructure.identity.supabase_identity_backend import (
    SupabaseIdentityBackend,
)
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import Base
from huissier.infrastructure.persistence.repositories.identity_repository import (
    IdentityRepository,
)
from huissier.infrastructure.persistence.repositories.nonce_repository import (
    NonceRepository,
)


class DIContainer:
    """
    Dependency Injection Container.

    Manages singleton instances of services. Repositories and use cases are
    session-scoped and built per request.
    """

    def __init__(self):
        """Initialize container with None instances."""
        # Infrastructure
        self._database: Optional[Database] = None

        # Domain Services
        self._signature_verifier: Optional[ISignatureVerifier] = None
        self._identity_backend: Optional[IIdentityBackend] = None

    async def initialize(self, create_tables: bool = True) -> None:
        """Connect database and make sure tables exist."""
        await self.database.connect()
        if create_tables:
            await self.database.create_tables(Base.metadata)

    async def shutdown(self) -> None:
        """Cleanup resources and close connections."""
        if self._identity_backend:
            await self._identity_backend.close()
            self._identity_backend = None

        if self._database:
            await self._database.disconnect()

    # Infrastructure Getters

    @property
    def database(self) -> Database:
        """Get database instance."""
        if self._database is None:
            settings = get_settings()
            self._database = Database(
                database_url=settings.DATABASE_URL,
                echo=settings.DATABASE_ECHO,
                pool_timeout=settings.DATABASE_TIMEOUT,
            )
        return self._database

    # Service Getters

    @property
    def signature_verifier(self) -> ISignatureVerifier:
        """Get signature verifier (stateless singleton)."""
        if self._signature_verifier is None:
            self._signature_verifier = Ed25519SignatureVerifier()
        return self._signature_verifier

    @property
    def identity_backend(self) -> IIdentityBackend:
        """Get identity backend selected by IDENTITY_BACKEND."""
        if self._identity_backend is None:
            settings = get_settings()
            if settings.IDENTITY_BACKEND == "supabase":
                self._identity_backend = SupabaseIdentityBackend(
                    supabase_url=settings.SUPABASE_URL,
                    service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY,
                    timeout=settings.BACKEND_TIMEOUT,
                )
            else:
                self._identity_backend = LocalIdentityBackend(
                    secret_key=settings.JWT_SECRET_KEY,
                    algorithm=settings.JWT_ALGORITHM,
                    ttl_minutes=settings.SESSION_TTL_MINUTES,
                )
        return self._identity_backend

    # Repository Getters

    def get_identity_repository(self, session: AsyncSession) -> IIdentityRepository:
        """Get session-scoped identity repository."""
        return IdentityRepository(session)

    def get_nonce_repository(self, session: AsyncSession) -> INonceRepository:
        """Get session-scoped nonce repository."""
        return NonceRepository(session)

    # Use Case Getters

    def get_issue_nonce(self, session: AsyncSession) -> IssueNonce:
        """Get issue nonce use case."""
        settings = get_settings()
        return IssueNonce(
            nonce_repository=self.get_nonce_repository(session),
            nonce_length=settings.NONCE_LENGTH,
            ttl_seconds=settings.NONCE_TTL_SECONDS,
        )

    def get_issue_sign_in_challenge(
        self, session: AsyncSession
    ) -> IssueSignInChallenge:
        """Get issue sign-in challenge use case."""
        settings = get_settings()
        return IssueSignInChallenge(
            nonce_repository=self.get_nonce_repository(session),
            allowed_origins=settings.CORS_ORIGINS,
            statement=settings.SIWS_STATEMENT,
            version=settings.SIWS_VERSION,
            chain_id=settings.SIWS_CHAIN_ID,
            resources=settings.SIWS_RESOURCES,
            nonce_length=settings.NONCE_LENGTH,
            ttl_seconds=settings.NONCE_TTL_SECONDS,
        )

    def get_authenticate_wallet(self, session: AsyncSession) -> AuthenticateWallet:
        """
        Get authenticate wallet use case with session-scoped repositories.

        Nonce consumption and identity creation share the given session, so
        they commit or roll back together.

        Args:
            session: Active database session

        Returns:
            AuthenticateWallet use case instance
        """
        settings = get_settings()
        return AuthenticateWallet(
            signature_verifier=self.signature_verifier,
            nonce_repository=self.get_nonce_repository(session),
            resolve_identity=ResolveIdentity(
                identity_repository=self.get_identity_repository(session),
                identity_backend=self.identity_backend,
            ),
            issue_session=IssueSession(identity_backend=self.identity_backend),
            require_issued_nonce=settings.REQUIRE_ISSUED_NONCE,
            allowed_origins=settings.CORS_ORIGINS,
        )

    def get_purge_expired_nonces(self, session: AsyncSession) -> PurgeExpiredNonces:
        """Get purge expired nonces use case."""
        return PurgeExpiredNonces(nonce_repository=self.get_nonce_repository(session))

    async def purge_expired_nonces(self) -> int:
        """Purge expired nonces in a transaction of its own."""
        async with self.database.session() as session:
            return await self.get_purge_expired_nonces(session).execute()


_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global DI container instance."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


async def initialize_container() -> DIContainer:
    """Initialize and return DI container."""
    container = get_container()
    await container.initialize()
    return container


async def shutdown_container() -> None:
    """Shutdown DI container."""
    global _container
    if _container is not None:
        await _container.shutdown()
        _container = None
