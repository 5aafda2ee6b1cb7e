"""
Async engine and session lifecycle for the identity and nonce tables.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import MetaData, event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from huissier.infrastructure.monitoring import get_logger

logger = get_logger(__name__)


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy own BEGIN so SAVEPOINT works on the sqlite driver."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """
    Owns the engine and hands out transactional sessions.

    PostgreSQL (asyncpg) in deployments; SQLite (aiosqlite) for tests and
    local runs. One instance lives in the DI container.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_timeout: float = 30,
        pool_recycle: int = 3600,
    ):
        """
        Args:
            database_url: Async SQLAlchemy URL (asyncpg or aiosqlite)
            echo: Log emitted SQL
            pool_size: Persistent PostgreSQL connections
            max_overflow: Extra connections allowed under load
            pool_timeout: Checkout wait in seconds before failing
            pool_recycle: Connection lifetime in seconds
        """
        self.database_url = database_url
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker | None = None

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def _engine_options(self) -> Dict[str, Any]:
        if self.is_sqlite:
            # In-memory SQLite must share one connection across sessions
            options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.database_url or "mode=memory" in self.database_url:
                options["poolclass"] = StaticPool
            return options

        return {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
            "pool_recycle": self.pool_recycle,
            "pool_pre_ping": True,
            "connect_args": {
                "server_settings": {
                    "application_name": "huissier",
                }
            },
        }

    async def connect(self) -> None:
        """Create engine and session factory; no-op when connected."""
        if self._engine is not None:
            return

        self._engine = create_async_engine(
            self.database_url,
            echo=self.echo,
            **self._engine_options(),
        )

        if self.is_sqlite:
            _enable_sqlite_savepoints(self._engine)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def disconnect(self) -> None:
        """Dispose engine and release pooled connections."""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    async def create_tables(self, metadata: MetaData) -> None:
        """Create all tables in metadata (idempotent)."""
        async with self._require_engine().begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def drop_tables(self, metadata: MetaData) -> None:
        """Drop all tables in metadata."""
        async with self._require_engine().begin() as conn:
            await conn.run_sync(metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session scoped to one transaction.

        Commits when the block exits normally and rolls back when it
        raises, so nonce consumption and identity creation are undone
        together.
        """
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Return True when a trivial query succeeds."""
        if self._engine is None:
            return False

        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False
