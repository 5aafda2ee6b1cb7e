"""
Unit tests for the huissier CLI.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from huissier.cli import main
from huissier.domain.entities.issued_nonce import IssuedNonce
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.repositories.nonce_repository import (
    NonceRepository,
)


class TestCli:
    """Tests for CLI commands."""

    def test_init_db(self, test_settings, tmp_path, capsys):
        """Test init-db creates the database file and tables."""
        db_path = tmp_path / "huissier.db"

        url = f"sqlite+aiosqlite:///{db_path}"

        exit_code = main(["init-db", "--database-url", url])

        assert exit_code == 0
        assert db_path.exists()
        assert "Database tables created" in capsys.readouterr().out

    def test_purge_nonces(self, test_settings, tmp_path, capsys):
        """Test purge-nonces deletes only expired nonces."""
        url = f"sqlite+aiosqlite:///{tmp_path / 'huissier.db'}"
        assert main(["init-db", "--database-url", url]) == 0

        async def seed():
            database = Database(database_url=url)
            await database.connect()
            past = datetime.now(timezone.utc) - timedelta(minutes=10)
            async with database.session() as session:
                repository = NonceRepository(session)
                await repository.add(
                    IssuedNonce(nonce="expiredNonce", issued_at=past, expires_at=past)
                )
                await repository.add(IssuedNonce.issue("freshNonce12", 300))
            await database.disconnect()

        asyncio.run(seed())

        exit_code = main(["purge-nonces", "--database-url", url])

        assert exit_code == 0
        assert "Purged 1 expired nonces" in capsys.readouterr().out

    def test_command_required(self):
        """Test running without a command is a usage error."""
        with pytest.raises(SystemExit):
            main([])

    def test_sign_in_requires_keypair(self):
        """Test sign-in without --keypair is a usage error."""
        with pytest.raises(SystemExit):
            main(["sign-in"])
