"""
Huissier CLI.

Provides commands for:
- Running the API server
- Creating database tables
- Purging expired sign-in nonces
- Signing in with a local Solana keypair
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

from huissier.application.use_cases.purge_expired_nonces import PurgeExpiredNonces
from huissier.client.api_client import HuissierClient
from huissier.client.orchestrator import SignInOrchestrator
from huissier.client.session_cache import FileSessionCache, InMemorySessionCache
from huissier.client.wallet import KeypairWallet
from huissier.config.settings import get_settings
from huissier.infrastructure.monitoring import setup_logging
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import Base
from huissier.infrastructure.persistence.repositories.nonce_repository import (
    NonceRepository,
)


async def init_db(database_url: Optional[str] = None) -> int:
    """
    Create all tables.

    Args:
        database_url: Override DATABASE_URL

    Returns:
        Exit code (0 = success)
    """
    settings = get_settings()
    database = Database(
        database_url=database_url or settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
    )
    await database.connect()
    try:
        await database.create_tables(Base.metadata)
    finally:
        await database.disconnect()

    print("Database tables created")
    return 0


async def purge_nonces(database_url: Optional[str] = None) -> int:
    """
    Delete expired sign-in nonces once.

    For deployments that run the purge from cron instead of the server's
    periodic task.

    Returns:
        Exit code (0 = success)
    """
    settings = get_settings()
    database = Database(
        database_url=database_url or settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
    )
    await database.connect()
    try:
        async with database.session() as session:
            purged = await PurgeExpiredNonces(NonceRepository(session)).execute()
    finally:
        await database.disconnect()

    print(f"Purged {purged} expired nonces")
    return 0


async def sign_in(args: argparse.Namespace) -> int:
    """
    Sign in with keypair file and print the session.

    Returns:
        Exit code (0 = authenticated, 1 = any other terminal state)
    """
    wallet = KeypairWallet.from_keypair_file(
        args.keypair, supports_sign_in=not args.legacy
    )
    cache = FileSessionCache(args.cache) if args.cache else InMemorySessionCache()

    api = HuissierClient(args.url, timeout=args.timeout, origin=args.origin)
    async with api:
        orchestrator = SignInOrchestrator(
            api,
            wallet,
            session_cache=cache,
            signing_timeout=args.signing_timeout,
        )
        result = await orchestrator.sign_in()

    output = {
        "state": result.state.value,
        "attempts": result.attempts,
    }
    if result.session:
        output.update(result.session.to_response())
    if result.error:
        output["error"] = {"code": result.error.code, "message": result.error.message}

    print(json.dumps(output, indent=2))
    return 0 if result.succeeded else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="huissier",
        description="Wallet-signature sign-in service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  huissier serve                                  # Run API server
  huissier init-db                                # Create tables
  huissier purge-nonces                           # Drop expired nonces
  huissier sign-in --keypair ~/.config/solana/id.json
  huissier sign-in --keypair id.json --legacy     # Sign bare nonce
        """,
    )

    subparsers = parser.add_subparsers(
        dest="command", help="Command to run", required=True
    )

    # Serve command
    _ = subparsers.add_parser("serve", help="Run the API server")

    # Init DB command
    init_parser = subparsers.add_parser("init-db", help="Create database tables")
    init_parser.add_argument(
        "--database-url", default=None, help="Override DATABASE_URL"
    )

    # Purge nonces command
    purge_parser = subparsers.add_parser(
        "purge-nonces", help="Delete expired sign-in nonces"
    )
    purge_parser.add_argument(
        "--database-url", default=None, help="Override DATABASE_URL"
    )

    # Sign-in command
    sign_in_parser = subparsers.add_parser(
        "sign-in", help="Sign in with a Solana keypair file"
    )
    sign_in_parser.add_argument(
        "--keypair", required=True, help="Solana CLI keypair JSON file"
    )
    sign_in_parser.add_argument(
        "--url", default="http://localhost:8000", help="Huissier base URL"
    )
    sign_in_parser.add_argument(
        "--origin",
        default="http://localhost:3000",
        help="Origin header (must be in the server's CORS allow-list)",
    )
    sign_in_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Sign the bare nonce instead of a Sign-In With Solana message",
    )
    sign_in_parser.add_argument(
        "--cache", default=None, help="Persist session to this JSON file"
    )
    sign_in_parser.add_argument(
        "--timeout", type=float, default=10.0, help="HTTP timeout in seconds"
    )
    sign_in_parser.add_argument(
        "--signing-timeout",
        type=float,
        default=None,
        help="Seconds to wait for signing (default: SIGNING_TIMEOUT_SECONDS)",
    )

    # Global options
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    if args.command == "serve":
        from huissier.main import main as serve

        serve()
        return 0

    setup_logging(level="DEBUG" if args.verbose else "WARNING", json_logs=False)

    if args.command == "init-db":
        return asyncio.run(init_db(args.database_url))

    if args.command == "purge-nonces":
        return asyncio.run(purge_nonces(args.database_url))

    if args.command == "sign-in":
        if args.signing_timeout is None:
            args.signing_timeout = get_settings().SIGNING_TIMEOUT_SECONDS
        return asyncio.run(sign_in(args))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
