"""
Discogs schema tool - Entry Point

Run with: python -m discogs_schema <command>
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from asyncpg.exceptions import PostgresError
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from discogs_schema.core.config import Settings
from discogs_schema.core.exceptions import DiscogsSchemaException, SchemaMismatchError
from discogs_schema.models.tables import SchemaVariant
from discogs_schema.services import schema
from discogs_schema.services.database import build_engine, check_connection

logger = logging.getLogger("discogs_schema")

# CLI flag -> Settings field
_DB_OPTIONS = {
    "database_url": "DATABASE_URL",
    "db_host": "DB_HOST",
    "db_port": "DB_PORT",
    "db_user": "DB_USER",
    "db_password": "DB_PASSWORD",
    "db_name": "DB_NAME",
}


def setup_logging(verbose: bool = False, sql_echo: bool = False) -> None:
    """Configure logging for the command line."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # SQL_ECHO turns the engine log on explicitly
    if not sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="discogs-schema",
        description="Create, drop and verify the Discogs release tables",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Extra .env file to load before reading settings",
    )
    parser.add_argument("--database-url", type=str, help="Full database URL (overrides --db-*)")
    parser.add_argument("--db-host", type=str, help="Database host (default: localhost)")
    parser.add_argument("--db-port", type=int, help="Database port (default: 5432)")
    parser.add_argument("--db-user", type=str, help="Database user (default: dev)")
    parser.add_argument("--db-password", type=str, help="Database password (default: dev_pass)")
    parser.add_argument("--db-name", type=str, help="Database name (default: discogs)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Drop and recreate the tables")
    init_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Create the superseded three-table layout",
    )
    init_parser.add_argument(
        "--create-indexes",
        action="store_true",
        help="Also create release_id lookup indexes",
    )

    drop_parser = subparsers.add_parser("drop", help="Drop all tables")
    drop_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )

    verify_parser = subparsers.add_parser("verify", help="Compare the live tables with the declared ones")
    verify_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Verify against the three-table layout",
    )

    subparsers.add_parser("check", help="Test the database connection")

    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    if args.env_file:
        load_dotenv(args.env_file, override=True)
    overrides = {
        field: getattr(args, option)
        for option, field in _DB_OPTIONS.items()
        if getattr(args, option) is not None
    }
    # --db-* flags beat a DATABASE_URL coming from the environment or .env
    if overrides and "DATABASE_URL" not in overrides:
        overrides["DATABASE_URL"] = None
    return Settings(**overrides)


def _variant(args: argparse.Namespace) -> SchemaVariant:
    return SchemaVariant.LEGACY if getattr(args, "legacy", False) else SchemaVariant.CURRENT


def confirm(prompt: str) -> bool:
    answer = input(f"{prompt} (y/n): ")
    return answer.strip().lower() == 'y'


async def run_command(args: argparse.Namespace, config: Settings) -> int:
    engine = build_engine(config)
    try:
        if args.command == "init":
            await schema.reset_schema(engine, _variant(args), create_indexes=args.create_indexes)
        elif args.command == "drop":
            await schema.drop_tables(engine)
            print("Tables dropped successfully.")
        elif args.command == "verify":
            differences = await schema.verify_schema(engine, _variant(args))
            for difference in differences:
                print(difference)
            if differences:
                return 1
            print("Schema matches.")
        elif args.command == "check":
            print(await check_connection(engine))
        return 0
    finally:
        await engine.dispose()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_settings(args)
    setup_logging(args.verbose, config.SQL_ECHO)

    if args.command == "drop" and not args.yes:
        print("This will permanently delete the release tables and their data.")
        if not confirm("Are you sure you want to continue?"):
            print("Operation cancelled.")
            return 0

    try:
        return asyncio.run(run_command(args, config))
    except SchemaMismatchError as e:
        for difference in e.differences:
            logger.error(f"Schema difference: {difference}")
        return 1
    except DiscogsSchemaException as e:
        logger.error(e.detail)
        return 1
    # asyncpg raises connect and auth failures without SQLAlchemy wrapping them
    except (SQLAlchemyError, PostgresError, OSError) as e:
        logger.error(f"Database error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
