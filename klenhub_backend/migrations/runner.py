"""Programmatic access to the Alembic migrations.

Run directly to bring the database up to date::

    python -m klenhub_backend.migrations.runner [revision]
"""
import asyncio
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from klenhub_backend.core.config import settings
from klenhub_backend.core.logger import get_component_logger

MIGRATIONS_DIR = Path(__file__).resolve().parent

logger = get_component_logger("migrations")


def build_config(url: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option(
        "sqlalchemy.url", (url or settings.db_url).replace("%", "%%")
    )
    return config


def upgrade(revision: str = "head", url: str | None = None) -> None:
    logger.info("upgrading database to %s", revision)
    command.upgrade(build_config(url), revision)


def downgrade(revision: str = "-1", url: str | None = None) -> None:
    logger.info("downgrading database to %s", revision)
    command.downgrade(build_config(url), revision)


async def _current_revision(url: str) -> str | None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            return await connection.run_sync(
                lambda sync_conn: MigrationContext.configure(
                    sync_conn
                ).get_current_revision()
            )
    finally:
        await engine.dispose()


def current(url: str | None = None) -> str | None:
    """Return the revision the database is at, or None if it is unversioned."""
    return asyncio.run(_current_revision(url or settings.db_url))


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    revision = args[0] if args else "head"
    try:
        upgrade(revision)
    except Exception as e:
        logger.exception("migration to %s failed", revision)
        print(f"Migration failed: {e}", file=sys.stderr)
        return 1
    logger.info("migration to %s completed successfully", revision)
    print("Migration completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
