from __future__ import annotations

import asyncio
import re

import asyncpg
import structlog
from sqlalchemy.engine import make_url

from teamdraft.core.config import get_settings
from teamdraft.core.logging import configure_logging
from teamdraft.db.schema import create_schema
from teamdraft.db.session import dispose_engine

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

logger = structlog.get_logger("scripts.ensure_test_db")


def _check_database_name(database_name: str) -> None:
    if "test" not in database_name.lower():
        raise RuntimeError(f"refusing to create '{database_name}': the name must contain 'test'")
    if IDENTIFIER_RE.fullmatch(database_name) is None:
        raise RuntimeError(f"unsupported database name '{database_name}'")


async def ensure_database(database_url: str) -> bool:
    """Create the test database when missing. Returns ``True`` when it was created."""
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    if url.get_backend_name() != "postgresql":
        raise RuntimeError("only PostgreSQL DATABASE_URL values are supported")
    if not database_name:
        raise RuntimeError("DATABASE_URL has no database name")
    if url.username is None:
        raise RuntimeError("DATABASE_URL has no username")
    _check_database_name(database_name)

    conn = await asyncpg.connect(
        host=url.host or "localhost",
        port=int(url.port or 5432),
        user=url.username,
        password=url.password,
        database="postgres",
    )
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", database_name)
        if exists:
            logger.info("test_database_exists", database=database_name)
            return False
        await conn.execute(f'CREATE DATABASE "{database_name}"')
        logger.info("test_database_created", database=database_name)
        return True
    finally:
        await conn.close()


async def _prepare(database_url: str) -> None:
    await ensure_database(database_url)
    try:
        await create_schema()
    finally:
        await dispose_engine()


def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)
    asyncio.run(_prepare(settings.database_url))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
