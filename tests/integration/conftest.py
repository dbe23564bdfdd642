from __future__ import annotations

import pytest
from sqlalchemy import text

from teamdraft.core.integration_db_safety import ensure_test_database_url
from teamdraft.db.schema import create_schema
from teamdraft.db.session import engine

TRUNCATE_TABLES = (
    "schedule_proposals",
    "matches",
    "draft_events",
    "draft_picks",
    "draft_sessions",
    "team_members",
    "teams",
    "player_categories",
    "registrations",
    "tournaments",
)

TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(TRUNCATE_TABLES)} CASCADE"


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    ensure_test_database_url(engine.url.render_as_string(hide_password=False))


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    # Pooled asyncpg connections must not cross event loops between tests.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    await create_schema()
    async with engine.begin() as conn:
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()
