from __future__ import annotations

import structlog

import teamdraft.db.models  # noqa: F401
from teamdraft.db.models.base import Base
from teamdraft.db.session import engine

logger = structlog.get_logger(__name__)


async def create_schema() -> None:
    """Create missing tables, constraints and indexes from the model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_schema_ensured", tables_total=len(Base.metadata.tables))
