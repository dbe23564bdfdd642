from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamdraft.db.models.base import Base


class Tournament(Base):
    __tablename__ = "tournaments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft','registration_open','registration_closed','categorizing',"
            "'awaiting_captain_ranking','draft_ready','draft_in_progress','teams_finalized',"
            "'in_progress','completed')",
            name="ck_tournaments_status",
        ),
        CheckConstraint("format IN ('round_robin_gf')", name="ck_tournaments_format"),
        CheckConstraint("team_size = 3", name="ck_tournaments_team_size"),
        CheckConstraint(
            "cardinality(map_pool) >= 3",
            name="ck_tournaments_map_pool_min_size",
        ),
        Index("idx_tournaments_admin_created", "admin_id", "created_at"),
        Index("idx_tournaments_status_created", "status", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    format: Mapped[str] = mapped_column(String(32), nullable=False)
    team_size: Mapped[int] = mapped_column(Integer, nullable=False)
    map_pool: Mapped[list[str]] = mapped_column(ARRAY(String(64)), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
