from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamdraft.db.models.base import Base


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint(
            "tournament_id",
            "phase",
            "match_number",
            name="uq_matches_tournament_phase_number",
        ),
        CheckConstraint(
            "phase IN ('round_robin','semifinal','grandfinal')",
            name="ck_matches_phase",
        ),
        CheckConstraint(
            "status IN ('pending','scheduled','in_progress','completed','disputed','cancelled')",
            name="ck_matches_status",
        ),
        CheckConstraint("best_of IN (1,3,5)", name="ck_matches_best_of"),
        CheckConstraint(
            "team1_score >= 0 AND team2_score >= 0",
            name="ck_matches_scores_non_negative",
        ),
        CheckConstraint(
            "team1_id IS NULL OR team2_id IS NULL OR team1_id <> team2_id",
            name="ck_matches_no_self_pair",
        ),
        Index("idx_matches_tournament_phase_number", "tournament_id", "phase", "match_number"),
        Index("idx_matches_status_scheduled_time", "status", "scheduled_time"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    tournament_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False
    )
    phase: Mapped[str] = mapped_column(String(16), nullable=False)
    round: Mapped[int | None] = mapped_column(Integer, nullable=True)
    match_number: Mapped[int] = mapped_column(Integer, nullable=False)
    team1_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("teams.id"), nullable=True
    )
    team2_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("teams.id"), nullable=True
    )
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    winner_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("teams.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    best_of: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
