from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamdraft.db.models.base import Base


class DraftSession(Base):
    __tablename__ = "draft_sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('waiting_for_captains','in_progress','completed')",
            name="ck_draft_sessions_status",
        ),
        CheckConstraint(
            "current_category IS NULL OR current_category IN ('A-Tier','B-Tier','Misc')",
            name="ck_draft_sessions_current_category",
        ),
        CheckConstraint(
            "current_round >= 1 AND category_pick_count >= 0",
            name="ck_draft_sessions_counters",
        ),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    tournament_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    current_category: Mapped[str | None] = mapped_column(String(16), nullable=True)
    current_round: Mapped[int] = mapped_column(Integer, nullable=False)
    category_pick_count: Mapped[int] = mapped_column(Integer, nullable=False)
    pick_timer_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
