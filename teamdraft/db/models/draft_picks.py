from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamdraft.db.models.base import Base


class DraftPick(Base):
    __tablename__ = "draft_picks"
    __table_args__ = (
        UniqueConstraint(
            "draft_session_id",
            "pick_number",
            name="uq_draft_picks_session_pick_number",
        ),
        UniqueConstraint("draft_session_id", "user_id", name="uq_draft_picks_session_user"),
        CheckConstraint("pick_number >= 0", name="ck_draft_picks_pick_number_non_negative"),
        CheckConstraint("round_number >= 1", name="ck_draft_picks_round_number_positive"),
        CheckConstraint(
            "category IN ('A-Tier','B-Tier','Misc')",
            name="ck_draft_picks_category",
        ),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    draft_session_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("draft_sessions.id", ondelete="CASCADE"), nullable=False
    )
    team_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    pick_number: Mapped[int] = mapped_column(Integer, nullable=False)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(16), nullable=False)
    picked_by: Mapped[str] = mapped_column(String(64), nullable=False)
    picked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
