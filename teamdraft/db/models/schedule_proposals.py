from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamdraft.db.models.base import Base


class ScheduleProposal(Base):
    __tablename__ = "schedule_proposals"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending','approved','rejected','countered','expired')",
            name="ck_schedule_proposals_status",
        ),
        CheckConstraint(
            "responded_by IS NULL OR responded_by <> proposed_by",
            name="ck_schedule_proposals_responder_not_proposer",
        ),
        Index(
            "uq_schedule_proposals_pending_match_proposer",
            "match_id",
            "proposed_by",
            unique=True,
            postgresql_where=text("status = 'pending'"),
        ),
        Index("idx_schedule_proposals_status_time", "status", "proposed_time"),
        Index("idx_schedule_proposals_match_created", "match_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    match_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("matches.id", ondelete="CASCADE"), nullable=False
    )
    proposed_by: Mapped[str] = mapped_column(String(64), nullable=False)
    proposed_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
