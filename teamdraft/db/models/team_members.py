from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamdraft.db.models.base import Base


class TeamMember(Base):
    __tablename__ = "team_members"
    __table_args__ = (
        CheckConstraint(
            "category_when_drafted IN ('S-Tier','A-Tier','B-Tier','Misc')",
            name="ck_team_members_category",
        ),
        CheckConstraint(
            "draft_round >= 0 AND draft_pick_number >= 0",
            name="ck_team_members_draft_position_non_negative",
        ),
    )

    team_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    is_captain: Mapped[bool] = mapped_column(Boolean, nullable=False)
    category_when_drafted: Mapped[str] = mapped_column(String(16), nullable=False)
    draft_round: Mapped[int] = mapped_column(Integer, nullable=False)
    draft_pick_number: Mapped[int] = mapped_column(Integer, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
