from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamdraft.db.models.base import Base


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("tournament_id", "user_id", name="uq_registrations_tournament_user"),
        CheckConstraint(
            "preferred_position IN ('flank','pocket','any')",
            name="ck_registrations_preferred_position",
        ),
        CheckConstraint("status IN ('approved')", name="ck_registrations_status"),
        Index("idx_registrations_tournament_registered", "tournament_id", "registered_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    tournament_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    profile_url: Mapped[str] = mapped_column(String(512), nullable=False)
    preferred_position: Mapped[str] = mapped_column(String(16), nullable=False)
    preferred_civs_flank: Mapped[list[str]] = mapped_column(ARRAY(String(64)), nullable=False)
    preferred_civs_pocket: Mapped[list[str]] = mapped_column(ARRAY(String(64)), nullable=False)
    preferred_maps: Mapped[list[str]] = mapped_column(ARRAY(String(64)), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
