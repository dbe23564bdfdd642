from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select, text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.matches import Match
from teamdraft.db.models.schedule_proposals import ScheduleProposal


class ScheduleProposalsRepo:
    @staticmethod
    async def create_pending_once(session: AsyncSession, *, proposal: ScheduleProposal) -> bool:
        stmt = (
            insert(ScheduleProposal)
            .values(
                id=proposal.id,
                match_id=proposal.match_id,
                proposed_by=proposal.proposed_by,
                proposed_time=proposal.proposed_time,
                status=proposal.status,
                notes=proposal.notes,
                response_notes=None,
                responded_by=None,
                responded_at=None,
                created_at=proposal.created_at,
            )
            .on_conflict_do_nothing(
                index_elements=[ScheduleProposal.match_id, ScheduleProposal.proposed_by],
                index_where=text("status = 'pending'"),
            )
            .returning(ScheduleProposal.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_by_id(session: AsyncSession, proposal_id: UUID) -> ScheduleProposal | None:
        return await session.get(ScheduleProposal, proposal_id)

    @staticmethod
    async def get_by_id_for_update(
        session: AsyncSession,
        proposal_id: UUID,
    ) -> ScheduleProposal | None:
        stmt = (
            select(ScheduleProposal)
            .where(ScheduleProposal.id == proposal_id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_match(session: AsyncSession, *, match_id: UUID) -> list[ScheduleProposal]:
        stmt = (
            select(ScheduleProposal)
            .where(ScheduleProposal.match_id == match_id)
            .order_by(ScheduleProposal.created_at.desc(), ScheduleProposal.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_pending_due_for_update(
        session: AsyncSession,
        *,
        now_utc: datetime,
        limit: int,
    ) -> list[ScheduleProposal]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(ScheduleProposal)
            .where(
                ScheduleProposal.status == "pending",
                ScheduleProposal.proposed_time <= now_utc,
            )
            .order_by(ScheduleProposal.proposed_time.asc())
            .limit(resolved_limit)
            .with_for_update(skip_locked=True)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def delete_for_tournament(session: AsyncSession, *, tournament_id: UUID) -> int:
        match_ids = select(Match.id).where(Match.tournament_id == tournament_id)
        stmt = (
            delete(ScheduleProposal)
            .where(ScheduleProposal.match_id.in_(match_ids))
            .returning(ScheduleProposal.id)
        )
        result = await session.execute(stmt)
        return len(result.scalars().all())
