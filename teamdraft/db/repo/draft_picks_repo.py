from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.draft_picks import DraftPick


class DraftPicksRepo:
    @staticmethod
    async def create_once(session: AsyncSession, *, pick: DraftPick) -> bool:
        # Both uq_draft_picks_session_pick_number and uq_draft_picks_session_user
        # resolve a lost race to "nothing inserted".
        stmt = (
            insert(DraftPick)
            .values(
                id=pick.id,
                draft_session_id=pick.draft_session_id,
                team_id=pick.team_id,
                user_id=pick.user_id,
                pick_number=pick.pick_number,
                round_number=pick.round_number,
                category=pick.category,
                picked_by=pick.picked_by,
                picked_at=pick.picked_at,
            )
            .on_conflict_do_nothing()
            .returning(DraftPick.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_for_session(
        session: AsyncSession,
        *,
        draft_session_id: UUID,
    ) -> list[DraftPick]:
        stmt = (
            select(DraftPick)
            .where(DraftPick.draft_session_id == draft_session_id)
            .order_by(DraftPick.pick_number.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_by_pick_number(
        session: AsyncSession,
        *,
        draft_session_id: UUID,
        pick_number: int,
    ) -> DraftPick | None:
        stmt = select(DraftPick).where(
            DraftPick.draft_session_id == draft_session_id,
            DraftPick.pick_number == pick_number,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
