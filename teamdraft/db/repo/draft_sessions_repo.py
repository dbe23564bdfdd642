from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.draft_sessions import DraftSession


class DraftSessionsRepo:
    @staticmethod
    async def create_once(session: AsyncSession, *, draft_session: DraftSession) -> bool:
        stmt = (
            insert(DraftSession)
            .values(
                id=draft_session.id,
                tournament_id=draft_session.tournament_id,
                status=draft_session.status,
                current_category=draft_session.current_category,
                current_round=draft_session.current_round,
                category_pick_count=draft_session.category_pick_count,
                pick_timer_seconds=draft_session.pick_timer_seconds,
                created_at=draft_session.created_at,
                started_at=draft_session.started_at,
                completed_at=draft_session.completed_at,
            )
            .on_conflict_do_nothing(index_elements=[DraftSession.tournament_id])
            .returning(DraftSession.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_by_tournament_id(
        session: AsyncSession,
        *,
        tournament_id: UUID,
    ) -> DraftSession | None:
        stmt = select(DraftSession).where(DraftSession.tournament_id == tournament_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_tournament_id_for_update(
        session: AsyncSession,
        *,
        tournament_id: UUID,
    ) -> DraftSession | None:
        stmt = (
            select(DraftSession)
            .where(DraftSession.tournament_id == tournament_id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
