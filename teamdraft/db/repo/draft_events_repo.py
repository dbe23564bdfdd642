from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.draft_events import DraftEvent


class DraftEventsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, event: DraftEvent) -> DraftEvent:
        session.add(event)
        await session.flush()
        return event

    @staticmethod
    async def list_for_session(
        session: AsyncSession,
        *,
        draft_session_id: UUID,
    ) -> list[DraftEvent]:
        stmt = (
            select(DraftEvent)
            .where(DraftEvent.draft_session_id == draft_session_id)
            .order_by(DraftEvent.created_at.asc(), DraftEvent.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
