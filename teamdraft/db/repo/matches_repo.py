from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.matches import Match
from teamdraft.db.models.teams import Team


class MatchesRepo:
    @staticmethod
    async def create_many(session: AsyncSession, *, matches: list[Match]) -> list[Match]:
        if not matches:
            return []
        session.add_all(matches)
        await session.flush()
        return matches

    @staticmethod
    async def count_for_tournament(session: AsyncSession, *, tournament_id: UUID) -> int:
        stmt = select(func.count(Match.id)).where(Match.tournament_id == tournament_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def get_by_id(session: AsyncSession, match_id: UUID) -> Match | None:
        return await session.get(Match, match_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, match_id: UUID) -> Match | None:
        stmt = select(Match).where(Match.id == match_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_tournament(session: AsyncSession, *, tournament_id: UUID) -> list[Match]:
        stmt = (
            select(Match)
            .where(Match.tournament_id == tournament_id)
            .order_by(Match.phase.asc(), Match.match_number.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_by_phase_for_update(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        phase: str,
    ) -> list[Match]:
        stmt = (
            select(Match)
            .where(Match.tournament_id == tournament_id, Match.phase == phase)
            .order_by(Match.match_number.asc())
            .with_for_update()
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_completed_by_phase(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        phase: str,
    ) -> list[Match]:
        stmt = (
            select(Match)
            .where(
                Match.tournament_id == tournament_id,
                Match.phase == phase,
                Match.status == "completed",
            )
            .order_by(Match.match_number.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_upcoming_scheduled(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        now_utc: datetime,
        limit: int,
    ) -> list[Match]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(Match)
            .where(
                Match.tournament_id == tournament_id,
                Match.status.in_(("scheduled", "in_progress")),
                Match.scheduled_time.is_not(None),
                Match.scheduled_time >= now_utc,
            )
            .order_by(Match.scheduled_time.asc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_scheduled_for_captain(
        session: AsyncSession,
        *,
        captain_id: str,
        limit: int,
    ) -> list[Match]:
        resolved_limit = max(1, int(limit))
        captain_team_ids = select(Team.id).where(Team.captain_id == captain_id)
        stmt = (
            select(Match)
            .where(
                or_(
                    Match.team1_id.in_(captain_team_ids),
                    Match.team2_id.in_(captain_team_ids),
                ),
                Match.status.in_(("scheduled", "in_progress")),
                Match.scheduled_time.is_not(None),
            )
            .order_by(Match.scheduled_time.asc(), Match.id.asc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_recent_completed(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        limit: int,
    ) -> list[Match]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(Match)
            .where(Match.tournament_id == tournament_id, Match.status == "completed")
            .order_by(Match.updated_at.desc(), Match.id.desc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def delete_for_tournament(session: AsyncSession, *, tournament_id: UUID) -> int:
        stmt = delete(Match).where(Match.tournament_id == tournament_id).returning(Match.id)
        result = await session.execute(stmt)
        return len(result.scalars().all())
