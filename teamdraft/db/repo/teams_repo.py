from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.teams import Team


class TeamsRepo:
    @staticmethod
    async def create_many(session: AsyncSession, *, teams: list[Team]) -> list[Team]:
        if not teams:
            return []
        session.add_all(teams)
        await session.flush()
        return teams

    @staticmethod
    async def get_by_id(session: AsyncSession, team_id: UUID) -> Team | None:
        return await session.get(Team, team_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, team_id: UUID) -> Team | None:
        stmt = select(Team).where(Team.id == team_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_tournament(session: AsyncSession, *, tournament_id: UUID) -> list[Team]:
        stmt = (
            select(Team)
            .where(Team.tournament_id == tournament_id)
            .order_by(Team.draft_order.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_for_tournament_for_update(
        session: AsyncSession,
        *,
        tournament_id: UUID,
    ) -> list[Team]:
        stmt = (
            select(Team)
            .where(Team.tournament_id == tournament_id)
            .order_by(Team.draft_order.asc())
            .with_for_update()
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def reassign_draft_orders(
        session: AsyncSession,
        *,
        teams: list[Team],
        draft_orders: dict[UUID, int],
    ) -> None:
        # Two passes keep uq_teams_tournament_draft_order satisfied while orders are swapped.
        offset = len(teams) + 1
        for team in teams:
            team.draft_order = draft_orders[team.id] + offset
        await session.flush()
        for team in teams:
            team.draft_order = draft_orders[team.id]
        await session.flush()
