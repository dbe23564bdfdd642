from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.team_members import TeamMember


class TeamMembersRepo:
    @staticmethod
    async def create(session: AsyncSession, *, member: TeamMember) -> TeamMember:
        session.add(member)
        await session.flush()
        return member

    @staticmethod
    async def create_many(
        session: AsyncSession,
        *,
        members: list[TeamMember],
    ) -> list[TeamMember]:
        if not members:
            return []
        session.add_all(members)
        await session.flush()
        return members

    @staticmethod
    async def list_for_teams(
        session: AsyncSession,
        *,
        team_ids: list[UUID],
    ) -> list[TeamMember]:
        if not team_ids:
            return []
        stmt = (
            select(TeamMember)
            .where(TeamMember.team_id.in_(team_ids))
            .order_by(
                TeamMember.team_id.asc(),
                TeamMember.is_captain.desc(),
                TeamMember.draft_pick_number.asc(),
            )
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
