from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.tournaments import Tournament


class TournamentsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, tournament: Tournament) -> Tournament:
        session.add(tournament)
        await session.flush()
        return tournament

    @staticmethod
    async def get_by_id(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        return await session.get(Tournament, tournament_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        stmt = select(Tournament).where(Tournament.id == tournament_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_admin(
        session: AsyncSession,
        *,
        admin_id: str,
        limit: int,
    ) -> list[Tournament]:
        stmt = (
            select(Tournament)
            .where(Tournament.admin_id == admin_id)
            .order_by(Tournament.created_at.desc(), Tournament.id.desc())
            .limit(max(1, int(limit)))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_excluding_status(
        session: AsyncSession,
        *,
        excluded_status: str,
        limit: int,
    ) -> list[Tournament]:
        stmt = (
            select(Tournament)
            .where(Tournament.status != excluded_status)
            .order_by(Tournament.created_at.desc(), Tournament.id.desc())
            .limit(max(1, int(limit)))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
