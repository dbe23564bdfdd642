from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.player_categories import PlayerCategory


class PlayerCategoriesRepo:
    @staticmethod
    async def upsert(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        user_id: str,
        category: str,
        assigned_by: str,
        assigned_at: datetime,
    ) -> None:
        stmt = insert(PlayerCategory).values(
            tournament_id=tournament_id,
            user_id=user_id,
            category=category,
            assigned_by=assigned_by,
            assigned_at=assigned_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[PlayerCategory.tournament_id, PlayerCategory.user_id],
            set_={
                "category": stmt.excluded.category,
                "assigned_by": stmt.excluded.assigned_by,
                "assigned_at": stmt.excluded.assigned_at,
            },
        )
        await session.execute(stmt)

    @staticmethod
    async def delete_for_user(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        user_id: str,
    ) -> int:
        stmt = (
            delete(PlayerCategory)
            .where(
                PlayerCategory.tournament_id == tournament_id,
                PlayerCategory.user_id == user_id,
            )
            .returning(PlayerCategory.user_id)
        )
        result = await session.execute(stmt)
        return len(result.scalars().all())

    @staticmethod
    async def list_for_tournament(
        session: AsyncSession,
        *,
        tournament_id: UUID,
    ) -> list[PlayerCategory]:
        stmt = (
            select(PlayerCategory)
            .where(PlayerCategory.tournament_id == tournament_id)
            .order_by(PlayerCategory.category.asc(), PlayerCategory.assigned_at.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_user_ids_for_category(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        category: str,
    ) -> list[str]:
        stmt = (
            select(PlayerCategory.user_id)
            .where(
                PlayerCategory.tournament_id == tournament_id,
                PlayerCategory.category == category,
            )
            .order_by(PlayerCategory.assigned_at.asc(), PlayerCategory.user_id.asc())
        )
        result = await session.execute(stmt)
        return [str(user_id) for user_id in result.scalars().all()]
