from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.registrations import Registration


class RegistrationsRepo:
    @staticmethod
    async def create_once(session: AsyncSession, *, registration: Registration) -> bool:
        stmt = (
            insert(Registration)
            .values(
                id=registration.id,
                tournament_id=registration.tournament_id,
                user_id=registration.user_id,
                display_name=registration.display_name,
                avatar_url=registration.avatar_url,
                profile_url=registration.profile_url,
                preferred_position=registration.preferred_position,
                preferred_civs_flank=registration.preferred_civs_flank,
                preferred_civs_pocket=registration.preferred_civs_pocket,
                preferred_maps=registration.preferred_maps,
                notes=registration.notes,
                status=registration.status,
                registered_at=registration.registered_at,
                updated_at=registration.updated_at,
            )
            .on_conflict_do_nothing(
                index_elements=[Registration.tournament_id, Registration.user_id]
            )
            .returning(Registration.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_for_user_for_update(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        user_id: str,
    ) -> Registration | None:
        stmt = (
            select(Registration)
            .where(
                Registration.tournament_id == tournament_id,
                Registration.user_id == user_id,
            )
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_tournament(
        session: AsyncSession,
        *,
        tournament_id: UUID,
    ) -> list[Registration]:
        stmt = (
            select(Registration)
            .where(Registration.tournament_id == tournament_id)
            .order_by(Registration.registered_at.asc(), Registration.user_id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def delete_for_user(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        user_id: str,
    ) -> int:
        stmt = (
            delete(Registration)
            .where(
                Registration.tournament_id == tournament_id,
                Registration.user_id == user_id,
            )
            .returning(Registration.id)
        )
        result = await session.execute(stmt)
        return len(result.scalars().all())
