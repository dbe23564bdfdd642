from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.repo.player_categories_repo import PlayerCategoriesRepo
from teamdraft.db.repo.registrations_repo import RegistrationsRepo
from teamdraft.tournaments.constants import CATEGORIES, TOURNAMENT_STATUS_CATEGORIZING
from teamdraft.tournaments.errors import (
    PlayerNotRegisteredError,
    TournamentStatusError,
    TournamentValidationError,
)
from teamdraft.tournaments.internal import load_tournament_as_admin
from teamdraft.tournaments.types import CategorizedPlayer

logger = structlog.get_logger(__name__)


async def assign_category(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    user_id: str,
    category: str,
    now_utc: datetime,
) -> None:
    if category not in CATEGORIES:
        raise TournamentValidationError(f"unknown category: {category}")
    tournament = await load_tournament_as_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    if tournament.status != TOURNAMENT_STATUS_CATEGORIZING:
        raise TournamentStatusError("players can only be categorized during categorization")

    registered = await RegistrationsRepo.get_for_user_for_update(
        session,
        tournament_id=tournament.id,
        user_id=user_id,
    )
    if registered is None:
        raise PlayerNotRegisteredError

    await PlayerCategoriesRepo.upsert(
        session,
        tournament_id=tournament.id,
        user_id=user_id,
        category=category,
        assigned_by=acting_user_id,
        assigned_at=now_utc,
    )
    logger.info(
        "player_category_assigned",
        tournament_id=str(tournament.id),
        user_id=user_id,
        category=category,
    )


async def remove_category(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    user_id: str,
) -> bool:
    tournament = await load_tournament_as_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    if tournament.status != TOURNAMENT_STATUS_CATEGORIZING:
        raise TournamentStatusError("players can only be categorized during categorization")
    removed = await PlayerCategoriesRepo.delete_for_user(
        session,
        tournament_id=tournament.id,
        user_id=user_id,
    )
    return removed > 0


async def _players_with_categories(
    session: AsyncSession,
    *,
    tournament_id: UUID,
) -> list[CategorizedPlayer]:
    registrations = await RegistrationsRepo.list_for_tournament(
        session,
        tournament_id=tournament_id,
    )
    categories = await PlayerCategoriesRepo.list_for_tournament(
        session,
        tournament_id=tournament_id,
    )
    category_by_user = {item.user_id: item.category for item in categories}
    return [
        CategorizedPlayer(
            user_id=registration.user_id,
            display_name=registration.display_name,
            avatar_url=registration.avatar_url,
            category=category_by_user.get(registration.user_id),
        )
        for registration in registrations
    ]


async def list_categorized_players(
    session: AsyncSession,
    *,
    tournament_id: UUID,
) -> dict[str, list[CategorizedPlayer]]:
    grouped: dict[str, list[CategorizedPlayer]] = {category: [] for category in CATEGORIES}
    for player in await _players_with_categories(session, tournament_id=tournament_id):
        if player.category is not None:
            grouped[player.category].append(player)
    return grouped


async def list_uncategorized_players(
    session: AsyncSession,
    *,
    tournament_id: UUID,
) -> list[CategorizedPlayer]:
    players = await _players_with_categories(session, tournament_id=tournament_id)
    return [player for player in players if player.category is None]


async def category_stats(session: AsyncSession, *, tournament_id: UUID) -> dict[str, int]:
    categories = await PlayerCategoriesRepo.list_for_tournament(
        session,
        tournament_id=tournament_id,
    )
    stats = {category: 0 for category in CATEGORIES}
    for item in categories:
        stats[item.category] = stats.get(item.category, 0) + 1
    stats["total"] = len(categories)
    return stats
