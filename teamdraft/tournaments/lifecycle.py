"""Tournament status machine and the admin actions that drive it.

The status sequence is strictly forward and single-step; every transition is an
explicit admin or system action performed elsewhere (draft start, pick completion,
bracket generation, grand final result) through :func:`advance_status`.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.tournaments import Tournament
from teamdraft.db.repo.tournaments_repo import TournamentsRepo
from teamdraft.tournaments.constants import (
    TOURNAMENT_FORMAT_ROUND_ROBIN_GF,
    TOURNAMENT_LIST_LIMIT,
    TOURNAMENT_MIN_MAP_POOL,
    TOURNAMENT_NAME_MAX_LENGTH,
    TOURNAMENT_STATUS_CATEGORIZING,
    TOURNAMENT_STATUS_DRAFT,
    TOURNAMENT_STATUS_REGISTRATION_CLOSED,
    TOURNAMENT_STATUS_REGISTRATION_OPEN,
    TOURNAMENT_STATUS_SEQUENCE,
    TOURNAMENT_TEAM_SIZE,
)
from teamdraft.tournaments.errors import (
    TournamentNotFoundError,
    TournamentStatusError,
    TournamentValidationError,
)
from teamdraft.tournaments.internal import build_tournament_snapshot, load_tournament_as_admin
from teamdraft.tournaments.types import TournamentSnapshot

logger = structlog.get_logger(__name__)


def next_status(status: str) -> str | None:
    if status not in TOURNAMENT_STATUS_SEQUENCE:
        raise TournamentStatusError(f"unknown tournament status: {status}")
    index = TOURNAMENT_STATUS_SEQUENCE.index(status)
    if index + 1 >= len(TOURNAMENT_STATUS_SEQUENCE):
        return None
    return TOURNAMENT_STATUS_SEQUENCE[index + 1]


def ensure_transition(current: str, target: str) -> None:
    if target not in TOURNAMENT_STATUS_SEQUENCE:
        raise TournamentStatusError(f"unknown tournament status: {target}")
    expected = next_status(current)
    if expected != target:
        raise TournamentStatusError(f"cannot move tournament from {current} to {target}")


def advance_status(tournament: Tournament, *, target: str, now_utc: datetime) -> None:
    ensure_transition(tournament.status, target)
    previous = tournament.status
    tournament.status = target
    tournament.updated_at = now_utc
    logger.info(
        "tournament_status_advanced",
        tournament_id=str(tournament.id),
        previous_status=previous,
        status=target,
    )


def normalize_map_pool(map_pool: list[str]) -> list[str]:
    normalized: list[str] = []
    for raw_name in map_pool:
        name = raw_name.strip()
        if name and name not in normalized:
            normalized.append(name)
    if len(normalized) < TOURNAMENT_MIN_MAP_POOL:
        raise TournamentValidationError(
            f"select at least {TOURNAMENT_MIN_MAP_POOL} distinct maps for the map pool"
        )
    return normalized


async def create_tournament(
    session: AsyncSession,
    *,
    admin_id: str,
    name: str,
    map_pool: list[str],
    now_utc: datetime,
    description: str | None = None,
) -> TournamentSnapshot:
    resolved_name = name.strip()
    if not resolved_name:
        raise TournamentValidationError("tournament name is required")
    if len(resolved_name) > TOURNAMENT_NAME_MAX_LENGTH:
        raise TournamentValidationError(
            f"tournament name must be at most {TOURNAMENT_NAME_MAX_LENGTH} characters"
        )
    tournament = await TournamentsRepo.create(
        session,
        tournament=Tournament(
            id=uuid4(),
            name=resolved_name,
            description=(description.strip() or None) if description else None,
            admin_id=admin_id,
            status=TOURNAMENT_STATUS_DRAFT,
            format=TOURNAMENT_FORMAT_ROUND_ROBIN_GF,
            team_size=TOURNAMENT_TEAM_SIZE,
            map_pool=normalize_map_pool(map_pool),
            created_at=now_utc,
            updated_at=now_utc,
        ),
    )
    logger.info("tournament_created", tournament_id=str(tournament.id), admin_id=admin_id)
    return build_tournament_snapshot(tournament)


async def get_tournament(session: AsyncSession, *, tournament_id: UUID) -> TournamentSnapshot:
    tournament = await TournamentsRepo.get_by_id(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return build_tournament_snapshot(tournament)


async def list_admin_tournaments(
    session: AsyncSession,
    *,
    admin_id: str,
    limit: int = TOURNAMENT_LIST_LIMIT,
) -> list[TournamentSnapshot]:
    tournaments = await TournamentsRepo.list_for_admin(session, admin_id=admin_id, limit=limit)
    return [build_tournament_snapshot(tournament) for tournament in tournaments]


async def list_public_tournaments(
    session: AsyncSession,
    *,
    limit: int = TOURNAMENT_LIST_LIMIT,
) -> list[TournamentSnapshot]:
    """Tournaments visible to everyone: anything past the admin-only draft status, newest first."""
    tournaments = await TournamentsRepo.list_excluding_status(
        session,
        excluded_status=TOURNAMENT_STATUS_DRAFT,
        limit=limit,
    )
    return [build_tournament_snapshot(tournament) for tournament in tournaments]


async def update_map_pool(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    map_pool: list[str],
    now_utc: datetime,
) -> TournamentSnapshot:
    tournament = await load_tournament_as_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    if tournament.status != TOURNAMENT_STATUS_DRAFT:
        raise TournamentStatusError("the map pool is locked once registration opens")
    tournament.map_pool = normalize_map_pool(map_pool)
    tournament.updated_at = now_utc
    return build_tournament_snapshot(tournament)


async def _admin_transition(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    target: str,
    now_utc: datetime,
) -> TournamentSnapshot:
    tournament = await load_tournament_as_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    advance_status(tournament, target=target, now_utc=now_utc)
    return build_tournament_snapshot(tournament)


async def open_registration(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    now_utc: datetime,
) -> TournamentSnapshot:
    return await _admin_transition(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
        target=TOURNAMENT_STATUS_REGISTRATION_OPEN,
        now_utc=now_utc,
    )


async def close_registration(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    now_utc: datetime,
) -> TournamentSnapshot:
    return await _admin_transition(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
        target=TOURNAMENT_STATUS_REGISTRATION_CLOSED,
        now_utc=now_utc,
    )


async def begin_categorizing(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    now_utc: datetime,
) -> TournamentSnapshot:
    return await _admin_transition(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
        target=TOURNAMENT_STATUS_CATEGORIZING,
        now_utc=now_utc,
    )
