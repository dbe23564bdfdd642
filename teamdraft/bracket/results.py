from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.bracket.constants import (
    CAPTAIN_SCHEDULED_MATCHES_LIMIT,
    MATCH_CLOSED_STATUSES,
    MATCH_PHASE_GRANDFINAL,
    MATCH_PHASE_ROUND_ROBIN,
    MATCH_PHASE_SEMIFINAL,
    MATCH_STATUS_COMPLETED,
    MATCH_STATUS_SCHEDULED,
    MATCH_STATUS_TRANSITIONS,
    RECENT_MATCHES_LIMIT,
)
from teamdraft.bracket.errors import MatchNotFoundError, MatchResultError, MatchStatusError
from teamdraft.bracket.internal import (
    build_match_snapshot,
    load_match_for_update,
    load_tournament_as_bracket_admin,
)
from teamdraft.bracket.playoffs import propagate_semifinal_winners
from teamdraft.bracket.types import MatchResultOutcome, MatchSnapshot
from teamdraft.db.models.matches import Match
from teamdraft.db.models.tournaments import Tournament
from teamdraft.db.repo.matches_repo import MatchesRepo
from teamdraft.tournaments.constants import (
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_IN_PROGRESS,
)
from teamdraft.tournaments.lifecycle import advance_status

logger = structlog.get_logger(__name__)

_PHASE_ORDER = {
    MATCH_PHASE_ROUND_ROBIN: 0,
    MATCH_PHASE_SEMIFINAL: 1,
    MATCH_PHASE_GRANDFINAL: 2,
}


def validate_match_result(
    *,
    team1_id: UUID | None,
    team2_id: UUID | None,
    team1_score: int,
    team2_score: int,
    winner_id: UUID,
) -> None:
    if team1_id is None or team2_id is None:
        raise MatchResultError("both teams must be known before a result is recorded")
    if team1_score < 0 or team2_score < 0:
        raise MatchResultError("scores cannot be negative")
    if winner_id not in (team1_id, team2_id):
        raise MatchResultError("the winner must be one of the two teams")
    winner_score, loser_score = (
        (team1_score, team2_score) if winner_id == team1_id else (team2_score, team1_score)
    )
    if winner_score < loser_score:
        raise MatchResultError("the winner cannot have fewer games than the loser")


async def _load_match_as_admin(
    session: AsyncSession,
    *,
    match_id: UUID,
    acting_user_id: str,
) -> tuple[Tournament, Match]:
    match = await MatchesRepo.get_by_id(session, match_id)
    if match is None:
        raise MatchNotFoundError
    # Tournament row first, then the match row.
    tournament = await load_tournament_as_bracket_admin(
        session,
        tournament_id=match.tournament_id,
        acting_user_id=acting_user_id,
    )
    return tournament, await load_match_for_update(session, match_id)


async def record_match_result(
    session: AsyncSession,
    *,
    match_id: UUID,
    acting_user_id: str,
    team1_score: int,
    team2_score: int,
    winner_id: UUID,
    now_utc: datetime,
) -> MatchResultOutcome:
    tournament, match = await _load_match_as_admin(
        session,
        match_id=match_id,
        acting_user_id=acting_user_id,
    )
    if match.status in MATCH_CLOSED_STATUSES:
        raise MatchStatusError(f"match is already {match.status}")
    validate_match_result(
        team1_id=match.team1_id,
        team2_id=match.team2_id,
        team1_score=team1_score,
        team2_score=team2_score,
        winner_id=winner_id,
    )

    match.team1_score = team1_score
    match.team2_score = team2_score
    match.winner_id = winner_id
    match.status = MATCH_STATUS_COMPLETED
    match.updated_at = now_utc
    logger.info(
        "match_result_recorded",
        tournament_id=str(tournament.id),
        match_id=str(match.id),
        phase=match.phase,
        winner_id=str(winner_id),
    )

    grand_final = None
    tournament_completed = False
    if match.phase == MATCH_PHASE_SEMIFINAL:
        grand_final = await propagate_semifinal_winners(
            session,
            tournament_id=tournament.id,
            now_utc=now_utc,
        )
    elif (
        match.phase == MATCH_PHASE_GRANDFINAL
        and tournament.status == TOURNAMENT_STATUS_IN_PROGRESS
    ):
        advance_status(tournament, target=TOURNAMENT_STATUS_COMPLETED, now_utc=now_utc)
        tournament_completed = True

    return MatchResultOutcome(
        match=build_match_snapshot(match),
        grand_final=build_match_snapshot(grand_final) if grand_final is not None else None,
        tournament_completed=tournament_completed,
    )


async def update_match_status(
    session: AsyncSession,
    *,
    match_id: UUID,
    acting_user_id: str,
    status: str,
    now_utc: datetime,
) -> MatchSnapshot:
    _, match = await _load_match_as_admin(
        session,
        match_id=match_id,
        acting_user_id=acting_user_id,
    )
    allowed = MATCH_STATUS_TRANSITIONS.get(match.status, frozenset())
    if status not in allowed:
        raise MatchStatusError(f"cannot move match from {match.status} to {status}")
    if status == MATCH_STATUS_SCHEDULED and match.scheduled_time is None:
        raise MatchStatusError("match has no scheduled time")

    previous = match.status
    match.status = status
    match.updated_at = now_utc
    logger.info(
        "match_status_updated",
        match_id=str(match.id),
        previous_status=previous,
        status=status,
    )
    return build_match_snapshot(match)


async def list_matches(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    phase: str | None = None,
) -> list[MatchSnapshot]:
    matches = await MatchesRepo.list_for_tournament(session, tournament_id=tournament_id)
    ordered = sorted(
        matches,
        key=lambda match: (_PHASE_ORDER.get(match.phase, len(_PHASE_ORDER)), match.match_number),
    )
    return [
        build_match_snapshot(match) for match in ordered if phase is None or match.phase == phase
    ]


async def list_upcoming_matches(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    now_utc: datetime,
    limit: int = 20,
) -> list[MatchSnapshot]:
    try:
        matches = await MatchesRepo.list_upcoming_scheduled(
            session,
            tournament_id=tournament_id,
            now_utc=now_utc,
            limit=limit,
        )
    except SQLAlchemyError as exc:
        logger.warning(
            "upcoming_matches_unavailable",
            tournament_id=str(tournament_id),
            error_type=type(exc).__name__,
        )
        return []
    return [build_match_snapshot(match) for match in matches]


async def list_recent_matches(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    limit: int = RECENT_MATCHES_LIMIT,
) -> list[MatchSnapshot]:
    """Completed matches of the tournament, most recently updated first."""
    matches = await MatchesRepo.list_recent_completed(
        session,
        tournament_id=tournament_id,
        limit=limit,
    )
    return [build_match_snapshot(match) for match in matches]


async def list_captain_scheduled_matches(
    session: AsyncSession,
    *,
    captain_id: str,
    limit: int = CAPTAIN_SCHEDULED_MATCHES_LIMIT,
) -> list[MatchSnapshot]:
    """Scheduled or running matches of every team the user captains, across tournaments."""
    matches = await MatchesRepo.list_scheduled_for_captain(
        session,
        captain_id=captain_id,
        limit=limit,
    )
    return [build_match_snapshot(match) for match in matches]
