from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.bracket.constants import MATCH_STATUS_PENDING
from teamdraft.bracket.errors import BracketAccessError, MatchNotFoundError
from teamdraft.bracket.types import MatchSnapshot, PlannedMatch
from teamdraft.db.models.matches import Match
from teamdraft.db.models.tournaments import Tournament
from teamdraft.db.repo.matches_repo import MatchesRepo
from teamdraft.db.repo.tournaments_repo import TournamentsRepo
from teamdraft.tournaments.errors import TournamentNotFoundError
from teamdraft.tournaments.internal import is_tournament_admin


def build_match_snapshot(match: Match) -> MatchSnapshot:
    return MatchSnapshot(
        match_id=match.id,
        tournament_id=match.tournament_id,
        phase=match.phase,
        round=match.round,
        match_number=match.match_number,
        team1_id=match.team1_id,
        team2_id=match.team2_id,
        team1_score=match.team1_score,
        team2_score=match.team2_score,
        winner_id=match.winner_id,
        status=match.status,
        best_of=match.best_of,
        scheduled_time=match.scheduled_time,
    )


def materialize_match(
    planned: PlannedMatch,
    *,
    tournament_id: UUID,
    now_utc: datetime,
) -> Match:
    return Match(
        id=uuid4(),
        tournament_id=tournament_id,
        phase=planned.phase,
        round=planned.round,
        match_number=planned.match_number,
        team1_id=planned.team1_id,
        team2_id=planned.team2_id,
        team1_score=0,
        team2_score=0,
        winner_id=None,
        status=MATCH_STATUS_PENDING,
        best_of=planned.best_of,
        scheduled_time=None,
        created_at=now_utc,
        updated_at=now_utc,
    )


async def load_tournament_as_bracket_admin(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
) -> Tournament:
    tournament = await TournamentsRepo.get_by_id_for_update(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    if not is_tournament_admin(tournament, acting_user_id):
        raise BracketAccessError
    return tournament


async def load_match_for_update(session: AsyncSession, match_id: UUID) -> Match:
    match = await MatchesRepo.get_by_id_for_update(session, match_id)
    if match is None:
        raise MatchNotFoundError
    return match
