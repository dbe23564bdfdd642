from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.bracket.constants import (
    BRACKET_MIN_TEAMS,
    GRANDFINAL_BEST_OF,
    GRANDFINAL_MATCH_NUMBER,
    MATCH_PHASE_GRANDFINAL,
    MATCH_PHASE_ROUND_ROBIN,
    MATCH_PHASE_SEMIFINAL,
    PLAYOFF_ROUND,
    ROUND_ROBIN_BEST_OF,
    SEMIFINAL_BEST_OF,
    SEMIFINAL_MIDDLE_SEED_MATCH_NUMBER,
    SEMIFINAL_TOP_SEED_MATCH_NUMBER,
)
from teamdraft.bracket.errors import BracketAlreadyExistsError, InsufficientTeamsError
from teamdraft.bracket.internal import (
    build_match_snapshot,
    load_tournament_as_bracket_admin,
    materialize_match,
)
from teamdraft.bracket.types import BracketResult, PlannedMatch
from teamdraft.db.repo.matches_repo import MatchesRepo
from teamdraft.db.repo.schedule_proposals_repo import ScheduleProposalsRepo
from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.tournaments.constants import (
    TOURNAMENT_STATUS_IN_PROGRESS,
    TOURNAMENT_STATUS_TEAMS_FINALIZED,
)
from teamdraft.tournaments.errors import TournamentStatusError
from teamdraft.tournaments.lifecycle import advance_status

logger = structlog.get_logger(__name__)

_BRACKET_STATUSES = frozenset({TOURNAMENT_STATUS_TEAMS_FINALIZED, TOURNAMENT_STATUS_IN_PROGRESS})


class BracketTeam(Protocol):
    id: UUID
    draft_order: int


def build_round_robin_matches(teams: Sequence[BracketTeam]) -> list[PlannedMatch]:
    """Every unordered pair of teams once, numbered 1..N(N-1)/2 in draft order."""
    ordered = sorted(teams, key=lambda team: team.draft_order)
    matches: list[PlannedMatch] = []
    for index, team1 in enumerate(ordered):
        for team2 in ordered[index + 1 :]:
            matches.append(
                PlannedMatch(
                    phase=MATCH_PHASE_ROUND_ROBIN,
                    round=None,
                    match_number=len(matches) + 1,
                    best_of=ROUND_ROBIN_BEST_OF,
                    team1_id=team1.id,
                    team2_id=team2.id,
                )
            )
    return matches


def build_playoff_matches() -> list[PlannedMatch]:
    # Team slots stay empty until seeding (semifinals) and both semifinal results (final).
    return [
        PlannedMatch(
            phase=MATCH_PHASE_SEMIFINAL,
            round=PLAYOFF_ROUND,
            match_number=SEMIFINAL_TOP_SEED_MATCH_NUMBER,
            best_of=SEMIFINAL_BEST_OF,
            team1_id=None,
            team2_id=None,
        ),
        PlannedMatch(
            phase=MATCH_PHASE_SEMIFINAL,
            round=PLAYOFF_ROUND,
            match_number=SEMIFINAL_MIDDLE_SEED_MATCH_NUMBER,
            best_of=SEMIFINAL_BEST_OF,
            team1_id=None,
            team2_id=None,
        ),
        PlannedMatch(
            phase=MATCH_PHASE_GRANDFINAL,
            round=PLAYOFF_ROUND,
            match_number=GRANDFINAL_MATCH_NUMBER,
            best_of=GRANDFINAL_BEST_OF,
            team1_id=None,
            team2_id=None,
        ),
    ]


async def generate_bracket(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    now_utc: datetime,
) -> BracketResult:
    tournament = await load_tournament_as_bracket_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    if tournament.status not in _BRACKET_STATUSES:
        raise TournamentStatusError("the bracket can only be generated once teams are final")

    teams = await TeamsRepo.list_for_tournament(session, tournament_id=tournament.id)
    if len(teams) < BRACKET_MIN_TEAMS:
        raise InsufficientTeamsError
    existing_total = await MatchesRepo.count_for_tournament(session, tournament_id=tournament.id)
    if existing_total > 0:
        raise BracketAlreadyExistsError

    round_robin = [
        materialize_match(planned, tournament_id=tournament.id, now_utc=now_utc)
        for planned in build_round_robin_matches(teams)
    ]
    playoffs = [
        materialize_match(planned, tournament_id=tournament.id, now_utc=now_utc)
        for planned in build_playoff_matches()
    ]
    await MatchesRepo.create_many(session, matches=[*round_robin, *playoffs])

    if tournament.status == TOURNAMENT_STATUS_TEAMS_FINALIZED:
        advance_status(tournament, target=TOURNAMENT_STATUS_IN_PROGRESS, now_utc=now_utc)
    logger.info(
        "bracket_generated",
        tournament_id=str(tournament.id),
        teams_total=len(teams),
        round_robin_total=len(round_robin),
        playoffs_total=len(playoffs),
    )
    return BracketResult(
        round_robin=tuple(build_match_snapshot(match) for match in round_robin),
        playoffs=tuple(build_match_snapshot(match) for match in playoffs),
        total_matches=len(round_robin) + len(playoffs),
    )


async def delete_bracket(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
) -> int:
    tournament = await load_tournament_as_bracket_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    proposals_deleted = await ScheduleProposalsRepo.delete_for_tournament(
        session,
        tournament_id=tournament.id,
    )
    matches_deleted = await MatchesRepo.delete_for_tournament(session, tournament_id=tournament.id)
    logger.info(
        "bracket_deleted",
        tournament_id=str(tournament.id),
        matches_deleted=matches_deleted,
        proposals_deleted=proposals_deleted,
    )
    return matches_deleted
