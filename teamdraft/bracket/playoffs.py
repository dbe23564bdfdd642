from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.bracket.constants import (
    GRANDFINAL_MATCH_NUMBER,
    MATCH_PHASE_GRANDFINAL,
    MATCH_PHASE_SEMIFINAL,
    MATCH_STATUS_COMPLETED,
    MATCH_STATUS_IN_PROGRESS,
    PLAYOFF_SEEDS,
    SEMIFINAL_MIDDLE_SEED_MATCH_NUMBER,
    SEMIFINAL_TOP_SEED_MATCH_NUMBER,
)
from teamdraft.bracket.errors import InsufficientTeamsError, MatchNotFoundError, MatchStatusError
from teamdraft.bracket.internal import build_match_snapshot, load_tournament_as_bracket_admin
from teamdraft.bracket.standings import get_round_robin_standings
from teamdraft.bracket.types import MatchSnapshot, TeamStanding
from teamdraft.db.models.matches import Match
from teamdraft.db.repo.matches_repo import MatchesRepo

logger = structlog.get_logger(__name__)

_SEEDED_PAIRS: dict[int, tuple[int, int]] = {
    SEMIFINAL_TOP_SEED_MATCH_NUMBER: (0, 3),
    SEMIFINAL_MIDDLE_SEED_MATCH_NUMBER: (1, 2),
}


def seed_semifinals(standings: list[TeamStanding]) -> dict[int, tuple[UUID, UUID]]:
    """Map semifinal match number to its (team1, team2): seed 1 v 4 and seed 2 v 3."""
    if len(standings) < PLAYOFF_SEEDS:
        raise InsufficientTeamsError
    return {
        match_number: (standings[high].team_id, standings[low].team_id)
        for match_number, (high, low) in _SEEDED_PAIRS.items()
    }


def _by_match_number(matches: list[Match]) -> dict[int, Match]:
    return {match.match_number: match for match in matches}


async def assign_playoff_teams(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    now_utc: datetime,
) -> tuple[MatchSnapshot, ...]:
    tournament = await load_tournament_as_bracket_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    standings = await get_round_robin_standings(session, tournament_id=tournament.id)
    pairs = seed_semifinals(standings)

    semifinals = _by_match_number(
        await MatchesRepo.list_by_phase_for_update(
            session,
            tournament_id=tournament.id,
            phase=MATCH_PHASE_SEMIFINAL,
        )
    )
    if set(pairs) - set(semifinals):
        raise MatchNotFoundError
    for match_number in pairs:
        if semifinals[match_number].status in {MATCH_STATUS_IN_PROGRESS, MATCH_STATUS_COMPLETED}:
            raise MatchStatusError("semifinals can no longer be reseeded")

    for match_number, (team1_id, team2_id) in pairs.items():
        semifinal = semifinals[match_number]
        semifinal.team1_id = team1_id
        semifinal.team2_id = team2_id
        semifinal.updated_at = now_utc

    logger.info(
        "playoff_teams_assigned",
        tournament_id=str(tournament.id),
        seeds=[str(standing.team_id) for standing in standings[:PLAYOFF_SEEDS]],
    )
    return tuple(build_match_snapshot(semifinals[number]) for number in sorted(pairs))


async def propagate_semifinal_winners(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    now_utc: datetime,
) -> Match | None:
    """Fill the grand final once both semifinals are completed; otherwise leave it alone."""
    semifinals = _by_match_number(
        await MatchesRepo.list_by_phase_for_update(
            session,
            tournament_id=tournament_id,
            phase=MATCH_PHASE_SEMIFINAL,
        )
    )
    top = semifinals.get(SEMIFINAL_TOP_SEED_MATCH_NUMBER)
    middle = semifinals.get(SEMIFINAL_MIDDLE_SEED_MATCH_NUMBER)
    if top is None or middle is None:
        return None
    if any(
        semifinal.status != MATCH_STATUS_COMPLETED or semifinal.winner_id is None
        for semifinal in (top, middle)
    ):
        return None

    finals = _by_match_number(
        await MatchesRepo.list_by_phase_for_update(
            session,
            tournament_id=tournament_id,
            phase=MATCH_PHASE_GRANDFINAL,
        )
    )
    grand_final = finals.get(GRANDFINAL_MATCH_NUMBER)
    if grand_final is None:
        raise MatchNotFoundError
    grand_final.team1_id = top.winner_id
    grand_final.team2_id = middle.winner_id
    grand_final.updated_at = now_utc
    logger.info(
        "grand_final_teams_resolved",
        tournament_id=str(tournament_id),
        team1_id=str(top.winner_id),
        team2_id=str(middle.winner_id),
    )
    return grand_final
