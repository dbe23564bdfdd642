from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.bracket.constants import (
    MATCH_PHASE_ROUND_ROBIN,
    MATCH_STATUS_COMPLETED,
    POINTS_PER_WIN,
)
from teamdraft.bracket.types import TeamStanding
from teamdraft.db.models.matches import Match
from teamdraft.db.models.teams import Team
from teamdraft.db.repo.matches_repo import MatchesRepo
from teamdraft.db.repo.teams_repo import TeamsRepo


def _standing_sort_key(standing: TeamStanding) -> tuple[int, int, int]:
    return (standing.points, standing.wins, standing.games_won)


def compute_standings(
    teams: Sequence[Team],
    completed_round_robin_matches: Sequence[Match],
) -> list[TeamStanding]:
    """Rank teams by points, then wins, then games won.

    Teams tied on all three keys keep their position in ``teams``. Matches
    that are not completed round-robin results, or that reference unknown teams,
    are ignored.
    """
    standings = {
        team.id: TeamStanding(team_id=team.id, team_name=team.name, draft_order=team.draft_order)
        for team in teams
    }
    for match in completed_round_robin_matches:
        if match.phase != MATCH_PHASE_ROUND_ROBIN or match.status != MATCH_STATUS_COMPLETED:
            continue
        team1 = standings.get(match.team1_id) if match.team1_id is not None else None
        team2 = standings.get(match.team2_id) if match.team2_id is not None else None
        if team1 is None or team2 is None:
            continue

        for standing, scored, conceded in (
            (team1, match.team1_score, match.team2_score),
            (team2, match.team2_score, match.team1_score),
        ):
            standing.matches_played += 1
            standing.games_won += scored
            standing.games_lost += conceded
            if match.winner_id == standing.team_id:
                standing.wins += 1
                standing.points += POINTS_PER_WIN
            elif match.winner_id is not None:
                standing.losses += 1

    return sorted(standings.values(), key=_standing_sort_key, reverse=True)


async def get_round_robin_standings(
    session: AsyncSession,
    *,
    tournament_id: UUID,
) -> list[TeamStanding]:
    teams = await TeamsRepo.list_for_tournament(session, tournament_id=tournament_id)
    matches = await MatchesRepo.list_completed_by_phase(
        session,
        tournament_id=tournament_id,
        phase=MATCH_PHASE_ROUND_ROBIN,
    )
    return compute_standings(teams, matches)
