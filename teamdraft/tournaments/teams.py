from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.draft.errors import TeamNotFoundError
from teamdraft.tournaments.constants import (
    TEAM_NAME_MAX_LENGTH,
    TOURNAMENT_STATUS_TEAMS_FINALIZED,
    status_precedes,
)
from teamdraft.tournaments.errors import TournamentStatusError, TournamentValidationError
from teamdraft.tournaments.internal import build_team_snapshot, load_tournament_as_admin
from teamdraft.tournaments.types import TeamSnapshot

logger = structlog.get_logger(__name__)


def normalize_team_name(name: str) -> str:
    resolved = name.strip()
    if not resolved:
        raise TournamentValidationError("team name is required")
    if len(resolved) > TEAM_NAME_MAX_LENGTH:
        raise TournamentValidationError(
            f"team name must be at most {TEAM_NAME_MAX_LENGTH} characters"
        )
    return resolved


async def rename_team(
    session: AsyncSession,
    *,
    team_id: UUID,
    acting_user_id: str,
    name: str,
    now_utc: datetime,
) -> TeamSnapshot:
    """Admin-only rename once the draft has finalized the rosters."""
    resolved_name = normalize_team_name(name)
    team = await TeamsRepo.get_by_id(session, team_id)
    if team is None:
        raise TeamNotFoundError
    # Tournament row first, then the team row.
    tournament = await load_tournament_as_admin(
        session,
        tournament_id=team.tournament_id,
        acting_user_id=acting_user_id,
    )
    if status_precedes(tournament.status, TOURNAMENT_STATUS_TEAMS_FINALIZED):
        raise TournamentStatusError("teams can only be renamed after the draft")

    team = await TeamsRepo.get_by_id_for_update(session, team_id)
    if team is None:
        raise TeamNotFoundError
    previous_name = team.name
    team.name = resolved_name
    tournament.updated_at = now_utc
    logger.info(
        "team_renamed",
        tournament_id=str(tournament.id),
        team_id=str(team.id),
        previous_name=previous_name,
        name=resolved_name,
    )
    return build_team_snapshot(team)
