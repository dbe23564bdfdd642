from __future__ import annotations

from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.repo.draft_events_repo import DraftEventsRepo
from teamdraft.db.repo.draft_picks_repo import DraftPicksRepo
from teamdraft.db.repo.draft_sessions_repo import DraftSessionsRepo
from teamdraft.db.repo.team_members_repo import TeamMembersRepo
from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.draft.constants import DRAFT_STATUS_IN_PROGRESS
from teamdraft.draft.errors import DraftSessionNotFoundError
from teamdraft.draft.internal import (
    build_event_snapshot,
    build_pick_snapshot,
    build_roster_snapshots,
    build_session_snapshot,
    load_available_players,
)
from teamdraft.draft.order import next_picker
from teamdraft.draft.types import DraftEventSnapshot, DraftStateSnapshot

logger = structlog.get_logger(__name__)


async def get_draft_state(session: AsyncSession, *, tournament_id: UUID) -> DraftStateSnapshot:
    draft_session = await DraftSessionsRepo.get_by_tournament_id(
        session,
        tournament_id=tournament_id,
    )
    if draft_session is None:
        raise DraftSessionNotFoundError

    teams = await TeamsRepo.list_for_tournament(session, tournament_id=tournament_id)
    members = await TeamMembersRepo.list_for_teams(session, team_ids=[team.id for team in teams])
    picks = await DraftPicksRepo.list_for_session(session, draft_session_id=draft_session.id)

    current_team_id = None
    available_players = []
    if draft_session.status == DRAFT_STATUS_IN_PROGRESS and teams:
        current_team_id = next_picker(teams, len(picks)).id
    if draft_session.current_category is not None:
        available_players = await load_available_players(
            session,
            draft_session=draft_session,
            teams=teams,
            category=draft_session.current_category,
        )

    return DraftStateSnapshot(
        session=build_session_snapshot(draft_session),
        teams=build_roster_snapshots(teams, members),
        picks=tuple(build_pick_snapshot(pick) for pick in picks),
        current_team_id=current_team_id,
        available_players=tuple(available_players),
    )


async def get_draft_timeline(
    session: AsyncSession,
    *,
    tournament_id: UUID,
) -> list[DraftEventSnapshot]:
    try:
        draft_session = await DraftSessionsRepo.get_by_tournament_id(
            session,
            tournament_id=tournament_id,
        )
        if draft_session is None:
            return []
        events = await DraftEventsRepo.list_for_session(
            session,
            draft_session_id=draft_session.id,
        )
    except SQLAlchemyError as exc:
        logger.warning(
            "draft_timeline_unavailable",
            tournament_id=str(tournament_id),
            error_type=type(exc).__name__,
        )
        return []
    return [build_event_snapshot(event) for event in events]
