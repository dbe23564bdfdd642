from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.core.config import get_settings
from teamdraft.db.models.draft_sessions import DraftSession
from teamdraft.db.repo.draft_sessions_repo import DraftSessionsRepo
from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.draft.constants import (
    DRAFT_EVENT_DRAFT_STARTED,
    DRAFT_EVENT_SESSION_CREATED,
    DRAFT_FIRST_CATEGORY,
    DRAFT_STATUS_IN_PROGRESS,
    DRAFT_STATUS_WAITING_FOR_CAPTAINS,
)
from teamdraft.draft.errors import (
    CaptainsNotConnectedError,
    DraftAccessError,
    DraftSessionAlreadyExistsError,
    SessionNotActiveError,
    TeamNotFoundError,
)
from teamdraft.draft.internal import (
    advance_past_exhausted_categories,
    build_session_snapshot,
    load_session_for_update,
    load_tournament,
    record_event,
)
from teamdraft.draft.types import DraftSessionSnapshot
from teamdraft.tournaments.constants import (
    TOURNAMENT_STATUS_AWAITING_CAPTAIN_RANKING,
    TOURNAMENT_STATUS_DRAFT_IN_PROGRESS,
    TOURNAMENT_STATUS_DRAFT_READY,
)
from teamdraft.tournaments.errors import TournamentStatusError
from teamdraft.tournaments.internal import is_tournament_admin, load_tournament_as_admin
from teamdraft.tournaments.lifecycle import advance_status

logger = structlog.get_logger(__name__)


async def create_draft_session(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    now_utc: datetime,
    pick_timer_seconds: int | None = None,
) -> DraftSessionSnapshot:
    tournament = await load_tournament_as_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    if tournament.status != TOURNAMENT_STATUS_AWAITING_CAPTAIN_RANKING:
        raise TournamentStatusError("rank the captains before preparing the draft")

    teams = await TeamsRepo.list_for_tournament(session, tournament_id=tournament.id)
    if not teams:
        raise TeamNotFoundError

    draft_session = DraftSession(
        id=uuid4(),
        tournament_id=tournament.id,
        status=DRAFT_STATUS_WAITING_FOR_CAPTAINS,
        current_category=DRAFT_FIRST_CATEGORY,
        current_round=1,
        category_pick_count=0,
        pick_timer_seconds=(
            pick_timer_seconds
            if pick_timer_seconds is not None
            else get_settings().draft_pick_timer_seconds
        ),
        created_at=now_utc,
        started_at=None,
        completed_at=None,
    )
    created = await DraftSessionsRepo.create_once(session, draft_session=draft_session)
    if not created:
        raise DraftSessionAlreadyExistsError

    advance_status(tournament, target=TOURNAMENT_STATUS_DRAFT_READY, now_utc=now_utc)
    await record_event(
        session,
        draft_session=draft_session,
        event_type=DRAFT_EVENT_SESSION_CREATED,
        now_utc=now_utc,
        actor_id=acting_user_id,
        payload={"teams_total": len(teams)},
    )
    logger.info(
        "draft_session_created",
        tournament_id=str(tournament.id),
        draft_session_id=str(draft_session.id),
        teams_total=len(teams),
    )
    return build_session_snapshot(draft_session)


async def start_draft(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    online_user_ids: Collection[str],
    now_utc: datetime,
) -> DraftSessionSnapshot:
    """Open the draft once every captain is present in the draft room."""
    tournament = await load_tournament(session, tournament_id)
    if not is_tournament_admin(tournament, acting_user_id):
        raise DraftAccessError

    draft_session = await load_session_for_update(session, tournament.id)
    if draft_session.status != DRAFT_STATUS_WAITING_FOR_CAPTAINS:
        raise SessionNotActiveError
    if tournament.status != TOURNAMENT_STATUS_DRAFT_READY:
        raise TournamentStatusError("the draft can only start from draft_ready")

    teams = await TeamsRepo.list_for_tournament(session, tournament_id=tournament.id)
    missing_captain_ids = [
        team.captain_id for team in teams if team.captain_id not in online_user_ids
    ]
    if missing_captain_ids:
        raise CaptainsNotConnectedError(missing_captain_ids)

    draft_session.status = DRAFT_STATUS_IN_PROGRESS
    draft_session.started_at = now_utc
    advance_status(tournament, target=TOURNAMENT_STATUS_DRAFT_IN_PROGRESS, now_utc=now_utc)
    await record_event(
        session,
        draft_session=draft_session,
        event_type=DRAFT_EVENT_DRAFT_STARTED,
        now_utc=now_utc,
        actor_id=acting_user_id,
        payload={"category": draft_session.current_category},
    )
    logger.info(
        "draft_started",
        tournament_id=str(tournament.id),
        draft_session_id=str(draft_session.id),
        category=draft_session.current_category,
    )
    await advance_past_exhausted_categories(
        session,
        draft_session=draft_session,
        tournament=tournament,
        teams=teams,
        actor_id=acting_user_id,
        now_utc=now_utc,
    )
    return build_session_snapshot(draft_session)
