from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.draft_picks import DraftPick
from teamdraft.db.models.team_members import TeamMember
from teamdraft.db.repo.draft_picks_repo import DraftPicksRepo
from teamdraft.db.repo.team_members_repo import TeamMembersRepo
from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.draft.constants import DRAFT_EVENT_PICK_MADE, DRAFT_STATUS_IN_PROGRESS
from teamdraft.draft.errors import (
    DraftAccessError,
    InvalidStateError,
    NotYourTurnError,
    PlayerUnavailableError,
    SessionNotActiveError,
    TeamNotFoundError,
)
from teamdraft.draft.internal import (
    advance_past_exhausted_categories,
    build_pick_snapshot,
    build_session_snapshot,
    load_available_players,
    load_session_for_update,
    load_tournament,
    record_event,
)
from teamdraft.draft.order import next_picker, round_number_for_pick
from teamdraft.draft.types import DraftPickResult
from teamdraft.tournaments.internal import is_tournament_admin

logger = structlog.get_logger(__name__)


async def submit_pick(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    team_id: UUID,
    picked_user_id: str,
    acting_user_id: str,
    now_utc: datetime,
) -> DraftPickResult:
    """Record one draft pick for ``team_id``.

    The draft session row stays locked until the caller's transaction ends, so
    concurrent submissions for the same tournament are evaluated one after another.
    A submission that still loses the race on the unique pick constraints is
    reported as ``NotYourTurnError`` or ``PlayerUnavailableError``; nothing is retried.
    """
    tournament = await load_tournament(session, tournament_id)
    draft_session = await load_session_for_update(session, tournament.id)
    if draft_session.status != DRAFT_STATUS_IN_PROGRESS:
        raise SessionNotActiveError
    category = draft_session.current_category
    if category is None:
        raise InvalidStateError("draft session has no active category")

    teams = await TeamsRepo.list_for_tournament(session, tournament_id=tournament.id)
    team = next((candidate for candidate in teams if candidate.id == team_id), None)
    if team is None:
        raise TeamNotFoundError

    existing_picks = await DraftPicksRepo.list_for_session(
        session,
        draft_session_id=draft_session.id,
    )
    pick_number = len(existing_picks)
    if next_picker(teams, pick_number).id != team.id:
        raise NotYourTurnError

    if acting_user_id != team.captain_id and not is_tournament_admin(tournament, acting_user_id):
        raise DraftAccessError

    available = await load_available_players(
        session,
        draft_session=draft_session,
        teams=teams,
        category=category,
    )
    if picked_user_id not in {player.user_id for player in available}:
        raise PlayerUnavailableError

    round_number = round_number_for_pick(pick_number, len(teams))
    pick = DraftPick(
        id=uuid4(),
        draft_session_id=draft_session.id,
        team_id=team.id,
        user_id=picked_user_id,
        pick_number=pick_number,
        round_number=round_number,
        category=category,
        picked_by=acting_user_id,
        picked_at=now_utc,
    )
    created = await DraftPicksRepo.create_once(session, pick=pick)
    if not created:
        taken = await DraftPicksRepo.get_by_pick_number(
            session,
            draft_session_id=draft_session.id,
            pick_number=pick_number,
        )
        logger.info(
            "draft_pick_race_lost",
            tournament_id=str(tournament.id),
            pick_number=pick_number,
            picked_user_id=picked_user_id,
        )
        if taken is not None:
            raise NotYourTurnError
        raise PlayerUnavailableError

    await TeamMembersRepo.create(
        session,
        member=TeamMember(
            team_id=team.id,
            user_id=picked_user_id,
            is_captain=False,
            category_when_drafted=category,
            draft_round=round_number,
            draft_pick_number=pick_number,
            joined_at=now_utc,
        ),
    )

    draft_session.category_pick_count += 1
    draft_session.current_round = draft_session.category_pick_count // len(teams) + 1
    await record_event(
        session,
        draft_session=draft_session,
        event_type=DRAFT_EVENT_PICK_MADE,
        now_utc=now_utc,
        actor_id=acting_user_id,
        team_id=team.id,
        payload={
            "pick_number": pick_number,
            "round_number": round_number,
            "category": category,
            "user_id": picked_user_id,
        },
    )
    logger.info(
        "draft_pick_submitted",
        tournament_id=str(tournament.id),
        team_id=str(team.id),
        picked_user_id=picked_user_id,
        pick_number=pick_number,
        category=category,
    )

    category_advanced = await advance_past_exhausted_categories(
        session,
        draft_session=draft_session,
        tournament=tournament,
        teams=teams,
        actor_id=acting_user_id,
        now_utc=now_utc,
    )
    draft_completed = draft_session.status != DRAFT_STATUS_IN_PROGRESS
    next_team_id = None if draft_completed else next_picker(teams, pick_number + 1).id
    return DraftPickResult(
        pick=build_pick_snapshot(pick),
        session=build_session_snapshot(draft_session),
        category_advanced=category_advanced,
        draft_completed=draft_completed,
        next_team_id=next_team_id,
    )
