from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.draft_events import DraftEvent
from teamdraft.db.models.draft_picks import DraftPick
from teamdraft.db.models.draft_sessions import DraftSession
from teamdraft.db.models.registrations import Registration
from teamdraft.db.models.team_members import TeamMember
from teamdraft.db.models.teams import Team
from teamdraft.db.models.tournaments import Tournament
from teamdraft.db.repo.draft_events_repo import DraftEventsRepo
from teamdraft.db.repo.draft_picks_repo import DraftPicksRepo
from teamdraft.db.repo.draft_sessions_repo import DraftSessionsRepo
from teamdraft.db.repo.player_categories_repo import PlayerCategoriesRepo
from teamdraft.db.repo.registrations_repo import RegistrationsRepo
from teamdraft.db.repo.team_members_repo import TeamMembersRepo
from teamdraft.db.repo.tournaments_repo import TournamentsRepo
from teamdraft.draft.categories import next_category
from teamdraft.draft.constants import (
    DRAFT_EVENT_CATEGORY_ADVANCED,
    DRAFT_EVENT_DRAFT_COMPLETED,
    DRAFT_STATUS_COMPLETED,
)
from teamdraft.draft.errors import DraftSessionNotFoundError
from teamdraft.draft.types import (
    AvailablePlayer,
    DraftEventSnapshot,
    DraftPickSnapshot,
    DraftSessionSnapshot,
    TeamMemberSnapshot,
    TeamRosterSnapshot,
)
from teamdraft.tournaments.constants import TOURNAMENT_STATUS_TEAMS_FINALIZED
from teamdraft.tournaments.errors import TournamentNotFoundError
from teamdraft.tournaments.lifecycle import advance_status

logger = structlog.get_logger(__name__)


def build_session_snapshot(draft_session: DraftSession) -> DraftSessionSnapshot:
    return DraftSessionSnapshot(
        draft_session_id=draft_session.id,
        tournament_id=draft_session.tournament_id,
        status=draft_session.status,
        current_category=draft_session.current_category,
        current_round=draft_session.current_round,
        category_pick_count=draft_session.category_pick_count,
        pick_timer_seconds=draft_session.pick_timer_seconds,
        created_at=draft_session.created_at,
        started_at=draft_session.started_at,
        completed_at=draft_session.completed_at,
    )


def build_pick_snapshot(pick: DraftPick) -> DraftPickSnapshot:
    return DraftPickSnapshot(
        pick_id=pick.id,
        team_id=pick.team_id,
        user_id=pick.user_id,
        pick_number=pick.pick_number,
        round_number=pick.round_number,
        category=pick.category,
        picked_by=pick.picked_by,
        picked_at=pick.picked_at,
    )


def build_event_snapshot(event: DraftEvent) -> DraftEventSnapshot:
    return DraftEventSnapshot(
        event_id=event.id,
        event_type=event.event_type,
        actor_id=event.actor_id,
        team_id=event.team_id,
        payload=dict(event.payload),
        created_at=event.created_at,
    )


def build_roster_snapshots(
    teams: Sequence[Team],
    members: Iterable[TeamMember],
) -> tuple[TeamRosterSnapshot, ...]:
    members_by_team: dict[UUID, list[TeamMemberSnapshot]] = {team.id: [] for team in teams}
    for member in members:
        roster = members_by_team.get(member.team_id)
        if roster is None:
            continue
        roster.append(
            TeamMemberSnapshot(
                user_id=member.user_id,
                is_captain=member.is_captain,
                category_when_drafted=member.category_when_drafted,
                draft_round=member.draft_round,
                draft_pick_number=member.draft_pick_number,
            )
        )
    return tuple(
        TeamRosterSnapshot(
            team_id=team.id,
            name=team.name,
            captain_id=team.captain_id,
            draft_order=team.draft_order,
            members=tuple(
                sorted(
                    members_by_team[team.id],
                    key=lambda member: (not member.is_captain, member.draft_pick_number),
                )
            ),
        )
        for team in sorted(teams, key=lambda team: team.draft_order)
    )


def resolve_available_players(
    *,
    category: str,
    category_user_ids: Sequence[str],
    registrations: Sequence[Registration],
    unavailable_user_ids: Iterable[str],
) -> list[AvailablePlayer]:
    """Registered players of ``category`` who are neither captains nor already drafted.

    Order follows ``category_user_ids``.
    """
    registrations_by_user = {registration.user_id: registration for registration in registrations}
    unavailable = set(unavailable_user_ids)
    available: list[AvailablePlayer] = []
    for user_id in category_user_ids:
        registration = registrations_by_user.get(user_id)
        if registration is None or user_id in unavailable:
            continue
        available.append(
            AvailablePlayer(
                user_id=user_id,
                display_name=registration.display_name,
                avatar_url=registration.avatar_url,
                category=category,
            )
        )
    return available


async def load_available_players(
    session: AsyncSession,
    *,
    draft_session: DraftSession,
    teams: Sequence[Team],
    category: str,
) -> list[AvailablePlayer]:
    category_user_ids = await PlayerCategoriesRepo.list_user_ids_for_category(
        session,
        tournament_id=draft_session.tournament_id,
        category=category,
    )
    if not category_user_ids:
        return []
    registrations = await RegistrationsRepo.list_for_tournament(
        session,
        tournament_id=draft_session.tournament_id,
    )
    picks = await DraftPicksRepo.list_for_session(session, draft_session_id=draft_session.id)
    members = await TeamMembersRepo.list_for_teams(session, team_ids=[team.id for team in teams])
    unavailable_user_ids = {pick.user_id for pick in picks}
    unavailable_user_ids.update(member.user_id for member in members)
    unavailable_user_ids.update(team.captain_id for team in teams)
    return resolve_available_players(
        category=category,
        category_user_ids=category_user_ids,
        registrations=registrations,
        unavailable_user_ids=unavailable_user_ids,
    )


async def record_event(
    session: AsyncSession,
    *,
    draft_session: DraftSession,
    event_type: str,
    now_utc: datetime,
    actor_id: str | None = None,
    team_id: UUID | None = None,
    payload: dict[str, Any] | None = None,
) -> None:
    await DraftEventsRepo.create(
        session,
        event=DraftEvent(
            id=uuid4(),
            draft_session_id=draft_session.id,
            event_type=event_type,
            actor_id=actor_id,
            team_id=team_id,
            payload=payload or {},
            created_at=now_utc,
        ),
    )


async def advance_past_exhausted_categories(
    session: AsyncSession,
    *,
    draft_session: DraftSession,
    tournament: Tournament,
    teams: Sequence[Team],
    actor_id: str | None,
    now_utc: datetime,
) -> bool:
    """Move the session off empty tiers; complete the draft when no tier has players left.

    Returns ``True`` when the current category changed.
    """
    advanced = False
    while draft_session.current_category is not None:
        available = await load_available_players(
            session,
            draft_session=draft_session,
            teams=teams,
            category=draft_session.current_category,
        )
        if available:
            break

        previous_category = draft_session.current_category
        upcoming_category = next_category(previous_category)
        draft_session.current_category = upcoming_category
        draft_session.current_round = 1
        draft_session.category_pick_count = 0
        advanced = True

        if upcoming_category is not None:
            await record_event(
                session,
                draft_session=draft_session,
                event_type=DRAFT_EVENT_CATEGORY_ADVANCED,
                now_utc=now_utc,
                actor_id=actor_id,
                payload={"from": previous_category, "to": upcoming_category},
            )
            logger.info(
                "draft_category_advanced",
                tournament_id=str(draft_session.tournament_id),
                previous_category=previous_category,
                category=upcoming_category,
            )
            continue

        draft_session.status = DRAFT_STATUS_COMPLETED
        draft_session.completed_at = now_utc
        advance_status(tournament, target=TOURNAMENT_STATUS_TEAMS_FINALIZED, now_utc=now_utc)
        await record_event(
            session,
            draft_session=draft_session,
            event_type=DRAFT_EVENT_DRAFT_COMPLETED,
            now_utc=now_utc,
            actor_id=actor_id,
            payload={"last_category": previous_category},
        )
        logger.info(
            "draft_completed",
            tournament_id=str(draft_session.tournament_id),
            draft_session_id=str(draft_session.id),
        )
    return advanced


async def load_tournament(session: AsyncSession, tournament_id: UUID) -> Tournament:
    tournament = await TournamentsRepo.get_by_id(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return tournament


async def load_session_for_update(session: AsyncSession, tournament_id: UUID) -> DraftSession:
    draft_session = await DraftSessionsRepo.get_by_tournament_id_for_update(
        session,
        tournament_id=tournament_id,
    )
    if draft_session is None:
        raise DraftSessionNotFoundError
    return draft_session
