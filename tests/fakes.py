from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from teamdraft.db.models.draft_events import DraftEvent
from teamdraft.db.models.draft_picks import DraftPick
from teamdraft.db.models.draft_sessions import DraftSession
from teamdraft.db.models.matches import Match
from teamdraft.db.models.player_categories import PlayerCategory
from teamdraft.db.models.registrations import Registration
from teamdraft.db.models.schedule_proposals import ScheduleProposal
from teamdraft.db.models.team_members import TeamMember
from teamdraft.db.models.teams import Team
from teamdraft.db.models.tournaments import Tournament
from teamdraft.db.repo.draft_events_repo import DraftEventsRepo
from teamdraft.db.repo.draft_picks_repo import DraftPicksRepo
from teamdraft.db.repo.draft_sessions_repo import DraftSessionsRepo
from teamdraft.db.repo.matches_repo import MatchesRepo
from teamdraft.db.repo.player_categories_repo import PlayerCategoriesRepo
from teamdraft.db.repo.registrations_repo import RegistrationsRepo
from teamdraft.db.repo.schedule_proposals_repo import ScheduleProposalsRepo
from teamdraft.db.repo.team_members_repo import TeamMembersRepo
from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.db.repo.tournaments_repo import TournamentsRepo

UTC = timezone.utc
NOW = datetime(2026, 3, 1, 18, 0, tzinfo=UTC)
ADMIN_ID = "admin-1"


class InMemoryStore:
    """Row storage mirroring the unique constraints the repos rely on."""

    def __init__(self) -> None:
        self.tournaments: dict[UUID, Tournament] = {}
        self.registrations: list[Registration] = []
        self.categories: list[PlayerCategory] = []
        self.teams: list[Team] = []
        self.members: list[TeamMember] = []
        self.draft_sessions: list[DraftSession] = []
        self.picks: list[DraftPick] = []
        self.events: list[DraftEvent] = []
        self.matches: list[Match] = []
        self.proposals: list[ScheduleProposal] = []

    # tournaments

    async def create_tournament(self, session, *, tournament: Tournament) -> Tournament:
        self.tournaments[tournament.id] = tournament
        return tournament

    async def get_tournament(self, session, tournament_id: UUID) -> Tournament | None:
        return self.tournaments.get(tournament_id)

    async def list_admin_tournaments(
        self,
        session,
        *,
        admin_id: str,
        limit: int,
    ) -> list[Tournament]:
        rows = [item for item in self.tournaments.values() if item.admin_id == admin_id]
        rows.sort(key=lambda item: item.created_at, reverse=True)
        return rows[:limit]

    async def list_tournaments_excluding(
        self,
        session,
        *,
        excluded_status: str,
        limit: int,
    ) -> list[Tournament]:
        rows = [item for item in self.tournaments.values() if item.status != excluded_status]
        rows.sort(key=lambda item: item.created_at, reverse=True)
        return rows[:limit]

    # registrations

    async def create_registration_once(self, session, *, registration: Registration) -> bool:
        if any(
            item.tournament_id == registration.tournament_id
            and item.user_id == registration.user_id
            for item in self.registrations
        ):
            return False
        self.registrations.append(registration)
        return True

    async def get_registration(
        self,
        session,
        *,
        tournament_id: UUID,
        user_id: str,
    ) -> Registration | None:
        for item in self.registrations:
            if item.tournament_id == tournament_id and item.user_id == user_id:
                return item
        return None

    async def list_registrations(self, session, *, tournament_id: UUID) -> list[Registration]:
        return sorted(
            (item for item in self.registrations if item.tournament_id == tournament_id),
            key=lambda item: (item.registered_at, item.user_id),
        )

    async def delete_registration(self, session, *, tournament_id: UUID, user_id: str) -> int:
        before = len(self.registrations)
        self.registrations = [
            item
            for item in self.registrations
            if not (item.tournament_id == tournament_id and item.user_id == user_id)
        ]
        return before - len(self.registrations)

    # categories

    async def upsert_category(
        self,
        session,
        *,
        tournament_id: UUID,
        user_id: str,
        category: str,
        assigned_by: str,
        assigned_at: datetime,
    ) -> None:
        for item in self.categories:
            if item.tournament_id == tournament_id and item.user_id == user_id:
                item.category = category
                item.assigned_by = assigned_by
                item.assigned_at = assigned_at
                return
        self.categories.append(
            PlayerCategory(
                tournament_id=tournament_id,
                user_id=user_id,
                category=category,
                assigned_by=assigned_by,
                assigned_at=assigned_at,
            )
        )

    async def delete_category(self, session, *, tournament_id: UUID, user_id: str) -> int:
        before = len(self.categories)
        self.categories = [
            item
            for item in self.categories
            if not (item.tournament_id == tournament_id and item.user_id == user_id)
        ]
        return before - len(self.categories)

    async def list_categories(self, session, *, tournament_id: UUID) -> list[PlayerCategory]:
        return sorted(
            (item for item in self.categories if item.tournament_id == tournament_id),
            key=lambda item: (item.category, item.assigned_at),
        )

    async def list_category_user_ids(
        self,
        session,
        *,
        tournament_id: UUID,
        category: str,
    ) -> list[str]:
        rows = sorted(
            (
                item
                for item in self.categories
                if item.tournament_id == tournament_id and item.category == category
            ),
            key=lambda item: (item.assigned_at, item.user_id),
        )
        return [item.user_id for item in rows]

    # teams and members

    async def create_teams(self, session, *, teams: list[Team]) -> list[Team]:
        self.teams.extend(teams)
        return teams

    async def get_team(self, session, team_id: UUID) -> Team | None:
        return next((team for team in self.teams if team.id == team_id), None)

    async def list_teams(self, session, *, tournament_id: UUID) -> list[Team]:
        return sorted(
            (team for team in self.teams if team.tournament_id == tournament_id),
            key=lambda team: team.draft_order,
        )

    async def reassign_draft_orders(
        self,
        session,
        *,
        teams: list[Team],
        draft_orders: dict[UUID, int],
    ) -> None:
        for team in teams:
            team.draft_order = draft_orders[team.id]

    async def create_member(self, session, *, member: TeamMember) -> TeamMember:
        if any(
            item.team_id == member.team_id and item.user_id == member.user_id
            for item in self.members
        ):
            raise AssertionError("duplicate team member")
        self.members.append(member)
        return member

    async def create_members(self, session, *, members: list[TeamMember]) -> list[TeamMember]:
        for member in members:
            await self.create_member(session, member=member)
        return members

    async def list_members(self, session, *, team_ids: list[UUID]) -> list[TeamMember]:
        return [member for member in self.members if member.team_id in team_ids]

    # draft

    async def create_draft_session_once(self, session, *, draft_session: DraftSession) -> bool:
        if any(item.tournament_id == draft_session.tournament_id for item in self.draft_sessions):
            return False
        self.draft_sessions.append(draft_session)
        return True

    async def get_draft_session(self, session, *, tournament_id: UUID) -> DraftSession | None:
        return next(
            (item for item in self.draft_sessions if item.tournament_id == tournament_id),
            None,
        )

    async def create_pick_once(self, session, *, pick: DraftPick) -> bool:
        for item in self.picks:
            if item.draft_session_id != pick.draft_session_id:
                continue
            if item.pick_number == pick.pick_number or item.user_id == pick.user_id:
                return False
        self.picks.append(pick)
        return True

    async def list_picks(self, session, *, draft_session_id: UUID) -> list[DraftPick]:
        return sorted(
            (pick for pick in self.picks if pick.draft_session_id == draft_session_id),
            key=lambda pick: pick.pick_number,
        )

    async def get_pick_by_number(
        self,
        session,
        *,
        draft_session_id: UUID,
        pick_number: int,
    ) -> DraftPick | None:
        return next(
            (
                pick
                for pick in self.picks
                if pick.draft_session_id == draft_session_id and pick.pick_number == pick_number
            ),
            None,
        )

    async def create_event(self, session, *, event: DraftEvent) -> DraftEvent:
        self.events.append(event)
        return event

    async def list_events(self, session, *, draft_session_id: UUID) -> list[DraftEvent]:
        return [event for event in self.events if event.draft_session_id == draft_session_id]

    # matches

    async def create_matches(self, session, *, matches: list[Match]) -> list[Match]:
        self.matches.extend(matches)
        return matches

    async def count_matches(self, session, *, tournament_id: UUID) -> int:
        return len([match for match in self.matches if match.tournament_id == tournament_id])

    async def get_match(self, session, match_id: UUID) -> Match | None:
        return next((match for match in self.matches if match.id == match_id), None)

    async def list_matches(self, session, *, tournament_id: UUID) -> list[Match]:
        return sorted(
            (match for match in self.matches if match.tournament_id == tournament_id),
            key=lambda match: (match.phase, match.match_number),
        )

    async def list_matches_by_phase(
        self,
        session,
        *,
        tournament_id: UUID,
        phase: str,
    ) -> list[Match]:
        return sorted(
            (
                match
                for match in self.matches
                if match.tournament_id == tournament_id and match.phase == phase
            ),
            key=lambda match: match.match_number,
        )

    async def list_completed_matches_by_phase(
        self,
        session,
        *,
        tournament_id: UUID,
        phase: str,
    ) -> list[Match]:
        matches = await self.list_matches_by_phase(
            session,
            tournament_id=tournament_id,
            phase=phase,
        )
        return [match for match in matches if match.status == "completed"]

    async def list_upcoming_matches(
        self,
        session,
        *,
        tournament_id: UUID,
        now_utc: datetime,
        limit: int,
    ) -> list[Match]:
        upcoming = sorted(
            (
                match
                for match in self.matches
                if match.tournament_id == tournament_id
                and match.status in ("scheduled", "in_progress")
                and match.scheduled_time is not None
                and match.scheduled_time >= now_utc
            ),
            key=lambda match: match.scheduled_time,
        )
        return upcoming[: max(1, int(limit))]

    async def list_captain_scheduled_matches(
        self,
        session,
        *,
        captain_id: str,
        limit: int,
    ) -> list[Match]:
        team_ids = {team.id for team in self.teams if team.captain_id == captain_id}
        scheduled = sorted(
            (
                match
                for match in self.matches
                if (match.team1_id in team_ids or match.team2_id in team_ids)
                and match.status in ("scheduled", "in_progress")
                and match.scheduled_time is not None
            ),
            key=lambda match: match.scheduled_time,
        )
        return scheduled[: max(1, int(limit))]

    async def list_recent_completed_matches(
        self,
        session,
        *,
        tournament_id: UUID,
        limit: int,
    ) -> list[Match]:
        completed = sorted(
            (
                match
                for match in self.matches
                if match.tournament_id == tournament_id and match.status == "completed"
            ),
            key=lambda match: match.updated_at,
            reverse=True,
        )
        return completed[: max(1, int(limit))]

    async def delete_matches(self, session, *, tournament_id: UUID) -> int:
        before = len(self.matches)
        self.matches = [match for match in self.matches if match.tournament_id != tournament_id]
        return before - len(self.matches)

    # proposals

    async def create_pending_proposal_once(self, session, *, proposal: ScheduleProposal) -> bool:
        if any(
            item.match_id == proposal.match_id
            and item.proposed_by == proposal.proposed_by
            and item.status == "pending"
            for item in self.proposals
        ):
            return False
        self.proposals.append(proposal)
        return True

    async def get_proposal(self, session, proposal_id: UUID) -> ScheduleProposal | None:
        return next((item for item in self.proposals if item.id == proposal_id), None)

    async def list_proposals(self, session, *, match_id: UUID) -> list[ScheduleProposal]:
        return sorted(
            (item for item in self.proposals if item.match_id == match_id),
            key=lambda item: item.created_at,
            reverse=True,
        )

    async def list_due_proposals(
        self,
        session,
        *,
        now_utc: datetime,
        limit: int,
    ) -> list[ScheduleProposal]:
        due = sorted(
            (
                item
                for item in self.proposals
                if item.status == "pending" and item.proposed_time <= now_utc
            ),
            key=lambda item: item.proposed_time,
        )
        return due[: max(1, int(limit))]

    async def delete_proposals(self, session, *, tournament_id: UUID) -> int:
        match_ids = {match.id for match in self.matches if match.tournament_id == tournament_id}
        before = len(self.proposals)
        self.proposals = [item for item in self.proposals if item.match_id not in match_ids]
        return before - len(self.proposals)


def install_fake_repos(monkeypatch) -> InMemoryStore:
    store = InMemoryStore()
    patches = {
        TournamentsRepo: {
            "create": store.create_tournament,
            "get_by_id": store.get_tournament,
            "get_by_id_for_update": store.get_tournament,
            "list_for_admin": store.list_admin_tournaments,
            "list_excluding_status": store.list_tournaments_excluding,
        },
        RegistrationsRepo: {
            "create_once": store.create_registration_once,
            "get_for_user_for_update": store.get_registration,
            "list_for_tournament": store.list_registrations,
            "delete_for_user": store.delete_registration,
        },
        PlayerCategoriesRepo: {
            "upsert": store.upsert_category,
            "delete_for_user": store.delete_category,
            "list_for_tournament": store.list_categories,
            "list_user_ids_for_category": store.list_category_user_ids,
        },
        TeamsRepo: {
            "create_many": store.create_teams,
            "get_by_id": store.get_team,
            "get_by_id_for_update": store.get_team,
            "list_for_tournament": store.list_teams,
            "list_for_tournament_for_update": store.list_teams,
            "reassign_draft_orders": store.reassign_draft_orders,
        },
        TeamMembersRepo: {
            "create": store.create_member,
            "create_many": store.create_members,
            "list_for_teams": store.list_members,
        },
        DraftSessionsRepo: {
            "create_once": store.create_draft_session_once,
            "get_by_tournament_id": store.get_draft_session,
            "get_by_tournament_id_for_update": store.get_draft_session,
        },
        DraftPicksRepo: {
            "create_once": store.create_pick_once,
            "list_for_session": store.list_picks,
            "get_by_pick_number": store.get_pick_by_number,
        },
        DraftEventsRepo: {
            "create": store.create_event,
            "list_for_session": store.list_events,
        },
        MatchesRepo: {
            "create_many": store.create_matches,
            "count_for_tournament": store.count_matches,
            "get_by_id": store.get_match,
            "get_by_id_for_update": store.get_match,
            "list_for_tournament": store.list_matches,
            "list_by_phase_for_update": store.list_matches_by_phase,
            "list_completed_by_phase": store.list_completed_matches_by_phase,
            "list_upcoming_scheduled": store.list_upcoming_matches,
            "list_scheduled_for_captain": store.list_captain_scheduled_matches,
            "list_recent_completed": store.list_recent_completed_matches,
            "delete_for_tournament": store.delete_matches,
        },
        ScheduleProposalsRepo: {
            "create_pending_once": store.create_pending_proposal_once,
            "get_by_id": store.get_proposal,
            "get_by_id_for_update": store.get_proposal,
            "list_for_match": store.list_proposals,
            "list_pending_due_for_update": store.list_due_proposals,
            "delete_for_tournament": store.delete_proposals,
        },
    }
    for repo, methods in patches.items():
        for name, replacement in methods.items():
            monkeypatch.setattr(repo, name, replacement)
    return store


def make_tournament(
    store: InMemoryStore,
    *,
    status: str,
    admin_id: str = ADMIN_ID,
    map_pool: Iterable[str] = ("Arabia", "Arena", "Nomad"),
) -> Tournament:
    tournament = Tournament(
        id=uuid4(),
        name="Winter Cup",
        description=None,
        admin_id=admin_id,
        status=status,
        format="round_robin_gf",
        team_size=3,
        map_pool=list(map_pool),
        created_at=NOW,
        updated_at=NOW,
    )
    store.tournaments[tournament.id] = tournament
    return tournament


def make_registration(
    store: InMemoryStore,
    tournament: Tournament,
    user_id: str,
    *,
    offset_seconds: int = 0,
) -> Registration:
    registration = Registration(
        id=uuid4(),
        tournament_id=tournament.id,
        user_id=user_id,
        display_name=f"Player {user_id}",
        avatar_url=None,
        profile_url=f"https://aoe2.net/profile/{user_id}",
        preferred_position="any",
        preferred_civs_flank=["Franks", "Huns"],
        preferred_civs_pocket=["Britons", "Mayans"],
        preferred_maps=list(tournament.map_pool)[:3],
        notes=None,
        status="approved",
        registered_at=NOW + timedelta(seconds=offset_seconds),
        updated_at=NOW,
    )
    store.registrations.append(registration)
    return registration


def seed_player(
    store: InMemoryStore,
    tournament: Tournament,
    user_id: str,
    category: str,
    *,
    offset_seconds: int = 0,
) -> None:
    make_registration(store, tournament, user_id, offset_seconds=offset_seconds)
    store.categories.append(
        PlayerCategory(
            tournament_id=tournament.id,
            user_id=user_id,
            category=category,
            assigned_by=tournament.admin_id,
            assigned_at=NOW + timedelta(seconds=offset_seconds),
        )
    )


def make_teams(store: InMemoryStore, tournament: Tournament, count: int) -> list[Team]:
    teams = [
        Team(
            id=uuid4(),
            tournament_id=tournament.id,
            captain_id=f"captain-{order}",
            name=f"Team {order}",
            draft_order=order,
            created_at=NOW,
        )
        for order in range(1, count + 1)
    ]
    store.teams.extend(teams)
    for team in teams:
        store.members.append(
            TeamMember(
                team_id=team.id,
                user_id=team.captain_id,
                is_captain=True,
                category_when_drafted="S-Tier",
                draft_round=0,
                draft_pick_number=0,
                joined_at=NOW,
            )
        )
    return teams
