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

__all__ = [
    "DraftEventsRepo",
    "DraftPicksRepo",
    "DraftSessionsRepo",
    "MatchesRepo",
    "PlayerCategoriesRepo",
    "RegistrationsRepo",
    "ScheduleProposalsRepo",
    "TeamMembersRepo",
    "TeamsRepo",
    "TournamentsRepo",
]
