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

__all__ = [
    "DraftEvent",
    "DraftPick",
    "DraftSession",
    "Match",
    "PlayerCategory",
    "Registration",
    "ScheduleProposal",
    "Team",
    "TeamMember",
    "Tournament",
]
