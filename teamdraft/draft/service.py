from teamdraft.draft.categories import next_category
from teamdraft.draft.internal import resolve_available_players
from teamdraft.draft.order import next_picker, round_number_for_pick
from teamdraft.draft.picks import submit_pick
from teamdraft.draft.queries import get_draft_state, get_draft_timeline
from teamdraft.draft.setup import create_draft_session, start_draft

__all__ = [
    "create_draft_session",
    "get_draft_state",
    "get_draft_timeline",
    "next_category",
    "next_picker",
    "resolve_available_players",
    "round_number_for_pick",
    "start_draft",
    "submit_pick",
]
