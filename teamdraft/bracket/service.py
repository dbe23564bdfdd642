from teamdraft.bracket.generator import (
    build_playoff_matches,
    build_round_robin_matches,
    delete_bracket,
    generate_bracket,
)
from teamdraft.bracket.playoffs import (
    assign_playoff_teams,
    propagate_semifinal_winners,
    seed_semifinals,
)
from teamdraft.bracket.results import (
    list_captain_scheduled_matches,
    list_matches,
    list_recent_matches,
    list_upcoming_matches,
    record_match_result,
    update_match_status,
    validate_match_result,
)
from teamdraft.bracket.standings import compute_standings, get_round_robin_standings

__all__ = [
    "assign_playoff_teams",
    "build_playoff_matches",
    "build_round_robin_matches",
    "compute_standings",
    "delete_bracket",
    "generate_bracket",
    "get_round_robin_standings",
    "list_captain_scheduled_matches",
    "list_matches",
    "list_recent_matches",
    "list_upcoming_matches",
    "propagate_semifinal_winners",
    "record_match_result",
    "seed_semifinals",
    "update_match_status",
    "validate_match_result",
]
