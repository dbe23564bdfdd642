from teamdraft.tournaments.captains import save_captain_ranking
from teamdraft.tournaments.categories import (
    assign_category,
    category_stats,
    list_categorized_players,
    list_uncategorized_players,
    remove_category,
)
from teamdraft.tournaments.lifecycle import (
    begin_categorizing,
    close_registration,
    create_tournament,
    get_tournament,
    list_admin_tournaments,
    list_public_tournaments,
    open_registration,
    update_map_pool,
)
from teamdraft.tournaments.registration import (
    list_registrations,
    register_player,
    update_registration,
    withdraw_registration,
)
from teamdraft.tournaments.teams import rename_team

__all__ = [
    "assign_category",
    "begin_categorizing",
    "category_stats",
    "close_registration",
    "create_tournament",
    "get_tournament",
    "list_admin_tournaments",
    "list_categorized_players",
    "list_public_tournaments",
    "list_registrations",
    "list_uncategorized_players",
    "open_registration",
    "register_player",
    "remove_category",
    "rename_team",
    "save_captain_ranking",
    "update_map_pool",
    "update_registration",
    "withdraw_registration",
]
