from __future__ import annotations

TOURNAMENT_STATUS_DRAFT = "draft"
TOURNAMENT_STATUS_REGISTRATION_OPEN = "registration_open"
TOURNAMENT_STATUS_REGISTRATION_CLOSED = "registration_closed"
TOURNAMENT_STATUS_CATEGORIZING = "categorizing"
TOURNAMENT_STATUS_AWAITING_CAPTAIN_RANKING = "awaiting_captain_ranking"
TOURNAMENT_STATUS_DRAFT_READY = "draft_ready"
TOURNAMENT_STATUS_DRAFT_IN_PROGRESS = "draft_in_progress"
TOURNAMENT_STATUS_TEAMS_FINALIZED = "teams_finalized"
TOURNAMENT_STATUS_IN_PROGRESS = "in_progress"
TOURNAMENT_STATUS_COMPLETED = "completed"

TOURNAMENT_STATUS_SEQUENCE: tuple[str, ...] = (
    TOURNAMENT_STATUS_DRAFT,
    TOURNAMENT_STATUS_REGISTRATION_OPEN,
    TOURNAMENT_STATUS_REGISTRATION_CLOSED,
    TOURNAMENT_STATUS_CATEGORIZING,
    TOURNAMENT_STATUS_AWAITING_CAPTAIN_RANKING,
    TOURNAMENT_STATUS_DRAFT_READY,
    TOURNAMENT_STATUS_DRAFT_IN_PROGRESS,
    TOURNAMENT_STATUS_TEAMS_FINALIZED,
    TOURNAMENT_STATUS_IN_PROGRESS,
    TOURNAMENT_STATUS_COMPLETED,
)

TOURNAMENT_FORMAT_ROUND_ROBIN_GF = "round_robin_gf"
TOURNAMENT_TEAM_SIZE = 3
TOURNAMENT_MIN_MAP_POOL = 3
TOURNAMENT_NAME_MAX_LENGTH = 128
TOURNAMENT_LIST_LIMIT = 100
TEAM_NAME_MAX_LENGTH = 128

CATEGORY_S_TIER = "S-Tier"
CATEGORY_A_TIER = "A-Tier"
CATEGORY_B_TIER = "B-Tier"
CATEGORY_MISC = "Misc"
CATEGORIES: tuple[str, ...] = (CATEGORY_S_TIER, CATEGORY_A_TIER, CATEGORY_B_TIER, CATEGORY_MISC)

REGISTRATION_STATUS_APPROVED = "approved"
POSITION_FLANK = "flank"
POSITION_POCKET = "pocket"
POSITION_ANY = "any"
POSITIONS = frozenset({POSITION_FLANK, POSITION_POCKET, POSITION_ANY})
REGISTRATION_CIVS_PER_POSITION = 2
REGISTRATION_PREFERRED_MAPS = 3
REGISTRATION_NOTES_MAX_LENGTH = 1000


def status_index(status: str) -> int:
    return TOURNAMENT_STATUS_SEQUENCE.index(status)


def status_precedes(status: str, other: str) -> bool:
    return status_index(status) < status_index(other)
