from __future__ import annotations

MATCH_PHASE_ROUND_ROBIN = "round_robin"
MATCH_PHASE_SEMIFINAL = "semifinal"
MATCH_PHASE_GRANDFINAL = "grandfinal"

MATCH_STATUS_PENDING = "pending"
MATCH_STATUS_SCHEDULED = "scheduled"
MATCH_STATUS_IN_PROGRESS = "in_progress"
MATCH_STATUS_COMPLETED = "completed"
MATCH_STATUS_DISPUTED = "disputed"
MATCH_STATUS_CANCELLED = "cancelled"

MATCH_CLOSED_STATUSES = frozenset({MATCH_STATUS_COMPLETED, MATCH_STATUS_CANCELLED})

# Round robin is an AP3 series tracked as one aggregate score.
ROUND_ROBIN_BEST_OF = 1
SEMIFINAL_BEST_OF = 3
GRANDFINAL_BEST_OF = 5
PLAYOFF_ROUND = 1

SEMIFINAL_TOP_SEED_MATCH_NUMBER = 1
SEMIFINAL_MIDDLE_SEED_MATCH_NUMBER = 2
GRANDFINAL_MATCH_NUMBER = 1

BRACKET_MIN_TEAMS = 4
PLAYOFF_SEEDS = 4
RECENT_MATCHES_LIMIT = 5
CAPTAIN_SCHEDULED_MATCHES_LIMIT = 50
POINTS_PER_WIN = 3

MATCH_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    MATCH_STATUS_PENDING: frozenset(
        {MATCH_STATUS_IN_PROGRESS, MATCH_STATUS_DISPUTED, MATCH_STATUS_CANCELLED}
    ),
    MATCH_STATUS_SCHEDULED: frozenset(
        {MATCH_STATUS_IN_PROGRESS, MATCH_STATUS_DISPUTED, MATCH_STATUS_CANCELLED}
    ),
    MATCH_STATUS_IN_PROGRESS: frozenset({MATCH_STATUS_DISPUTED, MATCH_STATUS_CANCELLED}),
    MATCH_STATUS_DISPUTED: frozenset(
        {
            MATCH_STATUS_PENDING,
            MATCH_STATUS_SCHEDULED,
            MATCH_STATUS_IN_PROGRESS,
            MATCH_STATUS_CANCELLED,
        }
    ),
}
