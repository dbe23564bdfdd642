from __future__ import annotations

from teamdraft.tournaments.constants import (
    CATEGORY_A_TIER,
    CATEGORY_B_TIER,
    CATEGORY_MISC,
    CATEGORY_S_TIER,
)

DRAFT_STATUS_WAITING_FOR_CAPTAINS = "waiting_for_captains"
DRAFT_STATUS_IN_PROGRESS = "in_progress"
DRAFT_STATUS_COMPLETED = "completed"

# Captains are pre-assigned from S-Tier; the draft walks the remaining tiers in order.
DRAFT_CATEGORY_ORDER: tuple[str, ...] = (CATEGORY_A_TIER, CATEGORY_B_TIER, CATEGORY_MISC)
DRAFT_FIRST_CATEGORY = CATEGORY_A_TIER
CAPTAIN_CATEGORY = CATEGORY_S_TIER

CAPTAIN_DRAFT_ROUND = 0
CAPTAIN_DRAFT_PICK_NUMBER = 0
DEFAULT_TEAM_NAME_TEMPLATE = "Team {draft_order}"

DRAFT_EVENT_SESSION_CREATED = "session_created"
DRAFT_EVENT_DRAFT_STARTED = "draft_started"
DRAFT_EVENT_PICK_MADE = "pick_made"
DRAFT_EVENT_CATEGORY_ADVANCED = "category_advanced"
DRAFT_EVENT_DRAFT_COMPLETED = "draft_completed"
