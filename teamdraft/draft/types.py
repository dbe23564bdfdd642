from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(slots=True)
class DraftSessionSnapshot:
    draft_session_id: UUID
    tournament_id: UUID
    status: str
    current_category: str | None
    current_round: int
    category_pick_count: int
    pick_timer_seconds: int
    created_at: datetime
    started_at: datetime | None
    completed_at: datetime | None


@dataclass(slots=True)
class DraftPickSnapshot:
    pick_id: UUID
    team_id: UUID
    user_id: str
    pick_number: int
    round_number: int
    category: str
    picked_by: str
    picked_at: datetime


@dataclass(slots=True)
class TeamMemberSnapshot:
    user_id: str
    is_captain: bool
    category_when_drafted: str
    draft_round: int
    draft_pick_number: int


@dataclass(slots=True)
class TeamRosterSnapshot:
    team_id: UUID
    name: str
    captain_id: str
    draft_order: int
    members: tuple[TeamMemberSnapshot, ...]


@dataclass(slots=True)
class AvailablePlayer:
    user_id: str
    display_name: str
    avatar_url: str | None
    category: str


@dataclass(slots=True)
class DraftPickResult:
    pick: DraftPickSnapshot
    session: DraftSessionSnapshot
    category_advanced: bool
    draft_completed: bool
    next_team_id: UUID | None


@dataclass(slots=True)
class DraftStateSnapshot:
    session: DraftSessionSnapshot
    teams: tuple[TeamRosterSnapshot, ...]
    picks: tuple[DraftPickSnapshot, ...]
    current_team_id: UUID | None
    available_players: tuple[AvailablePlayer, ...]


@dataclass(slots=True)
class DraftEventSnapshot:
    event_id: UUID
    event_type: str
    actor_id: str | None
    team_id: UUID | None
    payload: dict[str, Any]
    created_at: datetime
