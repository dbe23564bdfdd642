from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DraftSessionCreateRequest(BaseModel):
    pick_timer_seconds: int | None = Field(default=None, ge=10, le=3600)


class DraftPickRequest(BaseModel):
    team_id: UUID
    user_id: str = Field(min_length=1, max_length=64)


class DraftSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    draft_session_id: UUID
    tournament_id: UUID
    status: str
    current_category: str | None = None
    current_round: int
    category_pick_count: int
    pick_timer_seconds: int
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None


class DraftPickResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pick_id: UUID
    team_id: UUID
    user_id: str
    pick_number: int
    round_number: int
    category: str
    picked_by: str
    picked_at: datetime


class DraftPickResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pick: DraftPickResponse
    session: DraftSessionResponse
    category_advanced: bool
    draft_completed: bool
    next_team_id: UUID | None = None


class TeamMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    is_captain: bool
    category_when_drafted: str
    draft_round: int
    draft_pick_number: int


class TeamRosterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_id: UUID
    name: str
    captain_id: str
    draft_order: int
    members: list[TeamMemberResponse]


class AvailablePlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str
    avatar_url: str | None = None
    category: str


class DraftStateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session: DraftSessionResponse
    teams: list[TeamRosterResponse]
    picks: list[DraftPickResponse]
    current_team_id: UUID | None = None
    available_players: list[AvailablePlayerResponse]


class DraftEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: UUID
    event_type: str
    actor_id: str | None = None
    team_id: UUID | None = None
    payload: dict[str, Any]
    created_at: datetime


class DraftTimelineResponse(BaseModel):
    events: list[DraftEventResponse]


class PresenceResponse(BaseModel):
    online_user_ids: list[str]
