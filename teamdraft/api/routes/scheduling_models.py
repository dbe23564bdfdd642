from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from teamdraft.api.routes.bracket_models import MatchResponse


class ProposalCreateRequest(BaseModel):
    proposed_time: datetime
    notes: str | None = Field(default=None, max_length=500)


class ProposalRespondRequest(BaseModel):
    decision: str = Field(min_length=1, max_length=16)
    notes: str | None = Field(default=None, max_length=500)


class ScheduleSetRequest(BaseModel):
    scheduled_time: datetime


class ProposalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    proposal_id: UUID
    match_id: UUID
    tournament_id: UUID
    proposed_by: str
    proposed_time: datetime
    status: str
    notes: str | None = None
    response_notes: str | None = None
    responded_by: str | None = None
    responded_at: datetime | None = None
    created_at: datetime


class ProposalListResponse(BaseModel):
    proposals: list[ProposalResponse]


class ProposalDecisionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    proposal: ProposalResponse
    match: MatchResponse | None = None


class CounterProposalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    countered: ProposalResponse
    proposal: ProposalResponse
