from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    match_id: UUID
    tournament_id: UUID
    phase: str
    round: int | None = None
    match_number: int
    team1_id: UUID | None = None
    team2_id: UUID | None = None
    team1_score: int
    team2_score: int
    winner_id: UUID | None = None
    status: str
    best_of: int
    scheduled_time: datetime | None = None


class BracketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    round_robin: list[MatchResponse]
    playoffs: list[MatchResponse]
    total_matches: int


class BracketDeleteResponse(BaseModel):
    matches_deleted: int


class StandingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_id: UUID
    team_name: str
    draft_order: int
    matches_played: int
    wins: int
    losses: int
    points: int
    games_won: int
    games_lost: int


class StandingsResponse(BaseModel):
    standings: list[StandingResponse]


class MatchListResponse(BaseModel):
    matches: list[MatchResponse]


class MatchResultRequest(BaseModel):
    team1_score: int = Field(ge=0, le=99)
    team2_score: int = Field(ge=0, le=99)
    winner_id: UUID


class MatchResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    match: MatchResponse
    grand_final: MatchResponse | None = None
    tournament_completed: bool


class MatchStatusRequest(BaseModel):
    status: str = Field(min_length=1, max_length=16)
