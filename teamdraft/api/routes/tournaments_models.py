from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TournamentCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    map_pool: list[str] = Field(min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=4000)


class MapPoolUpdateRequest(BaseModel):
    map_pool: list[str] = Field(min_length=1, max_length=64)


class TournamentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tournament_id: UUID
    name: str
    description: str | None = None
    admin_id: str
    status: str
    format: str
    team_size: int
    map_pool: list[str]
    created_at: datetime
    updated_at: datetime


class TournamentListResponse(BaseModel):
    tournaments: list[TournamentResponse]


class RegistrationRequest(BaseModel):
    display_name: str = Field(min_length=1, max_length=128)
    avatar_url: str | None = Field(default=None, max_length=512)
    profile_url: str = Field(max_length=512)
    preferred_position: str = Field(max_length=16)
    preferred_civs_flank: list[str] = Field(default_factory=list, max_length=16)
    preferred_civs_pocket: list[str] = Field(default_factory=list, max_length=16)
    preferred_maps: list[str] = Field(default_factory=list, max_length=16)
    notes: str | None = Field(default=None, max_length=1000)


class RegistrationUpdateRequest(BaseModel):
    profile_url: str = Field(max_length=512)
    preferred_position: str = Field(max_length=16)
    preferred_civs_flank: list[str] = Field(default_factory=list, max_length=16)
    preferred_civs_pocket: list[str] = Field(default_factory=list, max_length=16)
    preferred_maps: list[str] = Field(default_factory=list, max_length=16)
    notes: str | None = Field(default=None, max_length=1000)


class RegistrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    registration_id: UUID
    tournament_id: UUID
    user_id: str
    display_name: str
    avatar_url: str | None = None
    profile_url: str
    preferred_position: str
    preferred_civs_flank: list[str]
    preferred_civs_pocket: list[str]
    preferred_maps: list[str]
    notes: str | None = None
    registered_at: datetime


class RegistrationListResponse(BaseModel):
    registrations: list[RegistrationResponse]


class CategoryAssignRequest(BaseModel):
    category: str = Field(min_length=1, max_length=16)


class CategorizedPlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str
    avatar_url: str | None = None
    category: str | None = None


class CategoriesResponse(BaseModel):
    categories: dict[str, list[CategorizedPlayerResponse]]
    uncategorized: list[CategorizedPlayerResponse]
    stats: dict[str, int]


class CaptainRankingRequest(BaseModel):
    captain_ids: list[str] = Field(min_length=1, max_length=64)


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_id: UUID
    tournament_id: UUID
    captain_id: str
    name: str
    draft_order: int


class TeamRenameRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)


class CaptainRankingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tournament: TournamentResponse
    teams: list[TeamResponse]
    teams_created: bool
