from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(slots=True)
class TournamentSnapshot:
    tournament_id: UUID
    name: str
    description: str | None
    admin_id: str
    status: str
    format: str
    team_size: int
    map_pool: tuple[str, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class RegistrationPreferences:
    profile_url: str
    preferred_position: str
    preferred_civs_flank: list[str]
    preferred_civs_pocket: list[str]
    preferred_maps: list[str]
    notes: str | None = None


@dataclass(slots=True)
class PlayerIdentity:
    user_id: str
    display_name: str
    avatar_url: str | None = None


@dataclass(slots=True)
class RegistrationSnapshot:
    registration_id: UUID
    tournament_id: UUID
    user_id: str
    display_name: str
    avatar_url: str | None
    profile_url: str
    preferred_position: str
    preferred_civs_flank: tuple[str, ...]
    preferred_civs_pocket: tuple[str, ...]
    preferred_maps: tuple[str, ...]
    notes: str | None
    registered_at: datetime


@dataclass(slots=True)
class CategorizedPlayer:
    user_id: str
    display_name: str
    avatar_url: str | None
    category: str | None


@dataclass(slots=True)
class TeamSnapshot:
    team_id: UUID
    tournament_id: UUID
    captain_id: str
    name: str
    draft_order: int


@dataclass(slots=True)
class CaptainRankingResult:
    tournament: TournamentSnapshot
    teams: tuple[TeamSnapshot, ...]
    teams_created: bool
