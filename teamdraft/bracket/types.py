from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class PlannedMatch:
    phase: str
    round: int | None
    match_number: int
    best_of: int
    team1_id: UUID | None
    team2_id: UUID | None


@dataclass(slots=True)
class MatchSnapshot:
    match_id: UUID
    tournament_id: UUID
    phase: str
    round: int | None
    match_number: int
    team1_id: UUID | None
    team2_id: UUID | None
    team1_score: int
    team2_score: int
    winner_id: UUID | None
    status: str
    best_of: int
    scheduled_time: datetime | None


@dataclass(slots=True)
class BracketResult:
    round_robin: tuple[MatchSnapshot, ...]
    playoffs: tuple[MatchSnapshot, ...]
    total_matches: int


@dataclass(slots=True)
class TeamStanding:
    team_id: UUID
    team_name: str
    draft_order: int
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    points: int = 0
    games_won: int = 0
    games_lost: int = 0


@dataclass(slots=True)
class MatchResultOutcome:
    match: MatchSnapshot
    grand_final: MatchSnapshot | None
    tournament_completed: bool
