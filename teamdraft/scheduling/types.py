from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from teamdraft.bracket.types import MatchSnapshot


@dataclass(slots=True)
class ProposalSnapshot:
    proposal_id: UUID
    match_id: UUID
    tournament_id: UUID
    proposed_by: str
    proposed_time: datetime
    status: str
    notes: str | None
    response_notes: str | None
    responded_by: str | None
    responded_at: datetime | None
    created_at: datetime


@dataclass(slots=True)
class ProposalDecisionResult:
    proposal: ProposalSnapshot
    match: MatchSnapshot | None


@dataclass(slots=True)
class CounterProposalResult:
    countered: ProposalSnapshot
    proposal: ProposalSnapshot


@dataclass(slots=True)
class MatchParticipants:
    tournament_admin_id: str
    team1_captain_id: str
    team2_captain_id: str

    def is_captain(self, user_id: str) -> bool:
        return user_id in (self.team1_captain_id, self.team2_captain_id)

    def opponent_of(self, captain_id: str) -> str | None:
        if captain_id == self.team1_captain_id:
            return self.team2_captain_id
        if captain_id == self.team2_captain_id:
            return self.team1_captain_id
        return None
