from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.bracket.errors import MatchNotFoundError
from teamdraft.db.models.matches import Match
from teamdraft.db.models.schedule_proposals import ScheduleProposal
from teamdraft.db.repo.matches_repo import MatchesRepo
from teamdraft.db.repo.schedule_proposals_repo import ScheduleProposalsRepo
from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.db.repo.tournaments_repo import TournamentsRepo
from teamdraft.scheduling.constants import PROPOSAL_NOTES_MAX_LENGTH
from teamdraft.scheduling.errors import (
    MatchNotSchedulableError,
    ProposalNotFoundError,
    ScheduleValidationError,
)
from teamdraft.scheduling.types import MatchParticipants, ProposalSnapshot
from teamdraft.tournaments.errors import TournamentNotFoundError


def build_proposal_snapshot(
    proposal: ScheduleProposal,
    *,
    tournament_id: UUID,
) -> ProposalSnapshot:
    return ProposalSnapshot(
        proposal_id=proposal.id,
        match_id=proposal.match_id,
        tournament_id=tournament_id,
        proposed_by=proposal.proposed_by,
        proposed_time=proposal.proposed_time,
        status=proposal.status,
        notes=proposal.notes,
        response_notes=proposal.response_notes,
        responded_by=proposal.responded_by,
        responded_at=proposal.responded_at,
        created_at=proposal.created_at,
    )


def validate_proposed_time(proposed_time: datetime, *, now_utc: datetime) -> None:
    if proposed_time.tzinfo is None or proposed_time.utcoffset() is None:
        raise ScheduleValidationError("proposed time must include a timezone")
    if proposed_time <= now_utc:
        raise ScheduleValidationError("proposed time must be in the future")


def normalize_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    resolved = notes.strip()
    if not resolved:
        return None
    if len(resolved) > PROPOSAL_NOTES_MAX_LENGTH:
        raise ScheduleValidationError(
            f"notes must be at most {PROPOSAL_NOTES_MAX_LENGTH} characters"
        )
    return resolved


async def load_match(session: AsyncSession, match_id: UUID, *, for_update: bool = False) -> Match:
    if for_update:
        match = await MatchesRepo.get_by_id_for_update(session, match_id)
    else:
        match = await MatchesRepo.get_by_id(session, match_id)
    if match is None:
        raise MatchNotFoundError
    return match


async def load_proposal_for_update(session: AsyncSession, proposal_id: UUID) -> ScheduleProposal:
    proposal = await ScheduleProposalsRepo.get_by_id_for_update(session, proposal_id)
    if proposal is None:
        raise ProposalNotFoundError
    return proposal


async def load_tournament_admin_id(session: AsyncSession, tournament_id: UUID) -> str:
    tournament = await TournamentsRepo.get_by_id(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return tournament.admin_id


async def load_match_participants(session: AsyncSession, match: Match) -> MatchParticipants:
    if match.team1_id is None or match.team2_id is None:
        raise MatchNotSchedulableError("both teams must be known before scheduling")
    team1 = await TeamsRepo.get_by_id(session, match.team1_id)
    team2 = await TeamsRepo.get_by_id(session, match.team2_id)
    if team1 is None or team2 is None:
        raise MatchNotSchedulableError("match references a missing team")
    return MatchParticipants(
        tournament_admin_id=await load_tournament_admin_id(session, match.tournament_id),
        team1_captain_id=team1.captain_id,
        team2_captain_id=team2.captain_id,
    )
