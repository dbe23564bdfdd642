"""Match scheduling proposals.

A proposal is ``pending`` until it is approved, rejected, countered or expired;
all four outcomes are terminal. Each captain holds at most one pending proposal
per match, which the partial unique index on ``schedule_proposals`` enforces.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.bracket.constants import MATCH_CLOSED_STATUSES, MATCH_STATUS_SCHEDULED
from teamdraft.bracket.internal import build_match_snapshot
from teamdraft.bracket.types import MatchSnapshot
from teamdraft.db.models.matches import Match
from teamdraft.db.models.schedule_proposals import ScheduleProposal
from teamdraft.db.repo.schedule_proposals_repo import ScheduleProposalsRepo
from teamdraft.scheduling.constants import (
    PROPOSABLE_MATCH_STATUSES,
    PROPOSAL_DECISIONS,
    PROPOSAL_STATUS_APPROVED,
    PROPOSAL_STATUS_COUNTERED,
    PROPOSAL_STATUS_PENDING,
)
from teamdraft.scheduling.errors import (
    DuplicatePendingProposalError,
    MatchNotSchedulableError,
    ProposalExpiredError,
    ProposalNotPendingError,
    ScheduleAccessError,
    ScheduleValidationError,
)
from teamdraft.scheduling.internal import (
    build_proposal_snapshot,
    load_match,
    load_match_participants,
    load_proposal_for_update,
    load_tournament_admin_id,
    normalize_notes,
    validate_proposed_time,
)
from teamdraft.scheduling.types import (
    CounterProposalResult,
    ProposalDecisionResult,
    ProposalSnapshot,
)

logger = structlog.get_logger(__name__)


def _ensure_schedulable(match: Match) -> None:
    if match.status not in PROPOSABLE_MATCH_STATUSES:
        raise MatchNotSchedulableError(f"match is {match.status}")


async def _create_pending(
    session: AsyncSession,
    *,
    match_id: UUID,
    proposed_by: str,
    proposed_time: datetime,
    notes: str | None,
    now_utc: datetime,
) -> ScheduleProposal:
    proposal = ScheduleProposal(
        id=uuid4(),
        match_id=match_id,
        proposed_by=proposed_by,
        proposed_time=proposed_time,
        status=PROPOSAL_STATUS_PENDING,
        notes=notes,
        response_notes=None,
        responded_by=None,
        responded_at=None,
        created_at=now_utc,
    )
    created = await ScheduleProposalsRepo.create_pending_once(session, proposal=proposal)
    if not created:
        raise DuplicatePendingProposalError
    return proposal


def _resolve(
    proposal: ScheduleProposal,
    *,
    status: str,
    acting_user_id: str,
    notes: str | None,
    now_utc: datetime,
) -> None:
    proposal.status = status
    proposal.response_notes = notes
    proposal.responded_by = acting_user_id
    proposal.responded_at = now_utc


async def propose_schedule(
    session: AsyncSession,
    *,
    match_id: UUID,
    acting_user_id: str,
    proposed_time: datetime,
    now_utc: datetime,
    notes: str | None = None,
) -> ProposalSnapshot:
    match = await load_match(session, match_id)
    participants = await load_match_participants(session, match)
    if not participants.is_captain(acting_user_id):
        raise ScheduleAccessError
    _ensure_schedulable(match)
    validate_proposed_time(proposed_time, now_utc=now_utc)

    proposal = await _create_pending(
        session,
        match_id=match.id,
        proposed_by=acting_user_id,
        proposed_time=proposed_time,
        notes=normalize_notes(notes),
        now_utc=now_utc,
    )
    logger.info(
        "schedule_proposal_created",
        match_id=str(match.id),
        proposal_id=str(proposal.id),
        proposed_by=acting_user_id,
    )
    return build_proposal_snapshot(proposal, tournament_id=match.tournament_id)


async def respond_to_proposal(
    session: AsyncSession,
    *,
    proposal_id: UUID,
    acting_user_id: str,
    decision: str,
    now_utc: datetime,
    notes: str | None = None,
) -> ProposalDecisionResult:
    """Approve or reject a pending proposal as the opposing captain or the admin.

    Approval schedules the match; other pending proposals on the match are untouched.
    """
    if decision not in PROPOSAL_DECISIONS:
        raise ScheduleValidationError(f"unknown decision: {decision}")

    proposal = await load_proposal_for_update(session, proposal_id)
    if proposal.status != PROPOSAL_STATUS_PENDING:
        raise ProposalNotPendingError
    if proposal.proposed_by == acting_user_id:
        raise ScheduleAccessError

    match = await load_match(
        session,
        proposal.match_id,
        for_update=decision == PROPOSAL_STATUS_APPROVED,
    )
    participants = await load_match_participants(session, match)
    is_admin = acting_user_id == participants.tournament_admin_id
    if not is_admin and participants.opponent_of(proposal.proposed_by) != acting_user_id:
        raise ScheduleAccessError

    match_snapshot: MatchSnapshot | None = None
    if decision == PROPOSAL_STATUS_APPROVED:
        _ensure_schedulable(match)
        if proposal.proposed_time <= now_utc:
            raise ProposalExpiredError
        match.scheduled_time = proposal.proposed_time
        match.status = MATCH_STATUS_SCHEDULED
        match.updated_at = now_utc
        match_snapshot = build_match_snapshot(match)

    _resolve(
        proposal,
        status=decision,
        acting_user_id=acting_user_id,
        notes=normalize_notes(notes),
        now_utc=now_utc,
    )
    logger.info(
        "schedule_proposal_resolved",
        match_id=str(match.id),
        proposal_id=str(proposal.id),
        status=decision,
        responded_by=acting_user_id,
    )
    return ProposalDecisionResult(
        proposal=build_proposal_snapshot(proposal, tournament_id=match.tournament_id),
        match=match_snapshot,
    )


async def counter_propose(
    session: AsyncSession,
    *,
    proposal_id: UUID,
    acting_user_id: str,
    proposed_time: datetime,
    now_utc: datetime,
    notes: str | None = None,
) -> CounterProposalResult:
    """Mark the proposal countered and file the responder's own pending proposal.

    Both writes share the caller's transaction: if the new proposal cannot be
    created the caller rolls back and the original stays pending.
    """
    proposal = await load_proposal_for_update(session, proposal_id)
    if proposal.status != PROPOSAL_STATUS_PENDING:
        raise ProposalNotPendingError
    if proposal.proposed_by == acting_user_id:
        raise ScheduleAccessError

    match = await load_match(session, proposal.match_id)
    participants = await load_match_participants(session, match)
    if participants.opponent_of(proposal.proposed_by) != acting_user_id:
        raise ScheduleAccessError
    _ensure_schedulable(match)
    validate_proposed_time(proposed_time, now_utc=now_utc)
    if proposed_time == proposal.proposed_time:
        raise ScheduleValidationError("a counter-proposal must suggest a different time")

    resolved_notes = normalize_notes(notes)
    _resolve(
        proposal,
        status=PROPOSAL_STATUS_COUNTERED,
        acting_user_id=acting_user_id,
        notes=resolved_notes,
        now_utc=now_utc,
    )
    counter = await _create_pending(
        session,
        match_id=match.id,
        proposed_by=acting_user_id,
        proposed_time=proposed_time,
        notes=resolved_notes,
        now_utc=now_utc,
    )
    logger.info(
        "schedule_proposal_countered",
        match_id=str(match.id),
        proposal_id=str(proposal.id),
        counter_proposal_id=str(counter.id),
        proposed_by=acting_user_id,
    )
    return CounterProposalResult(
        countered=build_proposal_snapshot(proposal, tournament_id=match.tournament_id),
        proposal=build_proposal_snapshot(counter, tournament_id=match.tournament_id),
    )


async def admin_set_schedule(
    session: AsyncSession,
    *,
    match_id: UUID,
    acting_user_id: str,
    scheduled_time: datetime,
    now_utc: datetime,
) -> MatchSnapshot:
    match = await load_match(session, match_id, for_update=True)
    admin_id = await load_tournament_admin_id(session, match.tournament_id)
    if acting_user_id != admin_id:
        raise ScheduleAccessError
    if match.status in MATCH_CLOSED_STATUSES:
        raise MatchNotSchedulableError(f"match is {match.status}")
    if scheduled_time.tzinfo is None or scheduled_time.utcoffset() is None:
        raise ScheduleValidationError("scheduled time must include a timezone")

    match.scheduled_time = scheduled_time
    match.status = MATCH_STATUS_SCHEDULED
    match.updated_at = now_utc
    logger.info(
        "match_schedule_set_by_admin",
        match_id=str(match.id),
        scheduled_time=scheduled_time.isoformat(),
    )
    return build_match_snapshot(match)


async def list_match_proposals(session: AsyncSession, *, match_id: UUID) -> list[ProposalSnapshot]:
    match = await load_match(session, match_id)
    proposals = await ScheduleProposalsRepo.list_for_match(session, match_id=match.id)
    return [
        build_proposal_snapshot(proposal, tournament_id=match.tournament_id)
        for proposal in proposals
    ]
