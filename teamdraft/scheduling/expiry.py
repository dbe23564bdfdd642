from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.repo.schedule_proposals_repo import ScheduleProposalsRepo
from teamdraft.scheduling.constants import PROPOSAL_STATUS_EXPIRED
from teamdraft.scheduling.internal import build_proposal_snapshot, load_match
from teamdraft.scheduling.types import ProposalSnapshot

logger = structlog.get_logger(__name__)


async def expire_stale_proposals(
    session: AsyncSession,
    *,
    now_utc: datetime,
    limit: int,
) -> list[ProposalSnapshot]:
    """Expire pending proposals whose time has already passed.

    Rows locked by a concurrent responder are skipped and picked up by a later scan.
    """
    due = await ScheduleProposalsRepo.list_pending_due_for_update(
        session,
        now_utc=now_utc,
        limit=limit,
    )
    expired: list[ProposalSnapshot] = []
    for proposal in due:
        match = await load_match(session, proposal.match_id)
        proposal.status = PROPOSAL_STATUS_EXPIRED
        proposal.responded_at = now_utc
        expired.append(build_proposal_snapshot(proposal, tournament_id=match.tournament_id))
    if expired:
        logger.info("schedule_proposals_expired", expired_total=len(expired))
    return expired
