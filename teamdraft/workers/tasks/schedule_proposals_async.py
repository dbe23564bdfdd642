from __future__ import annotations

from datetime import datetime, timezone

import structlog

from teamdraft.api.realtime import publish_change
from teamdraft.db.session import SessionLocal
from teamdraft.realtime.client import build_change_feed, create_redis_client
from teamdraft.realtime.constants import CHANGE_EVENT_SCHEDULE_PROPOSAL
from teamdraft.scheduling.service import expire_stale_proposals
from teamdraft.scheduling.types import ProposalSnapshot
from teamdraft.workers.tasks.schedule_proposals_config import EXPIRY_BATCH_SIZE

logger = structlog.get_logger("teamdraft.workers.tasks.schedule_proposals")


async def _publish_expired(*, proposals: list[ProposalSnapshot], now_utc: datetime) -> None:
    if not proposals:
        return
    redis = create_redis_client()
    try:
        feed = build_change_feed(redis)
        for proposal in proposals:
            await publish_change(
                feed,
                tournament_id=proposal.tournament_id,
                event_type=CHANGE_EVENT_SCHEDULE_PROPOSAL,
                entity_id=proposal.proposal_id,
                happened_at=now_utc,
                payload={"match_id": str(proposal.match_id), "status": proposal.status},
            )
    finally:
        await redis.aclose()


async def run_schedule_proposal_expiry_async(
    *,
    batch_size: int = EXPIRY_BATCH_SIZE,
) -> dict[str, int]:
    now_utc = datetime.now(timezone.utc)
    resolved_batch_size = max(1, int(batch_size))

    async with SessionLocal.begin() as session:
        expired = await expire_stale_proposals(
            session,
            now_utc=now_utc,
            limit=resolved_batch_size,
        )

    await _publish_expired(proposals=expired, now_utc=now_utc)
    result = {
        "batch_size": resolved_batch_size,
        "expired_total": len(expired),
    }
    logger.info("schedule_proposal_expiry_processed", **result)
    return result
