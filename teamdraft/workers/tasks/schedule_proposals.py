from __future__ import annotations

from teamdraft.workers.asyncio_runner import run_async_job
from teamdraft.workers.celery_app import celery_app
from teamdraft.workers.tasks.schedule_proposals_async import (
    run_schedule_proposal_expiry_async as _run_schedule_proposal_expiry_async,
)
from teamdraft.workers.tasks.schedule_proposals_config import EXPIRY_BATCH_SIZE
from teamdraft.workers.tasks.schedule_proposals_schedule import (
    configure_schedule_proposals_schedule,
)

run_schedule_proposal_expiry_async = _run_schedule_proposal_expiry_async

__all__ = ["run_schedule_proposal_expiry", "run_schedule_proposal_expiry_async"]


@celery_app.task(name="teamdraft.workers.tasks.schedule_proposals.run_schedule_proposal_expiry")
def run_schedule_proposal_expiry(batch_size: int = EXPIRY_BATCH_SIZE) -> dict[str, int]:
    return run_async_job(run_schedule_proposal_expiry_async(batch_size=batch_size))


configure_schedule_proposals_schedule(celery_app)
