from __future__ import annotations

from teamdraft.workers.tasks.schedule_proposals_config import SCAN_INTERVAL_SECONDS


def configure_schedule_proposals_schedule(celery_app) -> None:
    celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
    celery_app.conf.beat_schedule.update(
        {
            "schedule-proposal-expiry": {
                "task": "teamdraft.workers.tasks.schedule_proposals.run_schedule_proposal_expiry",
                "schedule": float(SCAN_INTERVAL_SECONDS),
                "options": {"queue": "q_normal"},
            }
        }
    )
