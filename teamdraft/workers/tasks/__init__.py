from teamdraft.workers.tasks.schedule_proposals import run_schedule_proposal_expiry

__all__ = ["run_schedule_proposal_expiry"]
