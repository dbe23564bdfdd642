from teamdraft.scheduling.expiry import expire_stale_proposals
from teamdraft.scheduling.proposals import (
    admin_set_schedule,
    counter_propose,
    list_match_proposals,
    propose_schedule,
    respond_to_proposal,
)

__all__ = [
    "admin_set_schedule",
    "counter_propose",
    "expire_stale_proposals",
    "list_match_proposals",
    "propose_schedule",
    "respond_to_proposal",
]
