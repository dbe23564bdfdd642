from __future__ import annotations

from teamdraft.bracket.constants import MATCH_STATUS_PENDING, MATCH_STATUS_SCHEDULED

PROPOSAL_STATUS_PENDING = "pending"
PROPOSAL_STATUS_APPROVED = "approved"
PROPOSAL_STATUS_REJECTED = "rejected"
PROPOSAL_STATUS_COUNTERED = "countered"
PROPOSAL_STATUS_EXPIRED = "expired"

PROPOSAL_DECISIONS = frozenset({PROPOSAL_STATUS_APPROVED, PROPOSAL_STATUS_REJECTED})

PROPOSABLE_MATCH_STATUSES = frozenset({MATCH_STATUS_PENDING, MATCH_STATUS_SCHEDULED})

PROPOSAL_NOTES_MAX_LENGTH = 500
