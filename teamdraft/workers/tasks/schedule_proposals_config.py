from __future__ import annotations

from teamdraft.core.config import get_settings

settings = get_settings()

EXPIRY_BATCH_SIZE = max(1, int(settings.proposal_expiry_batch_size))
SCAN_INTERVAL_SECONDS = max(30, int(settings.proposal_expiry_scan_seconds))

__all__ = ["EXPIRY_BATCH_SIZE", "SCAN_INTERVAL_SECONDS"]
