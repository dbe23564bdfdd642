from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Any
from uuid import UUID

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from teamdraft.realtime.client import (
    build_change_feed,
    build_presence_tracker,
    create_redis_client,
)
from teamdraft.realtime.feed import ChangeEvent, ChangeFeed
from teamdraft.realtime.presence import PresenceTracker

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=1)
def _shared_redis() -> Redis:
    return create_redis_client()


def get_change_feed() -> ChangeFeed:
    return build_change_feed(_shared_redis())


def get_presence_tracker() -> PresenceTracker:
    return build_presence_tracker(_shared_redis())


async def publish_change(
    feed: ChangeFeed,
    *,
    tournament_id: UUID,
    event_type: str,
    entity_id: UUID | str,
    happened_at: datetime,
    payload: dict[str, Any] | None = None,
) -> None:
    """Fan out a committed change; delivery failures never undo the write."""
    try:
        await feed.publish(
            ChangeEvent(
                tournament_id=tournament_id,
                event_type=event_type,
                entity_id=str(entity_id),
                happened_at=happened_at,
                payload=payload or {},
            )
        )
    except (RedisError, OSError) as exc:
        logger.warning(
            "change_publish_failed",
            tournament_id=str(tournament_id),
            event_type=event_type,
            error_type=type(exc).__name__,
        )
