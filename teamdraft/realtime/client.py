from __future__ import annotations

from redis.asyncio import Redis

from teamdraft.core.config import get_settings
from teamdraft.realtime.feed import ChangeFeed
from teamdraft.realtime.presence import PresenceTracker


def create_redis_client() -> Redis:
    return Redis.from_url(get_settings().redis_url, decode_responses=True)


def build_change_feed(redis: Redis) -> ChangeFeed:
    return ChangeFeed(redis, channel_prefix=get_settings().realtime_channel_prefix)


def build_presence_tracker(redis: Redis) -> PresenceTracker:
    settings = get_settings()
    return PresenceTracker(
        redis,
        key_prefix=settings.realtime_channel_prefix,
        ttl_seconds=settings.presence_ttl_seconds,
    )
