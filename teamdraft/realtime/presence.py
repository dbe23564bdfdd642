from __future__ import annotations

from datetime import datetime
from uuid import UUID

from redis.asyncio import Redis


class PresenceTracker:
    """Ephemeral online set per channel key, kept in a Redis sorted set.

    Members are user ids scored by their last heartbeat (epoch seconds); a user
    counts as online while the heartbeat is younger than ``ttl_seconds``.
    """

    def __init__(self, redis: Redis, *, key_prefix: str, ttl_seconds: int) -> None:
        self._redis = redis
        self._key_prefix = key_prefix
        self._ttl_seconds = max(1, int(ttl_seconds))

    def draft_room_key(self, tournament_id: UUID) -> str:
        return f"{self._key_prefix}:presence:draft:{tournament_id}"

    async def heartbeat(self, channel_key: str, user_id: str, *, now_utc: datetime) -> None:
        await self._redis.zadd(channel_key, {user_id: now_utc.timestamp()})
        # The whole set disappears once every member has gone quiet.
        await self._redis.expire(channel_key, self._ttl_seconds * 2)

    async def leave(self, channel_key: str, user_id: str) -> None:
        await self._redis.zrem(channel_key, user_id)

    async def online_user_ids(self, channel_key: str, *, now_utc: datetime) -> set[str]:
        cutoff = now_utc.timestamp() - self._ttl_seconds
        await self._redis.zremrangebyscore(channel_key, "-inf", f"({cutoff}")
        members = await self._redis.zrangebyscore(channel_key, cutoff, "+inf")
        return {
            member.decode() if isinstance(member, bytes) else str(member) for member in members
        }
