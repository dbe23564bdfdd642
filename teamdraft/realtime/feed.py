from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from redis.asyncio import Redis

from teamdraft.realtime.constants import CHANGE_EVENT_TYPES

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    tournament_id: UUID
    event_type: str
    entity_id: str
    happened_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(
            {
                "tournament_id": str(self.tournament_id),
                "event_type": self.event_type,
                "entity_id": self.entity_id,
                "happened_at": self.happened_at.isoformat(),
                "payload": self.payload,
            },
            sort_keys=True,
            default=str,
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> ChangeEvent:
        data = json.loads(raw)
        return cls(
            tournament_id=UUID(data["tournament_id"]),
            event_type=data["event_type"],
            entity_id=data["entity_id"],
            happened_at=datetime.fromisoformat(data["happened_at"]),
            payload=data.get("payload") or {},
        )


class ChangeFeed:
    """Tournament-scoped change notifications over Redis pub/sub.

    Delivery only: PostgreSQL stays the source of truth and subscribers re-read
    state after each event.
    """

    def __init__(self, redis: Redis, *, channel_prefix: str) -> None:
        self._redis = redis
        self._channel_prefix = channel_prefix

    def channel_for(self, tournament_id: UUID) -> str:
        return f"{self._channel_prefix}:tournament:{tournament_id}"

    async def publish(self, event: ChangeEvent) -> int:
        if event.event_type not in CHANGE_EVENT_TYPES:
            raise ValueError(f"unknown change event type: {event.event_type}")
        channel = self.channel_for(event.tournament_id)
        receivers = await self._redis.publish(channel, event.to_json())
        return int(receivers)

    async def subscribe(self, tournament_id: UUID) -> AsyncIterator[ChangeEvent]:
        channel = self.channel_for(tournament_id)
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    yield ChangeEvent.from_json(message["data"])
                except (KeyError, ValueError) as exc:
                    logger.warning(
                        "change_event_decode_failed",
                        channel=channel,
                        error_type=type(exc).__name__,
                    )
        finally:
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()
