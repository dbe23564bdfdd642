from __future__ import annotations

from uuid import uuid4

import pytest

from teamdraft.scheduling.types import ProposalSnapshot
from teamdraft.workers.celery_app import celery_app
from teamdraft.workers.tasks import schedule_proposals, schedule_proposals_async
from tests.fakes import NOW


def test_run_schedule_proposal_expiry_task_wrapper(monkeypatch) -> None:
    async def fake_async(*, batch_size: int) -> dict[str, int]:
        return {"batch_size": batch_size, "expired_total": 3}

    monkeypatch.setattr(schedule_proposals, "run_schedule_proposal_expiry_async", fake_async)

    result = schedule_proposals.run_schedule_proposal_expiry(batch_size=25)
    assert result == {"batch_size": 25, "expired_total": 3}


def test_expiry_scan_is_on_beat_schedule() -> None:
    entry = celery_app.conf.beat_schedule["schedule-proposal-expiry"]

    assert entry["task"] == schedule_proposals.run_schedule_proposal_expiry.name
    assert entry["schedule"] >= 30.0
    assert entry["options"] == {"queue": "q_normal"}


class _FakeTransaction:
    async def __aenter__(self):
        return object()

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class _FakeSessionLocal:
    def begin(self) -> _FakeTransaction:
        return _FakeTransaction()


class _FakeRedis:
    def __init__(self) -> None:
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True


class _RecordingFeed:
    def __init__(self) -> None:
        self.events = []

    async def publish(self, event) -> int:
        self.events.append(event)
        return 0


def _expired_proposal() -> ProposalSnapshot:
    return ProposalSnapshot(
        proposal_id=uuid4(),
        match_id=uuid4(),
        tournament_id=uuid4(),
        proposed_by="captain-1",
        proposed_time=NOW,
        status="expired",
        notes=None,
        response_notes=None,
        responded_by=None,
        responded_at=NOW,
        created_at=NOW,
    )


@pytest.mark.asyncio
async def test_expiry_job_publishes_each_expired_proposal(monkeypatch) -> None:
    expired = [_expired_proposal(), _expired_proposal()]
    redis = _FakeRedis()
    feed = _RecordingFeed()
    seen_limits: list[int] = []

    async def fake_expire(session, *, now_utc, limit: int):
        seen_limits.append(limit)
        return expired

    monkeypatch.setattr(schedule_proposals_async, "SessionLocal", _FakeSessionLocal())
    monkeypatch.setattr(schedule_proposals_async, "expire_stale_proposals", fake_expire)
    monkeypatch.setattr(schedule_proposals_async, "create_redis_client", lambda: redis)
    monkeypatch.setattr(schedule_proposals_async, "build_change_feed", lambda client: feed)

    result = await schedule_proposals_async.run_schedule_proposal_expiry_async(batch_size=0)

    assert result == {"batch_size": 1, "expired_total": 2}
    assert seen_limits == [1]
    assert [event.entity_id for event in feed.events] == [
        str(proposal.proposal_id) for proposal in expired
    ]
    assert all(event.payload["status"] == "expired" for event in feed.events)
    assert redis.closed is True


@pytest.mark.asyncio
async def test_expiry_job_skips_redis_when_nothing_expired(monkeypatch) -> None:
    async def fake_expire(session, *, now_utc, limit: int):
        return []

    def _unexpected_redis():
        raise AssertionError("redis must not be opened")

    monkeypatch.setattr(schedule_proposals_async, "SessionLocal", _FakeSessionLocal())
    monkeypatch.setattr(schedule_proposals_async, "expire_stale_proposals", fake_expire)
    monkeypatch.setattr(schedule_proposals_async, "create_redis_client", _unexpected_redis)

    result = await schedule_proposals_async.run_schedule_proposal_expiry_async(batch_size=50)

    assert result == {"batch_size": 50, "expired_total": 0}
