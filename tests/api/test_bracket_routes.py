from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from teamdraft.api import identity
from teamdraft.api.routes import bracket as bracket_routes
from teamdraft.bracket import service as bracket_service
from teamdraft.bracket.types import MatchSnapshot
from teamdraft.main import app
from tests.fakes import NOW

HEADERS = {"X-Gateway-Token": "gw-secret", "X-User-Id": "captain-1"}


class _FakeSession:
    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


def _match(*, status: str) -> MatchSnapshot:
    return MatchSnapshot(
        match_id=uuid4(),
        tournament_id=uuid4(),
        phase="round_robin",
        round=None,
        match_number=1,
        team1_id=uuid4(),
        team2_id=uuid4(),
        team1_score=0,
        team2_score=0,
        winner_id=None,
        status=status,
        best_of=1,
        scheduled_time=NOW,
    )


@pytest.fixture
def client(monkeypatch) -> TestClient:
    settings = SimpleNamespace(gateway_token="gw-secret")
    monkeypatch.setattr(identity, "get_settings", lambda: settings)
    monkeypatch.setattr(bracket_routes, "SessionLocal", lambda: _FakeSession())
    return TestClient(app)


def test_my_scheduled_matches_use_caller_as_captain(monkeypatch, client) -> None:
    captured = {}
    scheduled = _match(status="scheduled")

    async def _fake_scheduled(session, **kwargs):
        captured.update(kwargs)
        return [scheduled]

    monkeypatch.setattr(bracket_service, "list_captain_scheduled_matches", _fake_scheduled)

    response = client.get("/matches/scheduled", headers=HEADERS)

    assert response.status_code == 200
    (item,) = response.json()["matches"]
    assert item["match_id"] == str(scheduled.match_id)
    assert item["status"] == "scheduled"
    assert captured == {"captain_id": "captain-1"}


def test_recent_matches_pass_limit(monkeypatch, client) -> None:
    tournament_id = uuid4()
    captured = {}

    async def _fake_recent(session, **kwargs):
        captured.update(kwargs)
        return [_match(status="completed")]

    monkeypatch.setattr(bracket_service, "list_recent_matches", _fake_recent)

    response = client.get(
        f"/tournaments/{tournament_id}/matches/recent",
        params={"limit": 3},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert [item["status"] for item in response.json()["matches"]] == ["completed"]
    assert captured == {"tournament_id": tournament_id, "limit": 3}


def test_recent_matches_reject_out_of_range_limit(client) -> None:
    response = client.get(
        f"/tournaments/{uuid4()}/matches/recent",
        params={"limit": 0},
        headers=HEADERS,
    )

    assert response.status_code == 422
