from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from teamdraft.db.models.draft_picks import DraftPick
from teamdraft.db.repo.draft_picks_repo import DraftPicksRepo
from teamdraft.draft.errors import (
    CaptainsNotConnectedError,
    DraftAccessError,
    DraftSessionAlreadyExistsError,
    DraftSessionNotFoundError,
    NotYourTurnError,
    PlayerUnavailableError,
    SessionNotActiveError,
    TeamNotFoundError,
)
from teamdraft.draft.service import (
    create_draft_session,
    get_draft_state,
    get_draft_timeline,
    start_draft,
    submit_pick,
)
from teamdraft.tournaments.errors import TournamentAccessError, TournamentStatusError
from tests.fakes import ADMIN_ID, NOW, install_fake_repos, make_teams, make_tournament, seed_player

SESSION = object()


def _seed_pool(store, tournament, *, a_tier: int, b_tier: int, misc: int) -> None:
    offset = 0
    for category, count in (("A-Tier", a_tier), ("B-Tier", b_tier), ("Misc", misc)):
        for index in range(count):
            seed_player(
                store,
                tournament,
                f"{category.lower()}-{index}",
                category,
                offset_seconds=offset,
            )
            offset += 1


async def _started_draft(
    monkeypatch,
    *,
    teams: int = 4,
    a_tier: int = 4,
    b_tier: int = 4,
    misc: int = 0,
):
    store = install_fake_repos(monkeypatch)
    tournament = make_tournament(store, status="awaiting_captain_ranking")
    team_rows = make_teams(store, tournament, teams)
    _seed_pool(store, tournament, a_tier=a_tier, b_tier=b_tier, misc=misc)
    await create_draft_session(
        SESSION,
        tournament_id=tournament.id,
        acting_user_id=ADMIN_ID,
        now_utc=NOW,
        pick_timer_seconds=90,
    )
    await start_draft(
        SESSION,
        tournament_id=tournament.id,
        acting_user_id=ADMIN_ID,
        online_user_ids={team.captain_id for team in team_rows},
        now_utc=NOW,
    )
    return store, tournament, team_rows


@pytest.mark.asyncio
async def test_create_draft_session_moves_tournament_to_draft_ready(monkeypatch) -> None:
    store = install_fake_repos(monkeypatch)
    tournament = make_tournament(store, status="awaiting_captain_ranking")
    make_teams(store, tournament, 4)

    snapshot = await create_draft_session(
        SESSION,
        tournament_id=tournament.id,
        acting_user_id=ADMIN_ID,
        now_utc=NOW,
        pick_timer_seconds=45,
    )

    assert snapshot.status == "waiting_for_captains"
    assert snapshot.current_category == "A-Tier"
    assert snapshot.current_round == 1
    assert snapshot.category_pick_count == 0
    assert snapshot.pick_timer_seconds == 45
    assert tournament.status == "draft_ready"
    assert [event.event_type for event in store.events] == ["session_created"]


@pytest.mark.asyncio
async def test_create_draft_session_guards(monkeypatch) -> None:
    store = install_fake_repos(monkeypatch)
    tournament = make_tournament(store, status="awaiting_captain_ranking")

    with pytest.raises(TournamentAccessError):
        await create_draft_session(
            SESSION,
            tournament_id=tournament.id,
            acting_user_id="captain-1",
            now_utc=NOW,
        )
    with pytest.raises(TeamNotFoundError):
        await create_draft_session(
            SESSION,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            now_utc=NOW,
        )

    make_teams(store, tournament, 4)
    await create_draft_session(
        SESSION,
        tournament_id=tournament.id,
        acting_user_id=ADMIN_ID,
        now_utc=NOW,
        pick_timer_seconds=60,
    )
    with pytest.raises(TournamentStatusError):
        await create_draft_session(
            SESSION,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            now_utc=NOW,
        )

    tournament.status = "awaiting_captain_ranking"
    with pytest.raises(DraftSessionAlreadyExistsError):
        await create_draft_session(
            SESSION,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            now_utc=NOW,
            pick_timer_seconds=60,
        )


@pytest.mark.asyncio
async def test_start_draft_requires_every_captain_online(monkeypatch) -> None:
    store = install_fake_repos(monkeypatch)
    tournament = make_tournament(store, status="awaiting_captain_ranking")
    make_teams(store, tournament, 4)
    _seed_pool(store, tournament, a_tier=4, b_tier=0, misc=0)
    await create_draft_session(
        SESSION,
        tournament_id=tournament.id,
        acting_user_id=ADMIN_ID,
        now_utc=NOW,
        pick_timer_seconds=60,
    )

    with pytest.raises(DraftAccessError):
        await start_draft(
            SESSION,
            tournament_id=tournament.id,
            acting_user_id="captain-1",
            online_user_ids={"captain-1"},
            now_utc=NOW,
        )
    with pytest.raises(CaptainsNotConnectedError) as exc_info:
        await start_draft(
            SESSION,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            online_user_ids={"captain-1", "captain-3", "captain-4"},
            now_utc=NOW,
        )
    assert exc_info.value.missing_captain_ids == ["captain-2"]
    assert tournament.status == "draft_ready"

    snapshot = await start_draft(
        SESSION,
        tournament_id=tournament.id,
        acting_user_id=ADMIN_ID,
        online_user_ids={"captain-1", "captain-2", "captain-3", "captain-4", "spectator"},
        now_utc=NOW,
    )
    assert snapshot.status == "in_progress"
    assert snapshot.started_at == NOW
    assert tournament.status == "draft_in_progress"

    with pytest.raises(SessionNotActiveError):
        await start_draft(
            SESSION,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            online_user_ids={"captain-1", "captain-2", "captain-3", "captain-4"},
            now_utc=NOW,
        )


@pytest.mark.asyncio
async def test_start_draft_skips_empty_first_tier(monkeypatch) -> None:
    store, tournament, _ = await _started_draft(monkeypatch, a_tier=0, b_tier=4, misc=0)

    state = await get_draft_state(SESSION, tournament_id=tournament.id)

    assert state.session.current_category == "B-Tier"
    assert [player.category for player in state.available_players] == ["B-Tier"] * 4
    assert "category_advanced" in [event.event_type for event in store.events]


@pytest.mark.asyncio
async def test_start_draft_with_empty_pool_finalizes_teams(monkeypatch) -> None:
    _, tournament, _ = await _started_draft(monkeypatch, a_tier=0, b_tier=0, misc=0)

    state = await get_draft_state(SESSION, tournament_id=tournament.id)

    assert state.session.status == "completed"
    assert state.session.current_category is None
    assert state.current_team_id is None
    assert tournament.status == "teams_finalized"


@pytest.mark.asyncio
async def test_full_draft_produces_gapless_snake_picks(monkeypatch) -> None:
    store, tournament, teams = await _started_draft(monkeypatch)
    captain_by_team = {team.id: team.captain_id for team in teams}
    order_by_team = {team.id: team.draft_order for team in teams}

    results = []
    picked_orders = []
    for step in range(8):
        state = await get_draft_state(SESSION, tournament_id=tournament.id)
        assert state.current_team_id is not None
        player = state.available_players[0]
        picked_orders.append(order_by_team[state.current_team_id])
        results.append(
            await submit_pick(
                SESSION,
                tournament_id=tournament.id,
                team_id=state.current_team_id,
                picked_user_id=player.user_id,
                acting_user_id=captain_by_team[state.current_team_id],
                now_utc=NOW + timedelta(seconds=step),
            )
        )

    assert [pick.pick_number for pick in store.picks] == list(range(8))
    assert picked_orders == [1, 2, 3, 4, 4, 3, 2, 1]
    assert [pick.category for pick in store.picks] == ["A-Tier"] * 4 + ["B-Tier"] * 4
    assert results[3].category_advanced is True
    assert results[3].session.current_category == "B-Tier"
    assert results[3].session.current_round == 1
    assert results[-1].draft_completed is True
    assert results[-1].next_team_id is None
    assert results[0].next_team_id == teams[1].id
    assert tournament.status == "teams_finalized"

    state = await get_draft_state(SESSION, tournament_id=tournament.id)
    assert state.session.status == "completed"
    assert [len(team.members) for team in state.teams] == [3, 3, 3, 3]
    assert all(team.members[0].is_captain for team in state.teams)

    timeline = await get_draft_timeline(SESSION, tournament_id=tournament.id)
    event_types = [event.event_type for event in timeline]
    assert event_types[:2] == ["session_created", "draft_started"]
    assert event_types.count("pick_made") == 8
    assert event_types.count("category_advanced") == 2
    assert event_types[-1] == "draft_completed"


@pytest.mark.asyncio
async def test_submit_pick_rejects_out_of_turn_and_unavailable_players(monkeypatch) -> None:
    store, tournament, teams = await _started_draft(monkeypatch)

    with pytest.raises(NotYourTurnError):
        await submit_pick(
            SESSION,
            tournament_id=tournament.id,
            team_id=teams[1].id,
            picked_user_id="a-tier-0",
            acting_user_id="captain-2",
            now_utc=NOW,
        )
    with pytest.raises(DraftAccessError):
        await submit_pick(
            SESSION,
            tournament_id=tournament.id,
            team_id=teams[0].id,
            picked_user_id="a-tier-0",
            acting_user_id="captain-2",
            now_utc=NOW,
        )
    for unavailable in ("b-tier-0", "captain-3", "nobody"):
        with pytest.raises(PlayerUnavailableError):
            await submit_pick(
                SESSION,
                tournament_id=tournament.id,
                team_id=teams[0].id,
                picked_user_id=unavailable,
                acting_user_id="captain-1",
                now_utc=NOW,
            )

    admin_pick = await submit_pick(
        SESSION,
        tournament_id=tournament.id,
        team_id=teams[0].id,
        picked_user_id="a-tier-0",
        acting_user_id=ADMIN_ID,
        now_utc=NOW,
    )
    assert admin_pick.pick.picked_by == ADMIN_ID

    with pytest.raises(PlayerUnavailableError):
        await submit_pick(
            SESSION,
            tournament_id=tournament.id,
            team_id=teams[1].id,
            picked_user_id="a-tier-0",
            acting_user_id="captain-2",
            now_utc=NOW,
        )
    assert [pick.pick_number for pick in store.picks] == [0]


@pytest.mark.asyncio
async def test_submit_pick_losing_the_race_reports_not_your_turn(monkeypatch) -> None:
    store, tournament, teams = await _started_draft(monkeypatch)
    draft_session = store.draft_sessions[0]
    original_create_once = store.create_pick_once

    async def _create_once_after_rival(session, *, pick: DraftPick) -> bool:
        # A concurrent submission commits the same pick number first.
        store.picks.append(
            DraftPick(
                id=uuid4(),
                draft_session_id=draft_session.id,
                team_id=teams[0].id,
                user_id="a-tier-3",
                pick_number=pick.pick_number,
                round_number=pick.round_number,
                category=pick.category,
                picked_by=ADMIN_ID,
                picked_at=NOW,
            )
        )
        return await original_create_once(session, pick=pick)

    monkeypatch.setattr(DraftPicksRepo, "create_once", _create_once_after_rival)

    with pytest.raises(NotYourTurnError):
        await submit_pick(
            SESSION,
            tournament_id=tournament.id,
            team_id=teams[0].id,
            picked_user_id="a-tier-0",
            acting_user_id="captain-1",
            now_utc=NOW,
        )

    assert [pick.user_id for pick in store.picks] == ["a-tier-3"]
    assert draft_session.category_pick_count == 0
    assert all(member.user_id != "a-tier-0" for member in store.members)


@pytest.mark.asyncio
async def test_submit_pick_requires_active_session(monkeypatch) -> None:
    store = install_fake_repos(monkeypatch)
    tournament = make_tournament(store, status="awaiting_captain_ranking")
    teams = make_teams(store, tournament, 4)
    _seed_pool(store, tournament, a_tier=4, b_tier=0, misc=0)

    with pytest.raises(DraftSessionNotFoundError):
        await submit_pick(
            SESSION,
            tournament_id=tournament.id,
            team_id=teams[0].id,
            picked_user_id="a-tier-0",
            acting_user_id="captain-1",
            now_utc=NOW,
        )

    await create_draft_session(
        SESSION,
        tournament_id=tournament.id,
        acting_user_id=ADMIN_ID,
        now_utc=NOW,
        pick_timer_seconds=60,
    )
    with pytest.raises(SessionNotActiveError):
        await submit_pick(
            SESSION,
            tournament_id=tournament.id,
            team_id=teams[0].id,
            picked_user_id="a-tier-0",
            acting_user_id="captain-1",
            now_utc=NOW,
        )


@pytest.mark.asyncio
async def test_get_draft_state_without_session_raises(monkeypatch) -> None:
    store = install_fake_repos(monkeypatch)
    tournament = make_tournament(store, status="awaiting_captain_ranking")

    with pytest.raises(DraftSessionNotFoundError):
        await get_draft_state(SESSION, tournament_id=tournament.id)
    assert await get_draft_timeline(SESSION, tournament_id=tournament.id) == []
