from __future__ import annotations

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from teamdraft.bracket.service import generate_bracket, list_matches
from teamdraft.db.models.draft_picks import DraftPick
from teamdraft.db.models.schedule_proposals import ScheduleProposal
from teamdraft.db.repo.schedule_proposals_repo import ScheduleProposalsRepo
from teamdraft.db.session import SessionLocal
from teamdraft.draft.errors import NotYourTurnError
from teamdraft.draft.service import create_draft_session, start_draft, submit_pick
from teamdraft.scheduling.errors import DuplicatePendingProposalError
from teamdraft.scheduling.service import counter_propose, propose_schedule
from tests.fakes import ADMIN_ID, NOW, InMemoryStore, make_teams, make_tournament, seed_player


async def _persist_tournament(*, status: str, players: int = 0):
    # The in-memory helpers only build ORM rows here; nothing is read back from the store.
    store = InMemoryStore()
    tournament = make_tournament(store, status=status)
    teams = make_teams(store, tournament, 4)
    for index in range(players):
        seed_player(store, tournament, f"a-tier-{index}", "A-Tier", offset_seconds=index)

    async with SessionLocal.begin() as session:
        session.add(tournament)
        await session.flush()
        session.add_all([*store.registrations, *store.categories, *teams])
        await session.flush()
        session.add_all(store.members)
    return tournament, teams


@pytest.mark.asyncio
async def test_parallel_picks_for_one_turn_record_a_single_pick() -> None:
    tournament, teams = await _persist_tournament(status="awaiting_captain_ranking", players=4)
    async with SessionLocal.begin() as session:
        await create_draft_session(
            session,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            now_utc=NOW,
        )
        await start_draft(
            session,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            online_user_ids={team.captain_id for team in teams},
            now_utc=NOW,
        )

    barrier = asyncio.Event()

    async def _attempt(picked_user_id: str) -> str:
        await barrier.wait()
        try:
            async with SessionLocal.begin() as session:
                await submit_pick(
                    session,
                    tournament_id=tournament.id,
                    team_id=teams[0].id,
                    picked_user_id=picked_user_id,
                    acting_user_id=teams[0].captain_id,
                    now_utc=NOW + timedelta(seconds=5),
                )
        except NotYourTurnError:
            return "not_your_turn"
        return "picked"

    attempts = [asyncio.create_task(_attempt(f"a-tier-{index}")) for index in range(2)]
    await asyncio.sleep(0)
    barrier.set()
    outcomes = await asyncio.gather(*attempts)

    assert sorted(outcomes) == ["not_your_turn", "picked"]
    async with SessionLocal() as session:
        pick_numbers = (await session.execute(select(DraftPick.pick_number))).scalars().all()
    assert pick_numbers == [0]


@pytest.mark.asyncio
async def test_pending_proposal_index_allows_one_per_captain() -> None:
    tournament, _ = await _persist_tournament(status="teams_finalized")
    async with SessionLocal.begin() as session:
        await generate_bracket(
            session,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            now_utc=NOW,
        )
    async with SessionLocal() as session:
        match = (await list_matches(session, tournament_id=tournament.id, phase="round_robin"))[0]

    async with SessionLocal.begin() as session:
        await propose_schedule(
            session,
            match_id=match.match_id,
            acting_user_id="captain-1",
            proposed_time=NOW + timedelta(days=1),
            now_utc=NOW,
        )

    with pytest.raises(DuplicatePendingProposalError):
        async with SessionLocal.begin() as session:
            await propose_schedule(
                session,
                match_id=match.match_id,
                acting_user_id="captain-1",
                proposed_time=NOW + timedelta(days=2),
                now_utc=NOW,
            )

    async with SessionLocal.begin() as session:
        resolved = ScheduleProposal(
            id=uuid4(),
            match_id=match.match_id,
            proposed_by="captain-1",
            proposed_time=NOW + timedelta(days=3),
            status="rejected",
            notes=None,
            response_notes=None,
            responded_by=None,
            responded_at=None,
            created_at=NOW,
        )
        session.add(resolved)
        await session.flush()
        assert await ScheduleProposalsRepo.create_pending_once(
            session,
            proposal=ScheduleProposal(
                id=uuid4(),
                match_id=match.match_id,
                proposed_by="captain-2",
                proposed_time=NOW + timedelta(days=1),
                status="pending",
                notes=None,
                response_notes=None,
                responded_by=None,
                responded_at=None,
                created_at=NOW,
            ),
        )

    async with SessionLocal() as session:
        total = await session.scalar(
            select(func.count())
            .select_from(ScheduleProposal)
            .where(ScheduleProposal.match_id == match.match_id)
        )
    assert total == 3


@pytest.mark.asyncio
async def test_failed_counter_proposal_leaves_original_pending() -> None:
    tournament, _ = await _persist_tournament(status="teams_finalized")
    async with SessionLocal.begin() as session:
        await generate_bracket(
            session,
            tournament_id=tournament.id,
            acting_user_id=ADMIN_ID,
            now_utc=NOW,
        )
    async with SessionLocal() as session:
        match = (await list_matches(session, tournament_id=tournament.id, phase="round_robin"))[0]

    # Match 1 is captain-1 vs captain-2; captain-2 already holds a pending proposal.
    async with SessionLocal.begin() as session:
        await propose_schedule(
            session,
            match_id=match.match_id,
            acting_user_id="captain-2",
            proposed_time=NOW + timedelta(days=2),
            now_utc=NOW,
        )
        original = await propose_schedule(
            session,
            match_id=match.match_id,
            acting_user_id="captain-1",
            proposed_time=NOW + timedelta(days=1),
            now_utc=NOW,
        )

    with pytest.raises(DuplicatePendingProposalError):
        async with SessionLocal.begin() as session:
            await counter_propose(
                session,
                proposal_id=original.proposal_id,
                acting_user_id="captain-2",
                proposed_time=NOW + timedelta(days=3),
                now_utc=NOW,
            )

    async with SessionLocal() as session:
        row = await session.get(ScheduleProposal, original.proposal_id)
        statuses = (
            await session.execute(
                select(ScheduleProposal.proposed_by, ScheduleProposal.status)
                .where(ScheduleProposal.match_id == match.match_id)
                .order_by(ScheduleProposal.proposed_by)
            )
        ).all()
    assert row.status == "pending"
    assert row.responded_by is None
    assert [tuple(item) for item in statuses] == [
        ("captain-1", "pending"),
        ("captain-2", "pending"),
    ]
