from __future__ import annotations

from sqlalchemy import CheckConstraint, UniqueConstraint

from teamdraft.db.models import (  # noqa: F401
    DraftEvent,
    DraftPick,
    DraftSession,
    Match,
    PlayerCategory,
    Registration,
    ScheduleProposal,
    Team,
    TeamMember,
    Tournament,
)
from teamdraft.db.models.base import Base


def _constraint_names(table_name: str, constraint_type: type) -> set[str]:
    table = Base.metadata.tables[table_name]
    return {
        constraint.name
        for constraint in table.constraints
        if isinstance(constraint, constraint_type)
    }


def _index_names(table_name: str) -> set[str]:
    return {index.name for index in Base.metadata.tables[table_name].indexes}


def test_all_tables_registered() -> None:
    assert set(Base.metadata.tables) >= {
        "tournaments",
        "registrations",
        "player_categories",
        "teams",
        "team_members",
        "draft_sessions",
        "draft_picks",
        "draft_events",
        "matches",
        "schedule_proposals",
    }


def test_draft_pick_uniqueness_is_enforced_by_constraints() -> None:
    assert {
        "uq_draft_picks_session_pick_number",
        "uq_draft_picks_session_user",
    } <= _constraint_names("draft_picks", UniqueConstraint)
    assert "ck_draft_picks_category" in _constraint_names("draft_picks", CheckConstraint)

    draft_sessions = Base.metadata.tables["draft_sessions"]
    assert draft_sessions.c.tournament_id.unique is True


def test_team_and_match_constraints_present() -> None:
    assert {
        "uq_teams_tournament_draft_order",
        "uq_teams_tournament_captain",
    } <= _constraint_names("teams", UniqueConstraint)
    team_members = Base.metadata.tables["team_members"]
    assert [column.name for column in team_members.primary_key] == ["team_id", "user_id"]

    assert "uq_matches_tournament_phase_number" in _constraint_names("matches", UniqueConstraint)
    assert {
        "ck_matches_phase",
        "ck_matches_status",
        "ck_matches_best_of",
        "ck_matches_scores_non_negative",
        "ck_matches_no_self_pair",
    } <= _constraint_names("matches", CheckConstraint)
    assert "idx_matches_status_scheduled_time" in _index_names("matches")


def test_one_pending_proposal_per_captain_index() -> None:
    proposals = Base.metadata.tables["schedule_proposals"]
    (pending_index,) = [
        index
        for index in proposals.indexes
        if index.name == "uq_schedule_proposals_pending_match_proposer"
    ]

    assert pending_index.unique is True
    assert [column.name for column in pending_index.columns] == ["match_id", "proposed_by"]
    assert "status = 'pending'" in str(pending_index.dialect_options["postgresql"]["where"])
    assert "ck_schedule_proposals_status" in _constraint_names(
        "schedule_proposals",
        CheckConstraint,
    )
