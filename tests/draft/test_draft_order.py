from __future__ import annotations

from dataclasses import dataclass

import pytest

from teamdraft.draft.categories import next_category
from teamdraft.draft.errors import InvalidStateError
from teamdraft.draft.order import next_picker, round_number_for_pick


@dataclass(slots=True)
class _Team:
    name: str
    draft_order: int


def _teams(count: int) -> list[_Team]:
    # Deliberately shuffled: ordering must come from draft_order, not list position.
    teams = [_Team(name=f"team-{order}", draft_order=order) for order in range(1, count + 1)]
    return teams[1::2] + teams[0::2]


@pytest.mark.parametrize("team_count", [1, 2, 3, 4, 6])
def test_next_picker_snakes_every_round(team_count: int) -> None:
    teams = _teams(team_count)
    ascending = list(range(1, team_count + 1))
    expected = (ascending + ascending[::-1]) * 3

    orders = [next_picker(teams, pick).draft_order for pick in range(len(expected))]

    assert orders == expected


def test_next_picker_four_teams_sequence() -> None:
    teams = _teams(4)
    orders = [next_picker(teams, pick).draft_order for pick in range(12)]
    assert orders == [1, 2, 3, 4, 4, 3, 2, 1, 1, 2, 3, 4]


def test_next_picker_rejects_empty_teams_and_negative_pick() -> None:
    with pytest.raises(InvalidStateError):
        next_picker([], 0)
    with pytest.raises(InvalidStateError):
        next_picker(_teams(2), -1)


def test_round_number_for_pick_is_one_based() -> None:
    assert [round_number_for_pick(pick, 3) for pick in range(7)] == [1, 1, 1, 2, 2, 2, 3]
    with pytest.raises(InvalidStateError):
        round_number_for_pick(0, 0)


def test_next_category_walks_draft_tiers_then_stops() -> None:
    steps = []
    category = "A-Tier"
    while category is not None:
        category = next_category(category)
        steps.append(category)

    assert steps == ["B-Tier", "Misc", None]


def test_next_category_unknown_tier_returns_none() -> None:
    assert next_category("S-Tier") is None
    assert next_category("Legendary") is None
    assert next_category(None) is None
