"""Snake draft ordering.

Round 1 runs through the teams by ascending ``draft_order``, round 2 runs back
down, and so on: ``1, 2, ..., N, N, ..., 2, 1, 1, 2, ...``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

from teamdraft.draft.errors import InvalidStateError


class HasDraftOrder(Protocol):
    draft_order: int


TeamT = TypeVar("TeamT", bound=HasDraftOrder)


def next_picker(teams: Sequence[TeamT], pick_number: int) -> TeamT:
    """Return the team that makes the 0-based ``pick_number``-th pick of the session."""
    if not teams:
        raise InvalidStateError("cannot determine the next picker without teams")
    if pick_number < 0:
        raise InvalidStateError("pick number must be non-negative")

    team_count = len(teams)
    round_index = pick_number // team_count
    position_in_round = pick_number % team_count
    ordered = sorted(teams, key=lambda team: team.draft_order, reverse=round_index % 2 == 1)
    return ordered[position_in_round]


def round_number_for_pick(pick_number: int, team_count: int) -> int:
    if team_count <= 0:
        raise InvalidStateError("cannot determine the draft round without teams")
    return pick_number // team_count + 1
