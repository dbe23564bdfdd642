from __future__ import annotations

from types import SimpleNamespace

import pytest

from teamdraft.api import identity
from teamdraft.api.errors import as_http_exception
from teamdraft.bracket.errors import InsufficientTeamsError
from teamdraft.draft.errors import CaptainsNotConnectedError, NotYourTurnError
from teamdraft.scheduling.errors import DuplicatePendingProposalError, ScheduleValidationError
from teamdraft.tournaments.errors import TournamentAccessError, TournamentNotFoundError


@pytest.mark.parametrize(
    ("expected", "received", "is_valid"),
    [
        ("gw-secret", "gw-secret", True),
        ("gw-secret", "gw-other", False),
        ("gw-secret", None, False),
        ("", "", False),
    ],
)
def test_is_valid_gateway_token(expected: str, received: str | None, is_valid: bool) -> None:
    assert (
        identity.is_valid_gateway_token(expected_token=expected, received_token=received)
        is is_valid
    )


def test_resolve_user_id_trims_and_bounds() -> None:
    assert identity.resolve_user_id("  player-7 ") == "player-7"
    assert identity.resolve_user_id("   ") is None
    assert identity.resolve_user_id(None) is None
    assert identity.resolve_user_id("x" * 65) is None


def test_authenticate_headers_needs_gateway_token(monkeypatch) -> None:
    monkeypatch.setattr(identity, "get_settings", lambda: SimpleNamespace(gateway_token="gw"))

    assert identity.authenticate_headers({"X-User-Id": "player-1"}) is None
    assert (
        identity.authenticate_headers({"X-Gateway-Token": "gw", "X-User-Id": "player-1"})
        == "player-1"
    )


@pytest.mark.parametrize(
    ("error", "status_code", "code", "message"),
    [
        (TournamentNotFoundError(), 404, "E_TOURNAMENT_NOT_FOUND", "tournament not found"),
        (
            TournamentAccessError("internal detail"),
            403,
            "E_FORBIDDEN",
            "only the tournament admin can do that",
        ),
        (NotYourTurnError(), 409, "E_NOT_YOUR_TURN", "it's not your turn"),
        (
            DuplicatePendingProposalError(),
            409,
            "E_DUPLICATE_PENDING_PROPOSAL",
            "a newer proposal already exists",
        ),
        (InsufficientTeamsError(), 409, "E_INSUFFICIENT_TEAMS", "at least 4 teams are required"),
        (
            ScheduleValidationError("proposed time must be in the future"),
            422,
            "E_SCHEDULE_INVALID",
            "proposed time must be in the future",
        ),
        (ScheduleValidationError(), 422, "E_SCHEDULE_INVALID", "invalid schedule"),
    ],
)
def test_as_http_exception_maps_domain_errors(
    error: Exception,
    status_code: int,
    code: str,
    message: str,
) -> None:
    exc = as_http_exception(error)

    assert exc.status_code == status_code
    assert exc.detail == {"code": code, "message": message}


def test_captains_not_connected_lists_missing_ids() -> None:
    exc = as_http_exception(CaptainsNotConnectedError(["captain-2", "captain-4"]))

    assert exc.status_code == 409
    assert exc.detail["code"] == "E_CAPTAINS_NOT_CONNECTED"
    assert exc.detail["missing_captain_ids"] == ["captain-2", "captain-4"]


def test_unmapped_error_becomes_conflict() -> None:
    exc = as_http_exception(RuntimeError("boom"))

    assert exc.status_code == 409
    assert exc.detail == {"code": "E_CONFLICT", "message": "boom"}
