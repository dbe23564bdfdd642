from __future__ import annotations

import structlog
from fastapi import HTTPException

from teamdraft.bracket.errors import (
    BracketAccessError,
    BracketAlreadyExistsError,
    BracketError,
    InsufficientTeamsError,
    MatchNotFoundError,
    MatchResultError,
    MatchStatusError,
)
from teamdraft.draft.errors import (
    CaptainsNotConnectedError,
    DraftAccessError,
    DraftError,
    DraftSessionAlreadyExistsError,
    DraftSessionNotFoundError,
    InvalidStateError,
    NotYourTurnError,
    PlayerUnavailableError,
    SessionNotActiveError,
    TeamNotFoundError,
)
from teamdraft.scheduling.errors import (
    DuplicatePendingProposalError,
    MatchNotSchedulableError,
    ProposalExpiredError,
    ProposalNotFoundError,
    ProposalNotPendingError,
    ScheduleAccessError,
    ScheduleError,
    ScheduleValidationError,
)
from teamdraft.tournaments.errors import (
    AlreadyRegisteredError,
    CaptainRankingError,
    PlayerNotRegisteredError,
    RegistrationNotFoundError,
    RegistrationValidationError,
    TournamentAccessError,
    TournamentError,
    TournamentNotFoundError,
    TournamentStatusError,
    TournamentValidationError,
)

logger = structlog.get_logger(__name__)

DOMAIN_ERRORS: tuple[type[Exception], ...] = (
    TournamentError,
    DraftError,
    BracketError,
    ScheduleError,
)

# (error, status code, code, default message); message of validation errors is kept verbatim.
_ERROR_TABLE: tuple[tuple[type[Exception], int, str, str], ...] = (
    (TournamentNotFoundError, 404, "E_TOURNAMENT_NOT_FOUND", "tournament not found"),
    (RegistrationNotFoundError, 404, "E_REGISTRATION_NOT_FOUND", "registration not found"),
    (DraftSessionNotFoundError, 404, "E_DRAFT_NOT_FOUND", "draft session not found"),
    (TeamNotFoundError, 404, "E_TEAM_NOT_FOUND", "team not found"),
    (MatchNotFoundError, 404, "E_MATCH_NOT_FOUND", "match not found"),
    (ProposalNotFoundError, 404, "E_PROPOSAL_NOT_FOUND", "proposal not found"),
    (TournamentAccessError, 403, "E_FORBIDDEN", "only the tournament admin can do that"),
    (DraftAccessError, 403, "E_FORBIDDEN", "only the team captain or the admin can do that"),
    (BracketAccessError, 403, "E_FORBIDDEN", "only the tournament admin can do that"),
    (ScheduleAccessError, 403, "E_FORBIDDEN", "you cannot act on this match schedule"),
    (NotYourTurnError, 409, "E_NOT_YOUR_TURN", "it's not your turn"),
    (PlayerUnavailableError, 409, "E_PLAYER_UNAVAILABLE", "that player is no longer available"),
    (SessionNotActiveError, 409, "E_DRAFT_NOT_ACTIVE", "the draft is not running"),
    (
        DraftSessionAlreadyExistsError,
        409,
        "E_DRAFT_ALREADY_EXISTS",
        "a draft session already exists",
    ),
    (CaptainsNotConnectedError, 409, "E_CAPTAINS_NOT_CONNECTED", "not all captains are connected"),
    (InvalidStateError, 409, "E_DRAFT_INVALID_STATE", "the draft is in an invalid state"),
    (InsufficientTeamsError, 409, "E_INSUFFICIENT_TEAMS", "at least 4 teams are required"),
    (BracketAlreadyExistsError, 409, "E_BRACKET_EXISTS", "the bracket already exists"),
    (MatchStatusError, 409, "E_MATCH_STATUS", "the match cannot change to that status"),
    (
        DuplicatePendingProposalError,
        409,
        "E_DUPLICATE_PENDING_PROPOSAL",
        "a newer proposal already exists",
    ),
    (ProposalNotPendingError, 409, "E_PROPOSAL_NOT_PENDING", "the proposal was already resolved"),
    (ProposalExpiredError, 409, "E_PROPOSAL_EXPIRED", "the proposed time has already passed"),
    (MatchNotSchedulableError, 409, "E_MATCH_NOT_SCHEDULABLE", "the match cannot be scheduled"),
    (AlreadyRegisteredError, 409, "E_ALREADY_REGISTERED", "you are already registered"),
    (TournamentStatusError, 409, "E_TOURNAMENT_STATUS", "not allowed at this tournament stage"),
    (RegistrationValidationError, 422, "E_REGISTRATION_INVALID", "invalid registration"),
    (TournamentValidationError, 422, "E_TOURNAMENT_INVALID", "invalid tournament"),
    (ScheduleValidationError, 422, "E_SCHEDULE_INVALID", "invalid schedule"),
    (MatchResultError, 422, "E_MATCH_RESULT_INVALID", "invalid match result"),
    (CaptainRankingError, 422, "E_CAPTAIN_RANKING_INVALID", "invalid captain ranking"),
    (PlayerNotRegisteredError, 422, "E_PLAYER_NOT_REGISTERED", "player is not registered"),
)

_VERBATIM_STATUS_CODES = frozenset({422})


def as_http_exception(exc: Exception) -> HTTPException:
    for error_type, status_code, code, default_message in _ERROR_TABLE:
        if not isinstance(exc, error_type):
            continue
        message = default_message
        if status_code in _VERBATIM_STATUS_CODES and str(exc):
            message = str(exc)
        detail: dict[str, object] = {"code": code, "message": message}
        if isinstance(exc, CaptainsNotConnectedError):
            detail["missing_captain_ids"] = list(exc.missing_captain_ids)
        logger.info("request_rejected", code=code, status_code=status_code)
        return HTTPException(status_code=status_code, detail=detail)

    logger.warning("request_rejected_unmapped", error_type=type(exc).__name__)
    return HTTPException(status_code=409, detail={"code": "E_CONFLICT", "message": str(exc)})
