from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from teamdraft.api.errors import DOMAIN_ERRORS, as_http_exception
from teamdraft.api.identity import require_user_id
from teamdraft.api.realtime import get_change_feed, publish_change
from teamdraft.api.routes.bracket_models import (
    BracketDeleteResponse,
    BracketResponse,
    MatchListResponse,
    MatchResponse,
    MatchResultRequest,
    MatchResultResponse,
    MatchStatusRequest,
    StandingResponse,
    StandingsResponse,
)
from teamdraft.bracket import service as bracket_service
from teamdraft.db.session import SessionLocal
from teamdraft.realtime.constants import CHANGE_EVENT_BRACKET, CHANGE_EVENT_MATCH
from teamdraft.realtime.feed import ChangeFeed

router = APIRouter(tags=["bracket"])


@router.post(
    "/tournaments/{tournament_id}/bracket",
    response_model=BracketResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_bracket(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> BracketResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            bracket = await bracket_service.generate_bracket(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await publish_change(
        feed,
        tournament_id=tournament_id,
        event_type=CHANGE_EVENT_BRACKET,
        entity_id=tournament_id,
        happened_at=now_utc,
        payload={"total_matches": bracket.total_matches},
    )
    return BracketResponse.model_validate(bracket)


@router.delete("/tournaments/{tournament_id}/bracket", response_model=BracketDeleteResponse)
async def delete_bracket(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> BracketDeleteResponse:
    try:
        async with SessionLocal.begin() as session:
            matches_deleted = await bracket_service.delete_bracket(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await publish_change(
        feed,
        tournament_id=tournament_id,
        event_type=CHANGE_EVENT_BRACKET,
        entity_id=tournament_id,
        happened_at=datetime.now(timezone.utc),
        payload={"deleted": True},
    )
    return BracketDeleteResponse(matches_deleted=matches_deleted)


@router.get("/tournaments/{tournament_id}/standings", response_model=StandingsResponse)
async def get_standings(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
) -> StandingsResponse:
    async with SessionLocal() as session:
        standings = await bracket_service.get_round_robin_standings(
            session,
            tournament_id=tournament_id,
        )
    return StandingsResponse(
        standings=[StandingResponse.model_validate(standing) for standing in standings]
    )


@router.post("/tournaments/{tournament_id}/playoffs/assign", response_model=MatchListResponse)
async def assign_playoff_teams(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> MatchListResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            semifinals = await bracket_service.assign_playoff_teams(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    for semifinal in semifinals:
        await publish_change(
            feed,
            tournament_id=tournament_id,
            event_type=CHANGE_EVENT_MATCH,
            entity_id=semifinal.match_id,
            happened_at=now_utc,
            payload={"phase": semifinal.phase, "status": semifinal.status},
        )
    return MatchListResponse(matches=[MatchResponse.model_validate(item) for item in semifinals])


@router.get("/tournaments/{tournament_id}/matches", response_model=MatchListResponse)
async def list_matches(
    tournament_id: UUID,
    phase: str | None = Query(default=None, max_length=16),
    upcoming: bool = Query(default=False),
    user_id: str = Depends(require_user_id),
) -> MatchListResponse:
    async with SessionLocal() as session:
        if upcoming:
            matches = await bracket_service.list_upcoming_matches(
                session,
                tournament_id=tournament_id,
                now_utc=datetime.now(timezone.utc),
            )
        else:
            matches = await bracket_service.list_matches(
                session,
                tournament_id=tournament_id,
                phase=phase,
            )
    return MatchListResponse(matches=[MatchResponse.model_validate(item) for item in matches])


@router.get("/tournaments/{tournament_id}/matches/recent", response_model=MatchListResponse)
async def list_recent_matches(
    tournament_id: UUID,
    limit: int = Query(default=5, ge=1, le=50),
    user_id: str = Depends(require_user_id),
) -> MatchListResponse:
    async with SessionLocal() as session:
        matches = await bracket_service.list_recent_matches(
            session,
            tournament_id=tournament_id,
            limit=limit,
        )
    return MatchListResponse(matches=[MatchResponse.model_validate(item) for item in matches])


@router.get("/matches/scheduled", response_model=MatchListResponse)
async def list_my_scheduled_matches(
    user_id: str = Depends(require_user_id),
) -> MatchListResponse:
    async with SessionLocal() as session:
        matches = await bracket_service.list_captain_scheduled_matches(
            session,
            captain_id=user_id,
        )
    return MatchListResponse(matches=[MatchResponse.model_validate(item) for item in matches])

@router.post("/matches/{match_id}/result", response_model=MatchResultResponse)
async def record_match_result(
    match_id: UUID,
    payload: MatchResultRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> MatchResultResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            outcome = await bracket_service.record_match_result(
                session,
                match_id=match_id,
                acting_user_id=user_id,
                team1_score=payload.team1_score,
                team2_score=payload.team2_score,
                winner_id=payload.winner_id,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    changed = [outcome.match]
    if outcome.grand_final is not None:
        changed.append(outcome.grand_final)
    for match in changed:
        await publish_change(
            feed,
            tournament_id=match.tournament_id,
            event_type=CHANGE_EVENT_MATCH,
            entity_id=match.match_id,
            happened_at=now_utc,
            payload={"phase": match.phase, "status": match.status},
        )
    return MatchResultResponse.model_validate(outcome)


@router.post("/matches/{match_id}/status", response_model=MatchResponse)
async def update_match_status(
    match_id: UUID,
    payload: MatchStatusRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> MatchResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            match = await bracket_service.update_match_status(
                session,
                match_id=match_id,
                acting_user_id=user_id,
                status=payload.status,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await publish_change(
        feed,
        tournament_id=match.tournament_id,
        event_type=CHANGE_EVENT_MATCH,
        entity_id=match.match_id,
        happened_at=now_utc,
        payload={"phase": match.phase, "status": match.status},
    )
    return MatchResponse.model_validate(match)
