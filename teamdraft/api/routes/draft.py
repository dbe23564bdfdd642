from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, status

from teamdraft.api.errors import DOMAIN_ERRORS, as_http_exception
from teamdraft.api.identity import require_user_id
from teamdraft.api.realtime import get_change_feed, get_presence_tracker, publish_change
from teamdraft.api.routes.draft_models import (
    DraftEventResponse,
    DraftPickRequest,
    DraftPickResultResponse,
    DraftSessionCreateRequest,
    DraftSessionResponse,
    DraftStateResponse,
    DraftTimelineResponse,
    PresenceResponse,
)
from teamdraft.db.session import SessionLocal
from teamdraft.draft import service as draft_service
from teamdraft.realtime.constants import CHANGE_EVENT_DRAFT_PICK, CHANGE_EVENT_DRAFT_SESSION
from teamdraft.realtime.feed import ChangeFeed
from teamdraft.realtime.presence import PresenceTracker

router = APIRouter(tags=["draft"])


@router.post(
    "/tournaments/{tournament_id}/draft",
    response_model=DraftSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_draft_session(
    tournament_id: UUID,
    payload: DraftSessionCreateRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> DraftSessionResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            draft_session = await draft_service.create_draft_session(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                pick_timer_seconds=payload.pick_timer_seconds,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await publish_change(
        feed,
        tournament_id=tournament_id,
        event_type=CHANGE_EVENT_DRAFT_SESSION,
        entity_id=draft_session.draft_session_id,
        happened_at=now_utc,
        payload={"status": draft_session.status},
    )
    return DraftSessionResponse.model_validate(draft_session)


@router.post("/tournaments/{tournament_id}/draft/start", response_model=DraftSessionResponse)
async def start_draft(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
    presence: PresenceTracker = Depends(get_presence_tracker),
) -> DraftSessionResponse:
    now_utc = datetime.now(timezone.utc)
    online_user_ids = await presence.online_user_ids(
        presence.draft_room_key(tournament_id),
        now_utc=now_utc,
    )
    try:
        async with SessionLocal.begin() as session:
            draft_session = await draft_service.start_draft(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                online_user_ids=online_user_ids,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await publish_change(
        feed,
        tournament_id=tournament_id,
        event_type=CHANGE_EVENT_DRAFT_SESSION,
        entity_id=draft_session.draft_session_id,
        happened_at=now_utc,
        payload={
            "status": draft_session.status,
            "current_category": draft_session.current_category,
        },
    )
    return DraftSessionResponse.model_validate(draft_session)


@router.post("/tournaments/{tournament_id}/draft/picks", response_model=DraftPickResultResponse)
async def submit_pick(
    tournament_id: UUID,
    payload: DraftPickRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> DraftPickResultResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await draft_service.submit_pick(
                session,
                tournament_id=tournament_id,
                team_id=payload.team_id,
                picked_user_id=payload.user_id,
                acting_user_id=user_id,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await publish_change(
        feed,
        tournament_id=tournament_id,
        event_type=CHANGE_EVENT_DRAFT_PICK,
        entity_id=result.pick.pick_id,
        happened_at=now_utc,
        payload={
            "pick_number": result.pick.pick_number,
            "team_id": str(result.pick.team_id),
            "user_id": result.pick.user_id,
        },
    )
    if result.category_advanced or result.draft_completed:
        await publish_change(
            feed,
            tournament_id=tournament_id,
            event_type=CHANGE_EVENT_DRAFT_SESSION,
            entity_id=result.session.draft_session_id,
            happened_at=now_utc,
            payload={
                "status": result.session.status,
                "current_category": result.session.current_category,
            },
        )
    return DraftPickResultResponse.model_validate(result)


@router.get("/tournaments/{tournament_id}/draft", response_model=DraftStateResponse)
async def get_draft_state(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
) -> DraftStateResponse:
    try:
        async with SessionLocal() as session:
            state = await draft_service.get_draft_state(session, tournament_id=tournament_id)
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return DraftStateResponse.model_validate(state)


@router.get("/tournaments/{tournament_id}/draft/timeline", response_model=DraftTimelineResponse)
async def get_draft_timeline(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
) -> DraftTimelineResponse:
    async with SessionLocal() as session:
        events = await draft_service.get_draft_timeline(session, tournament_id=tournament_id)
    return DraftTimelineResponse(
        events=[DraftEventResponse.model_validate(event) for event in events]
    )


@router.post("/tournaments/{tournament_id}/draft/presence", response_model=PresenceResponse)
async def draft_presence_heartbeat(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
    presence: PresenceTracker = Depends(get_presence_tracker),
) -> PresenceResponse:
    now_utc = datetime.now(timezone.utc)
    channel_key = presence.draft_room_key(tournament_id)
    await presence.heartbeat(channel_key, user_id, now_utc=now_utc)
    online_user_ids = await presence.online_user_ids(channel_key, now_utc=now_utc)
    return PresenceResponse(online_user_ids=sorted(online_user_ids))


@router.delete(
    "/tournaments/{tournament_id}/draft/presence",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def leave_draft_room(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
    presence: PresenceTracker = Depends(get_presence_tracker),
) -> None:
    await presence.leave(presence.draft_room_key(tournament_id), user_id)
