from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from teamdraft.api.identity import authenticate_headers
from teamdraft.api.realtime import get_change_feed
from teamdraft.realtime.feed import ChangeFeed

router = APIRouter(tags=["events"])
logger = structlog.get_logger(__name__)


@router.websocket("/tournaments/{tournament_id}/events")
async def tournament_events(
    websocket: WebSocket,
    tournament_id: UUID,
    feed: ChangeFeed = Depends(get_change_feed),
) -> None:
    """Push tournament change events; clients re-read state on each one."""
    user_id = authenticate_headers(websocket.headers)
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    logger.info("change_stream_opened", tournament_id=str(tournament_id), user_id=user_id)
    try:
        async for event in feed.subscribe(tournament_id):
            await websocket.send_text(event.to_json())
    except WebSocketDisconnect:
        logger.info("change_stream_closed", tournament_id=str(tournament_id), user_id=user_id)
