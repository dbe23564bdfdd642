from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, status

from teamdraft.api.errors import DOMAIN_ERRORS, as_http_exception
from teamdraft.api.identity import require_user_id
from teamdraft.api.realtime import get_change_feed, publish_change
from teamdraft.api.routes.bracket_models import MatchResponse
from teamdraft.api.routes.scheduling_models import (
    CounterProposalResponse,
    ProposalCreateRequest,
    ProposalDecisionResponse,
    ProposalListResponse,
    ProposalRespondRequest,
    ProposalResponse,
    ScheduleSetRequest,
)
from teamdraft.db.session import SessionLocal
from teamdraft.realtime.constants import CHANGE_EVENT_MATCH, CHANGE_EVENT_SCHEDULE_PROPOSAL
from teamdraft.realtime.feed import ChangeFeed
from teamdraft.scheduling import service as schedule_service
from teamdraft.scheduling.types import ProposalSnapshot

router = APIRouter(tags=["scheduling"])


async def _publish_proposal(
    feed: ChangeFeed,
    proposal: ProposalSnapshot,
    *,
    happened_at: datetime,
) -> None:
    await publish_change(
        feed,
        tournament_id=proposal.tournament_id,
        event_type=CHANGE_EVENT_SCHEDULE_PROPOSAL,
        entity_id=proposal.proposal_id,
        happened_at=happened_at,
        payload={"match_id": str(proposal.match_id), "status": proposal.status},
    )


@router.post(
    "/matches/{match_id}/proposals",
    response_model=ProposalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def propose_schedule(
    match_id: UUID,
    payload: ProposalCreateRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> ProposalResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            proposal = await schedule_service.propose_schedule(
                session,
                match_id=match_id,
                acting_user_id=user_id,
                proposed_time=payload.proposed_time,
                notes=payload.notes,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await _publish_proposal(feed, proposal, happened_at=now_utc)
    return ProposalResponse.model_validate(proposal)


@router.get("/matches/{match_id}/proposals", response_model=ProposalListResponse)
async def list_match_proposals(
    match_id: UUID,
    user_id: str = Depends(require_user_id),
) -> ProposalListResponse:
    try:
        async with SessionLocal() as session:
            proposals = await schedule_service.list_match_proposals(session, match_id=match_id)
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return ProposalListResponse(
        proposals=[ProposalResponse.model_validate(proposal) for proposal in proposals]
    )


@router.post("/proposals/{proposal_id}/respond", response_model=ProposalDecisionResponse)
async def respond_to_proposal(
    proposal_id: UUID,
    payload: ProposalRespondRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> ProposalDecisionResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await schedule_service.respond_to_proposal(
                session,
                proposal_id=proposal_id,
                acting_user_id=user_id,
                decision=payload.decision,
                notes=payload.notes,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await _publish_proposal(feed, result.proposal, happened_at=now_utc)
    if result.match is not None:
        await publish_change(
            feed,
            tournament_id=result.match.tournament_id,
            event_type=CHANGE_EVENT_MATCH,
            entity_id=result.match.match_id,
            happened_at=now_utc,
            payload={"phase": result.match.phase, "status": result.match.status},
        )
    return ProposalDecisionResponse.model_validate(result)


@router.post("/proposals/{proposal_id}/counter", response_model=CounterProposalResponse)
async def counter_propose(
    proposal_id: UUID,
    payload: ProposalCreateRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> CounterProposalResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await schedule_service.counter_propose(
                session,
                proposal_id=proposal_id,
                acting_user_id=user_id,
                proposed_time=payload.proposed_time,
                notes=payload.notes,
                now_utc=now_utc,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    await _publish_proposal(feed, result.countered, happened_at=now_utc)
    await _publish_proposal(feed, result.proposal, happened_at=now_utc)
    return CounterProposalResponse.model_validate(result)


@router.put("/matches/{match_id}/schedule", response_model=MatchResponse)
async def admin_set_schedule(
    match_id: UUID,
    payload: ScheduleSetRequest,
    user_id: str = Depends(require_user_id),
    feed: ChangeFeed = Depends(get_change_feed),
) -> MatchResponse:
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            match = await schedule_service.admin_set_schedule(
                session,
                match_id=match_id,
                acting_user_id=user_id,
                scheduled_time=payload.scheduled_time,
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
