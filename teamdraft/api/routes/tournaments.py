from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from teamdraft.api.errors import DOMAIN_ERRORS, as_http_exception
from teamdraft.api.identity import require_user_id
from teamdraft.api.routes.tournaments_models import (
    CaptainRankingRequest,
    CaptainRankingResponse,
    CategoriesResponse,
    CategorizedPlayerResponse,
    CategoryAssignRequest,
    MapPoolUpdateRequest,
    RegistrationListResponse,
    RegistrationRequest,
    RegistrationResponse,
    RegistrationUpdateRequest,
    TeamRenameRequest,
    TeamResponse,
    TournamentCreateRequest,
    TournamentListResponse,
    TournamentResponse,
)
from teamdraft.db.session import SessionLocal
from teamdraft.tournaments import service as tournament_service
from teamdraft.tournaments.types import PlayerIdentity, RegistrationPreferences

router = APIRouter(tags=["tournaments"])

_STATUS_ACTIONS = {
    "open-registration": tournament_service.open_registration,
    "close-registration": tournament_service.close_registration,
    "begin-categorizing": tournament_service.begin_categorizing,
}


def _preferences(
    payload: RegistrationRequest | RegistrationUpdateRequest,
) -> RegistrationPreferences:
    return RegistrationPreferences(
        profile_url=payload.profile_url,
        preferred_position=payload.preferred_position,
        preferred_civs_flank=list(payload.preferred_civs_flank),
        preferred_civs_pocket=list(payload.preferred_civs_pocket),
        preferred_maps=list(payload.preferred_maps),
        notes=payload.notes,
    )


@router.post(
    "/tournaments",
    response_model=TournamentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_tournament(
    payload: TournamentCreateRequest,
    user_id: str = Depends(require_user_id),
) -> TournamentResponse:
    try:
        async with SessionLocal.begin() as session:
            tournament = await tournament_service.create_tournament(
                session,
                admin_id=user_id,
                name=payload.name,
                map_pool=payload.map_pool,
                description=payload.description,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return TournamentResponse.model_validate(tournament)


@router.get("/tournaments", response_model=TournamentListResponse)
async def list_tournaments(
    scope: Literal["mine", "public"] = Query(default="public"),
    user_id: str = Depends(require_user_id),
) -> TournamentListResponse:
    async with SessionLocal() as session:
        if scope == "mine":
            tournaments = await tournament_service.list_admin_tournaments(
                session,
                admin_id=user_id,
            )
        else:
            tournaments = await tournament_service.list_public_tournaments(session)
    return TournamentListResponse(
        tournaments=[TournamentResponse.model_validate(item) for item in tournaments]
    )


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
async def get_tournament(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
) -> TournamentResponse:
    try:
        async with SessionLocal() as session:
            tournament = await tournament_service.get_tournament(
                session,
                tournament_id=tournament_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return TournamentResponse.model_validate(tournament)


@router.post("/tournaments/{tournament_id}/status/{action}", response_model=TournamentResponse)
async def change_tournament_status(
    tournament_id: UUID,
    action: str,
    user_id: str = Depends(require_user_id),
) -> TournamentResponse:
    transition = _STATUS_ACTIONS.get(action)
    if transition is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "E_UNKNOWN_ACTION", "message": f"unknown status action: {action}"},
        )
    try:
        async with SessionLocal.begin() as session:
            tournament = await transition(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return TournamentResponse.model_validate(tournament)


@router.put("/tournaments/{tournament_id}/maps", response_model=TournamentResponse)
async def update_map_pool(
    tournament_id: UUID,
    payload: MapPoolUpdateRequest,
    user_id: str = Depends(require_user_id),
) -> TournamentResponse:
    try:
        async with SessionLocal.begin() as session:
            tournament = await tournament_service.update_map_pool(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                map_pool=payload.map_pool,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return TournamentResponse.model_validate(tournament)


@router.post(
    "/tournaments/{tournament_id}/registrations",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    tournament_id: UUID,
    payload: RegistrationRequest,
    user_id: str = Depends(require_user_id),
) -> RegistrationResponse:
    try:
        async with SessionLocal.begin() as session:
            registration = await tournament_service.register_player(
                session,
                tournament_id=tournament_id,
                player=PlayerIdentity(
                    user_id=user_id,
                    display_name=payload.display_name,
                    avatar_url=payload.avatar_url,
                ),
                preferences=_preferences(payload),
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return RegistrationResponse.model_validate(registration)


@router.get("/tournaments/{tournament_id}/registrations", response_model=RegistrationListResponse)
async def list_registrations(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
) -> RegistrationListResponse:
    async with SessionLocal() as session:
        registrations = await tournament_service.list_registrations(
            session,
            tournament_id=tournament_id,
        )
    return RegistrationListResponse(
        registrations=[RegistrationResponse.model_validate(item) for item in registrations]
    )


@router.put(
    "/tournaments/{tournament_id}/registrations/{registered_user_id}",
    response_model=RegistrationResponse,
)
async def update_registration(
    tournament_id: UUID,
    registered_user_id: str,
    payload: RegistrationUpdateRequest,
    user_id: str = Depends(require_user_id),
) -> RegistrationResponse:
    try:
        async with SessionLocal.begin() as session:
            registration = await tournament_service.update_registration(
                session,
                tournament_id=tournament_id,
                user_id=registered_user_id,
                acting_user_id=user_id,
                preferences=_preferences(payload),
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return RegistrationResponse.model_validate(registration)


@router.delete(
    "/tournaments/{tournament_id}/registrations/me",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def withdraw_registration(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
) -> None:
    try:
        async with SessionLocal.begin() as session:
            await tournament_service.withdraw_registration(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.get("/tournaments/{tournament_id}/categories", response_model=CategoriesResponse)
async def list_categories(
    tournament_id: UUID,
    user_id: str = Depends(require_user_id),
) -> CategoriesResponse:
    async with SessionLocal() as session:
        categorized = await tournament_service.list_categorized_players(
            session,
            tournament_id=tournament_id,
        )
        uncategorized = await tournament_service.list_uncategorized_players(
            session,
            tournament_id=tournament_id,
        )
        stats = await tournament_service.category_stats(session, tournament_id=tournament_id)
    return CategoriesResponse(
        categories={
            category: [CategorizedPlayerResponse.model_validate(player) for player in players]
            for category, players in categorized.items()
        },
        uncategorized=[
            CategorizedPlayerResponse.model_validate(player) for player in uncategorized
        ],
        stats=stats,
    )


@router.put(
    "/tournaments/{tournament_id}/categories/{player_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def assign_category(
    tournament_id: UUID,
    player_user_id: str,
    payload: CategoryAssignRequest,
    user_id: str = Depends(require_user_id),
) -> None:
    try:
        async with SessionLocal.begin() as session:
            await tournament_service.assign_category(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                user_id=player_user_id,
                category=payload.category,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.delete(
    "/tournaments/{tournament_id}/categories/{player_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_category(
    tournament_id: UUID,
    player_user_id: str,
    user_id: str = Depends(require_user_id),
) -> None:
    try:
        async with SessionLocal.begin() as session:
            await tournament_service.remove_category(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                user_id=player_user_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc


@router.put(
    "/tournaments/{tournament_id}/captains/ranking",
    response_model=CaptainRankingResponse,
)
async def save_captain_ranking(
    tournament_id: UUID,
    payload: CaptainRankingRequest,
    user_id: str = Depends(require_user_id),
) -> CaptainRankingResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await tournament_service.save_captain_ranking(
                session,
                tournament_id=tournament_id,
                acting_user_id=user_id,
                captain_ids=payload.captain_ids,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return CaptainRankingResponse.model_validate(result)


@router.put("/teams/{team_id}/name", response_model=TeamResponse)
async def rename_team(
    team_id: UUID,
    payload: TeamRenameRequest,
    user_id: str = Depends(require_user_id),
) -> TeamResponse:
    try:
        async with SessionLocal.begin() as session:
            team = await tournament_service.rename_team(
                session,
                team_id=team_id,
                acting_user_id=user_id,
                name=payload.name,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return TeamResponse.model_validate(team)
