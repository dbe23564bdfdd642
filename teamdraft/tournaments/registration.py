from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.registrations import Registration
from teamdraft.db.repo.registrations_repo import RegistrationsRepo
from teamdraft.tournaments.constants import (
    POSITIONS,
    REGISTRATION_CIVS_PER_POSITION,
    REGISTRATION_NOTES_MAX_LENGTH,
    REGISTRATION_PREFERRED_MAPS,
    REGISTRATION_STATUS_APPROVED,
    TOURNAMENT_STATUS_DRAFT_IN_PROGRESS,
    TOURNAMENT_STATUS_REGISTRATION_OPEN,
    status_precedes,
)
from teamdraft.tournaments.errors import (
    AlreadyRegisteredError,
    RegistrationNotFoundError,
    RegistrationValidationError,
    TournamentAccessError,
    TournamentStatusError,
)
from teamdraft.tournaments.internal import (
    build_registration_snapshot,
    is_tournament_admin,
    load_tournament_for_update,
)
from teamdraft.tournaments.types import (
    PlayerIdentity,
    RegistrationPreferences,
    RegistrationSnapshot,
)

logger = structlog.get_logger(__name__)


def _distinct_names(values: list[str]) -> list[str]:
    names: list[str] = []
    for raw in values:
        name = raw.strip()
        if name and name not in names:
            names.append(name)
    return names


def validate_registration_preferences(
    preferences: RegistrationPreferences,
    *,
    map_pool: list[str],
) -> RegistrationPreferences:
    """Return a normalized copy of ``preferences`` or raise with a user-facing reason."""
    profile_url = preferences.profile_url.strip()
    if not profile_url:
        raise RegistrationValidationError("a player profile URL is required")
    if preferences.preferred_position not in POSITIONS:
        raise RegistrationValidationError("choose a preferred position: flank, pocket or any")

    flank = _distinct_names(preferences.preferred_civs_flank)
    if len(flank) != REGISTRATION_CIVS_PER_POSITION:
        raise RegistrationValidationError(
            f"select exactly {REGISTRATION_CIVS_PER_POSITION} civilizations for flank position"
        )
    pocket = _distinct_names(preferences.preferred_civs_pocket)
    if len(pocket) != REGISTRATION_CIVS_PER_POSITION:
        raise RegistrationValidationError(
            f"select exactly {REGISTRATION_CIVS_PER_POSITION} civilizations for pocket position"
        )

    maps = _distinct_names(preferences.preferred_maps)
    if len(maps) != REGISTRATION_PREFERRED_MAPS:
        raise RegistrationValidationError(
            f"select exactly {REGISTRATION_PREFERRED_MAPS} preferred maps"
        )
    unknown_maps = [name for name in maps if name not in map_pool]
    if unknown_maps:
        raise RegistrationValidationError(
            f"maps not in the tournament map pool: {', '.join(unknown_maps)}"
        )

    notes = preferences.notes.strip() if preferences.notes else None
    if notes and len(notes) > REGISTRATION_NOTES_MAX_LENGTH:
        raise RegistrationValidationError(
            f"notes must be at most {REGISTRATION_NOTES_MAX_LENGTH} characters"
        )

    return RegistrationPreferences(
        profile_url=profile_url,
        preferred_position=preferences.preferred_position,
        preferred_civs_flank=flank,
        preferred_civs_pocket=pocket,
        preferred_maps=maps,
        notes=notes or None,
    )


async def register_player(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    player: PlayerIdentity,
    preferences: RegistrationPreferences,
    now_utc: datetime,
) -> RegistrationSnapshot:
    tournament = await load_tournament_for_update(session, tournament_id)
    if tournament.status != TOURNAMENT_STATUS_REGISTRATION_OPEN:
        raise TournamentStatusError("registration is not open for this tournament")
    resolved = validate_registration_preferences(preferences, map_pool=list(tournament.map_pool))

    registration = Registration(
        id=uuid4(),
        tournament_id=tournament.id,
        user_id=player.user_id,
        display_name=player.display_name,
        avatar_url=player.avatar_url,
        profile_url=resolved.profile_url,
        preferred_position=resolved.preferred_position,
        preferred_civs_flank=resolved.preferred_civs_flank,
        preferred_civs_pocket=resolved.preferred_civs_pocket,
        preferred_maps=resolved.preferred_maps,
        notes=resolved.notes,
        status=REGISTRATION_STATUS_APPROVED,
        registered_at=now_utc,
        updated_at=now_utc,
    )
    created = await RegistrationsRepo.create_once(session, registration=registration)
    if not created:
        raise AlreadyRegisteredError
    logger.info(
        "tournament_registration_created",
        tournament_id=str(tournament.id),
        user_id=player.user_id,
    )
    return build_registration_snapshot(registration)


async def update_registration(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    user_id: str,
    acting_user_id: str,
    preferences: RegistrationPreferences,
    now_utc: datetime,
) -> RegistrationSnapshot:
    tournament = await load_tournament_for_update(session, tournament_id)
    is_admin = is_tournament_admin(tournament, acting_user_id)
    if not is_admin:
        if acting_user_id != user_id:
            raise TournamentAccessError
        if not status_precedes(tournament.status, TOURNAMENT_STATUS_DRAFT_IN_PROGRESS):
            raise TournamentStatusError("registrations are locked once the draft starts")

    registration = await RegistrationsRepo.get_for_user_for_update(
        session,
        tournament_id=tournament.id,
        user_id=user_id,
    )
    if registration is None:
        raise RegistrationNotFoundError
    resolved = validate_registration_preferences(preferences, map_pool=list(tournament.map_pool))

    registration.profile_url = resolved.profile_url
    registration.preferred_position = resolved.preferred_position
    registration.preferred_civs_flank = resolved.preferred_civs_flank
    registration.preferred_civs_pocket = resolved.preferred_civs_pocket
    registration.preferred_maps = resolved.preferred_maps
    registration.notes = resolved.notes
    registration.updated_at = now_utc
    logger.info(
        "tournament_registration_updated",
        tournament_id=str(tournament.id),
        user_id=user_id,
        admin_override=is_admin and acting_user_id != user_id,
    )
    return build_registration_snapshot(registration)


async def withdraw_registration(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
) -> None:
    tournament = await load_tournament_for_update(session, tournament_id)
    if tournament.status != TOURNAMENT_STATUS_REGISTRATION_OPEN:
        raise TournamentStatusError("withdrawals are only possible while registration is open")
    deleted = await RegistrationsRepo.delete_for_user(
        session,
        tournament_id=tournament.id,
        user_id=acting_user_id,
    )
    if deleted == 0:
        raise RegistrationNotFoundError
    logger.info(
        "tournament_registration_withdrawn",
        tournament_id=str(tournament.id),
        user_id=acting_user_id,
    )


async def list_registrations(
    session: AsyncSession,
    *,
    tournament_id: UUID,
) -> list[RegistrationSnapshot]:
    registrations = await RegistrationsRepo.list_for_tournament(
        session,
        tournament_id=tournament_id,
    )
    return [build_registration_snapshot(registration) for registration in registrations]
