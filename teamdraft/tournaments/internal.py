from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.registrations import Registration
from teamdraft.db.models.teams import Team
from teamdraft.db.models.tournaments import Tournament
from teamdraft.db.repo.tournaments_repo import TournamentsRepo
from teamdraft.tournaments.errors import TournamentAccessError, TournamentNotFoundError
from teamdraft.tournaments.types import RegistrationSnapshot, TeamSnapshot, TournamentSnapshot


def build_tournament_snapshot(tournament: Tournament) -> TournamentSnapshot:
    return TournamentSnapshot(
        tournament_id=tournament.id,
        name=tournament.name,
        description=tournament.description,
        admin_id=tournament.admin_id,
        status=tournament.status,
        format=tournament.format,
        team_size=tournament.team_size,
        map_pool=tuple(tournament.map_pool),
        created_at=tournament.created_at,
        updated_at=tournament.updated_at,
    )


def build_registration_snapshot(registration: Registration) -> RegistrationSnapshot:
    return RegistrationSnapshot(
        registration_id=registration.id,
        tournament_id=registration.tournament_id,
        user_id=registration.user_id,
        display_name=registration.display_name,
        avatar_url=registration.avatar_url,
        profile_url=registration.profile_url,
        preferred_position=registration.preferred_position,
        preferred_civs_flank=tuple(registration.preferred_civs_flank),
        preferred_civs_pocket=tuple(registration.preferred_civs_pocket),
        preferred_maps=tuple(registration.preferred_maps),
        notes=registration.notes,
        registered_at=registration.registered_at,
    )


def build_team_snapshot(team: Team) -> TeamSnapshot:
    return TeamSnapshot(
        team_id=team.id,
        tournament_id=team.tournament_id,
        captain_id=team.captain_id,
        name=team.name,
        draft_order=team.draft_order,
    )


def is_tournament_admin(tournament: Tournament, user_id: str) -> bool:
    return tournament.admin_id == user_id


async def load_tournament_for_update(session: AsyncSession, tournament_id: UUID) -> Tournament:
    tournament = await TournamentsRepo.get_by_id_for_update(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return tournament


async def load_tournament_as_admin(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
) -> Tournament:
    tournament = await load_tournament_for_update(session, tournament_id)
    if not is_tournament_admin(tournament, acting_user_id):
        raise TournamentAccessError
    return tournament
