from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamdraft.db.models.team_members import TeamMember
from teamdraft.db.models.teams import Team
from teamdraft.db.repo.player_categories_repo import PlayerCategoriesRepo
from teamdraft.db.repo.team_members_repo import TeamMembersRepo
from teamdraft.db.repo.teams_repo import TeamsRepo
from teamdraft.draft.constants import (
    CAPTAIN_CATEGORY,
    CAPTAIN_DRAFT_PICK_NUMBER,
    CAPTAIN_DRAFT_ROUND,
    DEFAULT_TEAM_NAME_TEMPLATE,
)
from teamdraft.tournaments.constants import (
    TOURNAMENT_STATUS_AWAITING_CAPTAIN_RANKING,
    TOURNAMENT_STATUS_CATEGORIZING,
)
from teamdraft.tournaments.errors import CaptainRankingError, TournamentStatusError
from teamdraft.tournaments.internal import (
    build_team_snapshot,
    build_tournament_snapshot,
    load_tournament_as_admin,
)
from teamdraft.tournaments.lifecycle import advance_status
from teamdraft.tournaments.types import CaptainRankingResult

logger = structlog.get_logger(__name__)

_RANKING_STATUSES = frozenset(
    {
        TOURNAMENT_STATUS_CATEGORIZING,
        TOURNAMENT_STATUS_AWAITING_CAPTAIN_RANKING,
    }
)


def validate_captain_ranking(*, captain_ids: list[str], s_tier_user_ids: list[str]) -> None:
    if not s_tier_user_ids:
        raise CaptainRankingError("no S-Tier players to rank")
    if len(set(captain_ids)) != len(captain_ids):
        raise CaptainRankingError("each captain may appear only once in the ranking")
    if set(captain_ids) != set(s_tier_user_ids):
        raise CaptainRankingError("the ranking must list exactly the S-Tier players")


async def save_captain_ranking(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    acting_user_id: str,
    captain_ids: list[str],
    now_utc: datetime,
) -> CaptainRankingResult:
    """Create the teams from the captain ranking, or re-rank them before the draft."""
    tournament = await load_tournament_as_admin(
        session,
        tournament_id=tournament_id,
        acting_user_id=acting_user_id,
    )
    if tournament.status not in _RANKING_STATUSES:
        raise TournamentStatusError("captains can only be ranked before the draft is prepared")

    s_tier_user_ids = await PlayerCategoriesRepo.list_user_ids_for_category(
        session,
        tournament_id=tournament.id,
        category=CAPTAIN_CATEGORY,
    )
    validate_captain_ranking(captain_ids=captain_ids, s_tier_user_ids=s_tier_user_ids)
    draft_orders = {captain_id: index + 1 for index, captain_id in enumerate(captain_ids)}

    existing_teams = await TeamsRepo.list_for_tournament_for_update(
        session,
        tournament_id=tournament.id,
    )
    if existing_teams:
        await TeamsRepo.reassign_draft_orders(
            session,
            teams=existing_teams,
            draft_orders={team.id: draft_orders[team.captain_id] for team in existing_teams},
        )
        teams = sorted(existing_teams, key=lambda team: team.draft_order)
        teams_created = False
    else:
        teams = [
            Team(
                id=uuid4(),
                tournament_id=tournament.id,
                captain_id=captain_id,
                name=DEFAULT_TEAM_NAME_TEMPLATE.format(draft_order=draft_order),
                draft_order=draft_order,
                created_at=now_utc,
            )
            for captain_id, draft_order in draft_orders.items()
        ]
        await TeamsRepo.create_many(session, teams=teams)
        await TeamMembersRepo.create_many(
            session,
            members=[
                TeamMember(
                    team_id=team.id,
                    user_id=team.captain_id,
                    is_captain=True,
                    category_when_drafted=CAPTAIN_CATEGORY,
                    draft_round=CAPTAIN_DRAFT_ROUND,
                    draft_pick_number=CAPTAIN_DRAFT_PICK_NUMBER,
                    joined_at=now_utc,
                )
                for team in teams
            ],
        )
        teams_created = True

    if tournament.status == TOURNAMENT_STATUS_CATEGORIZING:
        advance_status(
            tournament,
            target=TOURNAMENT_STATUS_AWAITING_CAPTAIN_RANKING,
            now_utc=now_utc,
        )
    logger.info(
        "captain_ranking_saved",
        tournament_id=str(tournament.id),
        teams_total=len(teams),
        teams_created=teams_created,
    )
    return CaptainRankingResult(
        tournament=build_tournament_snapshot(tournament),
        teams=tuple(build_team_snapshot(team) for team in teams),
        teams_created=teams_created,
    )
