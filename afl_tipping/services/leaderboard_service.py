"""
LeaderboardService - Builds competition leaderboards in real-time.

Leaderboards are never stored: every request rebuilds them from the current
tips and games of the competition. build_leaderboard() and
apply_rank_changes() are pure, the service only loads their inputs.
"""

import logging
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.competition import CompetitionSettings
from afl_tipping.models.leaderboard import UserStanding
from afl_tipping.models.tip import TipWithGame
from afl_tipping.models.user import UserSummary
from afl_tipping.repositories.competition_repository import CompetitionRepository
from afl_tipping.repositories.tip_repository import TipRepository
from afl_tipping.repositories.user_repository import UserRepository
from afl_tipping.services.margin_service import margin_rank
from afl_tipping.services.round_service import (
    aggregate_round,
    completed_rounds,
    get_round_summary,
    group_by_round,
    prediction_accuracy,
)

logger = logging.getLogger(__name__)


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class CompetitionNotFoundError(LeaderboardServiceError):
    """Raised when the competition does not exist."""
    pass


# ============================================
# Pure leaderboard computation
# ============================================

def _standing_for(
    user: UserSummary,
    user_tips: list[TipWithGame],
    settings: CompetitionSettings
) -> UserStanding:
    rounds = group_by_round(user_tips)
    breakdown = [
        aggregate_round(rounds[round], round, settings)
        for round in sorted(rounds)
    ]

    total_points = sum(r.points for r in breakdown)
    correct_tips = sum(r.correct_tips for r in breakdown)
    total_tips = sum(r.total_games for r in breakdown)
    total_margin_diff = sum(r.margin_diff for r in breakdown)
    percentage = (correct_tips / total_tips * 100) if total_tips > 0 else 0.0

    return UserStanding(
        user_id=user.id,
        username=user.username,
        image_url=user.image_url,
        total_points=total_points,
        correct_tips=correct_tips,
        total_tips=total_tips,
        percentage=percentage,
        total_margin_diff=total_margin_diff,
        round_breakdown=breakdown,
    )


def _sort_key(standing: UserStanding):
    # points desc, margin difference asc, accuracy desc, username asc
    return (
        -standing.total_points,
        standing.total_margin_diff,
        -standing.percentage,
        standing.username,
    )


def build_leaderboard(
    tips: Iterable[TipWithGame],
    settings: CompetitionSettings,
    up_to_round: Optional[int] = None,
    members: Optional[Iterable[UserSummary]] = None
) -> list[UserStanding]:
    """
    Ordered standings for a competition.

    Args:
        tips: every tip of the competition joined with its game
        settings: resolved competition settings
        up_to_round: ignore tips of later rounds ("leaderboard as of round N")
        members: users that must appear even without tips

    Positions are 1-based and never shared: ties fall through the
    tie-break chain down to the username.
    """
    users: dict[str, UserSummary] = {}
    tips_by_user: dict[str, list[TipWithGame]] = {}

    for member in members or []:
        users[member.id] = member
        tips_by_user.setdefault(member.id, [])

    for tip in tips:
        if up_to_round is not None and tip.game.round > up_to_round:
            continue
        tips_by_user.setdefault(tip.user_id, []).append(tip)
        if tip.user_id not in users:
            users[tip.user_id] = tip.user or UserSummary(id=tip.user_id, username=tip.user_id)

    standings = [
        _standing_for(users[user_id], user_tips, settings)
        for user_id, user_tips in tips_by_user.items()
    ]
    standings.sort(key=_sort_key)

    return [
        standing.model_copy(update={"position": position})
        for position, standing in enumerate(standings, start=1)
    ]


def apply_rank_changes(
    current: list[UserStanding],
    previous: list[UserStanding]
) -> list[UserStanding]:
    """
    Set `change` = previous position - current position.

    Positive means the user moved up. Users missing from `previous` get None.
    """
    previous_positions = {s.user_id: s.position for s in previous}

    return [
        standing.model_copy(update={
            "change": (
                previous_positions[standing.user_id] - standing.position
                if standing.user_id in previous_positions else None
            )
        })
        for standing in current
    ]


# ============================================
# Service
# ============================================

class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.competition_repo = CompetitionRepository(db)
        self.tip_repo = TipRepository(db)
        self.user_repo = UserRepository(db)

    async def _load(self, competition_id: str):
        competition = await self.competition_repo.get_by_id(competition_id)
        if not competition:
            raise CompetitionNotFoundError(f"Competition {competition_id} not found")

        settings = CompetitionSettings.with_defaults(competition.settings)
        tips = await self.tip_repo.get_with_games(competition_id)
        members = await self.user_repo.get_summaries(competition.member_ids)
        return competition, settings, tips, members

    async def get_leaderboard(
        self,
        competition_id: str,
        up_to_round: Optional[int] = None
    ) -> list[UserStanding]:
        """Leaderboard of a competition, optionally as of a given round."""
        _, settings, tips, members = await self._load(competition_id)
        return build_leaderboard(tips, settings, up_to_round=up_to_round, members=members)

    async def get_competition_leaderboard(
        self,
        competition_id: str,
        round: Optional[int] = None
    ) -> dict:
        """
        Leaderboard payload for a competition.

        With `round`: leaderboard and summary of that round only.
        Without: overall leaderboard plus a summary per completed round.
        """
        competition, settings, tips, members = await self._load(competition_id)

        if round is not None:
            round_tips = [tip for tip in tips if tip.game.round == round]
            return {
                "round": round,
                "summary": get_round_summary(round_tips, round, settings),
                "leaderboard": build_leaderboard(round_tips, settings, members=members),
                "settings": settings,
            }

        return {
            "leaderboard": build_leaderboard(tips, settings, members=members),
            "round_summaries": [
                get_round_summary(tips, r, settings) for r in completed_rounds(tips)
            ],
            "accuracy": prediction_accuracy(tips),
            "settings": settings,
            "competition": {
                "id": competition.id,
                "name": competition.name,
                "member_count": len(competition.member_ids),
            },
        }

    async def with_rank_changes(
        self,
        competition_id: str,
        current_round: int
    ) -> list[UserStanding]:
        """
        Leaderboard as of `current_round` with each user's position change
        against the previous round.

        Round 1 has nothing to compare with. If the previous leaderboard
        cannot be built the current one is returned without changes.
        """
        current = await self.get_leaderboard(competition_id, up_to_round=current_round)

        if current_round <= 1:
            return current

        try:
            previous = await self.get_leaderboard(competition_id, up_to_round=current_round - 1)
        except Exception:
            logger.warning(
                "Could not build round %s leaderboard for competition %s, skipping rank changes",
                current_round - 1,
                competition_id,
                exc_info=True,
            )
            return current

        return apply_rank_changes(current, previous)

    async def get_margin_rank(
        self,
        competition_id: str,
        game_id: str,
        user_id: str
    ) -> Optional[int]:
        """Rank of a user's margin prediction for one game of the competition."""
        competition = await self.competition_repo.get_by_id(competition_id)
        if not competition:
            raise CompetitionNotFoundError(f"Competition {competition_id} not found")

        tips = await self.tip_repo.get_with_games(competition_id, game_id=game_id)
        return margin_rank(game_id, tips, user_id)
