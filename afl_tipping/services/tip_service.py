"""
TipService - Saving and reading a member's tips.

One tip per (user, game, competition); saving again replaces the prediction.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.competition import Competition
from afl_tipping.models.tip import Tip, TipCreate
from afl_tipping.repositories.competition_repository import CompetitionRepository
from afl_tipping.repositories.game_repository import GameRepository
from afl_tipping.repositories.tip_repository import TipRepository
from afl_tipping.services.game_service import GameNotFoundError
from afl_tipping.services.leaderboard_service import CompetitionNotFoundError

logger = logging.getLogger(__name__)


class TipServiceError(Exception):
    """Base exception for tip service errors."""
    pass


class NotAMemberError(TipServiceError):
    """Raised when the user does not belong to the competition."""
    pass


class TipLockedError(TipServiceError):
    """Raised when tipping a game that is already complete."""
    pass


class InvalidTipError(TipServiceError):
    """Raised when tip data is invalid."""
    pass


class TipService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.tip_repo = TipRepository(db)
        self.game_repo = GameRepository(db)
        self.competition_repo = CompetitionRepository(db)

    async def _member_competition(self, competition_id: str, user_id: str) -> Competition:
        competition = await self.competition_repo.get_by_id(competition_id)
        if not competition:
            raise CompetitionNotFoundError(f"Competition {competition_id} not found")

        if user_id not in competition.member_ids:
            raise NotAMemberError(f"User {user_id} is not a member of competition {competition_id}")

        return competition

    async def save_tips(
        self,
        competition_id: str,
        user_id: str,
        tips: list[TipCreate]
    ) -> list[Tip]:
        """
        Create or replace a batch of tips.

        Validates, for every tip before anything is written:
        - Competition exists and the user is a member
        - Game exists and is not complete
        - Predicted winner is one of the two teams
        - A game appears only once in the batch
        """
        if not tips:
            raise InvalidTipError("At least one tip is required")

        await self._member_competition(competition_id, user_id)

        seen = set()
        for tip in tips:
            if tip.game_id in seen:
                raise InvalidTipError(f"Game {tip.game_id} tipped more than once")
            seen.add(tip.game_id)

            game = await self.game_repo.get_by_id(tip.game_id)
            if not game:
                raise GameNotFoundError(f"Game {tip.game_id} not found")

            if game.is_complete:
                raise TipLockedError(f"Game {tip.game_id} is already complete")

            if tip.predicted_winner not in (game.home_team_id, game.away_team_id):
                raise InvalidTipError(
                    f"Team {tip.predicted_winner} is not playing in game {tip.game_id}"
                )

        saved = [
            await self.tip_repo.upsert(user_id, competition_id, tip)
            for tip in tips
        ]

        logger.info("Saved %s tips for %s in competition %s", len(saved), user_id, competition_id)
        return saved

    async def get_user_tips(
        self,
        competition_id: str,
        user_id: str,
        game_id: Optional[str] = None
    ) -> list[Tip]:
        """Tips of a member in a competition, optionally for a single game."""
        await self._member_competition(competition_id, user_id)

        if game_id:
            tip = await self.tip_repo.get_user_tip_for_game(user_id, game_id, competition_id)
            return [tip] if tip else []

        return await self.tip_repo.get_user_tips(user_id, competition_id)
