"""
GameService - Records final scores and triggers score recalculation.
"""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.game import resolve_winner
from afl_tipping.repositories.game_repository import GameRepository
from afl_tipping.services.points_service import PointsService

logger = logging.getLogger(__name__)


class GameServiceError(Exception):
    """Base exception for game service errors."""
    pass


class GameNotFoundError(GameServiceError):
    """Raised when game is not found."""
    pass


class InvalidScoreError(GameServiceError):
    """Raised when a final score is invalid."""
    pass


class GameService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.game_repo = GameRepository(db)
        self.points_service = PointsService(db)

    async def complete_game(
        self,
        game_id: str,
        home_score: int,
        away_score: int
    ) -> dict[str, Any]:
        """
        Mark a game complete with its final score.

        Validates:
        - Scores are not negative
        - Game exists

        The winner is derived from the score (a draw has none) and every
        competition with tips on the game is recalculated.
        """
        if home_score < 0 or away_score < 0:
            raise InvalidScoreError("Scores cannot be negative")

        game = await self.game_repo.get_by_id(game_id)
        if not game:
            raise GameNotFoundError(f"Game {game_id} not found")

        winner = resolve_winner(game, home_score, away_score)
        updated = await self.game_repo.record_result(game_id, home_score, away_score, winner)
        if not updated:
            raise GameNotFoundError(f"Game {game_id} not found")

        if winner is None:
            logger.info("Game %s ended in a draw (%s-%s)", game_id, home_score, away_score)

        recalculation = await self.points_service.on_game_completed(game_id)

        return {
            "game": updated,
            "margin": abs(home_score - away_score),
            "competitions_recalculated": recalculation["recalculated"],
            "competitions_failed": recalculation["failed"],
        }
