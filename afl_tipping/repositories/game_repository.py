"""
GameRepository - MongoDB access for the games collection.

Games are loaded by an external sync job; the only write done here is
recording a final score.
"""

from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.game import Game


class GameRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["games"]

    async def get_by_id(self, game_id: str) -> Optional[Game]:
        doc = await self.collection.find_one({"id": game_id})
        return Game(**doc) if doc else None

    async def record_result(
        self,
        game_id: str,
        home_score: int,
        away_score: int,
        winner: Optional[int]
    ) -> Optional[Game]:
        """Store the final score and mark the game complete."""
        result = await self.collection.find_one_and_update(
            {"id": game_id},
            {
                "$set": {
                    "home_score": home_score,
                    "away_score": away_score,
                    "winner": winner,
                    "is_complete": True,
                    "completed_at": datetime.now(timezone.utc),
                }
            },
            return_document=True
        )

        return Game(**result) if result else None
