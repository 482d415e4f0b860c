"""
CompetitionRepository - competitions, their settings and per-member totals.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.competition import Competition, CompetitionSettings, RoundBonus


class CompetitionRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["competitions"]
        self.members = db["competition_users"]

    async def get_by_id(self, competition_id: str) -> Optional[Competition]:
        doc = await self.collection.find_one({"_id": competition_id})
        return Competition(**doc) if doc else None

    async def get_active(self) -> list[Competition]:
        cursor = self.collection.find({"is_active": True})
        docs = await cursor.to_list(length=None)
        return [Competition(**doc) for doc in docs]

    async def update_settings(
        self,
        competition_id: str,
        settings: CompetitionSettings
    ) -> Optional[Competition]:
        """Replace the stored settings with a fully resolved copy."""
        result = await self.collection.find_one_and_update(
            {"_id": competition_id},
            {"$set": {"settings": settings.model_dump()}},
            return_document=True
        )

        return Competition(**result) if result else None

    async def update_member_totals(
        self,
        competition_id: str,
        totals: dict[str, int]
    ) -> int:
        """Store each member's total points for the competition."""
        if not totals:
            return 0

        now = datetime.now(timezone.utc)
        await asyncio.gather(*[
            self.members.update_one(
                {"user_id": user_id, "competition_id": competition_id},
                {"$set": {"total_points": points, "updated_at": now}},
                upsert=True
            )
            for user_id, points in totals.items()
        ])
        return len(totals)


class RoundBonusRepository:
    """
    All-correct bonus ledger, one document per (user, competition, round).

    Recalculation replaces a competition's ledger as a whole.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["round_bonuses"]

    async def replace_for_competition(
        self,
        competition_id: str,
        bonuses: list[RoundBonus]
    ) -> int:
        await self.collection.delete_many({"competition_id": competition_id})
        if not bonuses:
            return 0

        result = await self.collection.insert_many(
            [bonus.model_dump() for bonus in bonuses]
        )
        return len(result.inserted_ids)

