"""
UserRepository - MongoDB access for users collection.

Users are created by the external auth layer; the scoring service only
reads their display fields.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.user import UserSummary


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def get_summaries(self, user_ids: list[str]) -> list[UserSummary]:
        """Display fields for the given users, in the order of `user_ids`."""
        if not user_ids:
            return []

        cursor = self.collection.find(
            {"_id": {"$in": user_ids}},
            {"username": 1, "image_url": 1}
        )
        docs = await cursor.to_list(length=None)
        by_id = {doc["_id"]: doc for doc in docs}

        return [
            UserSummary(
                id=user_id,
                username=by_id[user_id].get("username", "Unknown"),
                image_url=by_id[user_id].get("image_url"),
            )
            for user_id in user_ids
            if user_id in by_id
        ]
