"""
🎯 TipRepository - CRUD para tips de usuarios

Repository para las predicciones de cada usuario en cada competición.
IDs compuestos: user_id:game_id:competition_id (un tip por terna, upsert)
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.tip import Tip, TipCreate, TipScore, TipWithGame, tip_id_for
from afl_tipping.models.user import UserSummary


class TipRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["tips"]

    # ============================================
    # 📌 CREATE / UPSERT
    # ============================================

    async def upsert(
        self,
        user_id: str,
        competition_id: str,
        tip: TipCreate
    ) -> Tip:
        """
        Crea o reemplaza el tip de un usuario para un partido

        La predicción se sobreescribe; los campos calculados se resetean
        hasta el próximo recálculo.
        """
        now = datetime.now(timezone.utc)
        tip_id = tip_id_for(user_id, tip.game_id, competition_id)

        doc = await self.collection.find_one_and_update(
            {
                "user_id": user_id,
                "game_id": tip.game_id,
                "competition_id": competition_id,
            },
            {
                "$set": {
                    "predicted_winner": tip.predicted_winner,
                    "margin": tip.margin,
                    "confidence": tip.confidence,
                    "points": 0,
                    "is_correct": None,
                    "margin_accuracy": None,
                    "margin_rank": None,
                    "updated_at": now,
                },
                "$setOnInsert": {
                    "id": tip_id,
                    "created_at": now,
                },
            },
            upsert=True,
            return_document=True
        )

        return Tip(**doc)

    # ============================================
    # 📌 READ
    # ============================================

    async def get_user_tip_for_game(
        self,
        user_id: str,
        game_id: str,
        competition_id: str
    ) -> Optional[Tip]:
        doc = await self.collection.find_one({
            "user_id": user_id,
            "game_id": game_id,
            "competition_id": competition_id,
        })
        return Tip(**doc) if doc else None

    async def get_user_tips(
        self,
        user_id: str,
        competition_id: str
    ) -> list[Tip]:
        """Todos los tips de un usuario en una competición"""
        cursor = self.collection.find({
            "user_id": user_id,
            "competition_id": competition_id,
        }).sort("game_id", 1)
        docs = await cursor.to_list(length=None)
        return [Tip(**doc) for doc in docs]

    async def get_with_games(
        self,
        competition_id: str,
        game_id: Optional[str] = None
    ) -> list[TipWithGame]:
        """
        🔥 Tips de una competición con su partido y usuario

        Orden estable: ronda, fecha del partido, partido, usuario.
        Tips cuyo partido no existe se descartan.
        """
        match = {"competition_id": competition_id}
        if game_id:
            match["game_id"] = game_id

        pipeline = [
            {"$match": match},
            {
                "$lookup": {
                    "from": "games",
                    "localField": "game_id",
                    "foreignField": "id",
                    "as": "game",
                }
            },
            {"$unwind": "$game"},
            {
                "$lookup": {
                    "from": "users",
                    "localField": "user_id",
                    "foreignField": "_id",
                    "as": "user",
                }
            },
            {"$unwind": {"path": "$user", "preserveNullAndEmptyArrays": True}},
            {"$sort": {"game.round": 1, "game.date": 1, "game_id": 1, "user_id": 1}},
        ]

        cursor = self.collection.aggregate(pipeline)
        docs = await cursor.to_list(length=None)

        tips = []
        for doc in docs:
            user = doc.pop("user", None)
            if user:
                doc["user"] = UserSummary(
                    id=str(user["_id"]),
                    username=user.get("username", "Unknown"),
                    image_url=user.get("image_url"),
                )
            tips.append(TipWithGame(**doc))
        return tips

    async def competition_ids_for_game(self, game_id: str) -> list[str]:
        """Competiciones que tienen algún tip para este partido"""
        return await self.collection.distinct("competition_id", {"game_id": game_id})

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def update_scores(self, scores: list[TipScore]) -> int:
        """
        Guarda el resultado calculado de cada tip

        Las escrituras son independientes entre sí, se lanzan en paralelo.
        """
        if not scores:
            return 0

        results = await asyncio.gather(*[
            self.collection.update_one(
                {"id": score.tip_id},
                {
                    "$set": {
                        "points": score.points,
                        "is_correct": score.is_correct,
                        "margin_accuracy": score.margin_accuracy,
                        "margin_rank": score.margin_rank,
                    }
                }
            )
            for score in scores
        ])

        return sum(result.matched_count for result in results)

    # ============================================
    # 📌 STATS & AGGREGATIONS
    # ============================================

    async def get_points_by_user(self, competition_id: str) -> dict[str, int]:
        """
        🔥 Suma de puntos guardados por usuario

        Retorna: {"user1": 12, "user2": 9}
        """
        pipeline = [
            {"$match": {"competition_id": competition_id}},
            {
                "$group": {
                    "_id": "$user_id",
                    "points": {"$sum": "$points"},
                }
            },
        ]

        cursor = self.collection.aggregate(pipeline)
        results = await cursor.to_list(length=None)
        return {item["_id"]: item["points"] for item in results}
