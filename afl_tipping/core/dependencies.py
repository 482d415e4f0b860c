"""
Dependencies de FastAPI para inyeccion de BD y servicios
"""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.database import get_database
from afl_tipping.services.game_service import GameService
from afl_tipping.services.leaderboard_service import LeaderboardService
from afl_tipping.services.points_service import PointsService
from afl_tipping.services.tip_service import TipService


def get_leaderboard_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> LeaderboardService:
    return LeaderboardService(db)


def get_points_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> PointsService:
    return PointsService(db)


def get_game_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> GameService:
    return GameService(db)


def get_tip_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> TipService:
    return TipService(db)


# Alias de tipos para que se vea mas limpio en los endpoints
Leaderboards = Annotated[LeaderboardService, Depends(get_leaderboard_service)]
Points = Annotated[PointsService, Depends(get_points_service)]
Games = Annotated[GameService, Depends(get_game_service)]
Tips = Annotated[TipService, Depends(get_tip_service)]
