from .user import UserSummary
from .game import Game
from .tip import Tip, TipWithGame, TipCreate, TipScore
from .competition import Competition, CompetitionSettings, RoundBonus
from .leaderboard import (
    RoundResult,
    UserStanding,
    RoundSummary,
    PredictionAccuracy,
)

__all__ = [
    "UserSummary",
    "Game",
    "Tip",
    "TipWithGame",
    "TipCreate",
    "TipScore",
    "Competition",
    "CompetitionSettings",
    "RoundBonus",
    "RoundResult",
    "UserStanding",
    "RoundSummary",
    "PredictionAccuracy",
]
