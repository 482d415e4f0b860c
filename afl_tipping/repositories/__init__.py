from .game_repository import GameRepository
from .tip_repository import TipRepository
from .competition_repository import CompetitionRepository, RoundBonusRepository
from .user_repository import UserRepository

__all__ = [
    "GameRepository",
    "TipRepository",
    "CompetitionRepository",
    "RoundBonusRepository",
    "UserRepository",
]
