from typing import Optional
from pydantic import BaseModel


class RoundResult(BaseModel):
    """Result of one user in one round"""

    round: int
    points: int = 0
    correct_tips: int = 0
    total_games: int = 0  # completed games tipped
    tipped_games: int = 0  # every tip in the round, complete or not
    all_correct_bonus: int = 0
    margin_diff: int = 0


class UserStanding(BaseModel):
    """Leaderboard row. Rebuilt on every request, never stored."""

    user_id: str
    username: str
    image_url: Optional[str] = None

    total_points: int = 0
    correct_tips: int = 0
    total_tips: int = 0
    percentage: float = 0.0
    total_margin_diff: int = 0

    round_breakdown: list[RoundResult] = []

    position: int = 0
    change: Optional[int] = None  # previous position - current position

    class Config:
        populate_by_name = True


class RoundSummary(BaseModel):
    """Aggregate stats of a round across every participant"""

    round: int
    total_games: int = 0
    completed_games: int = 0
    participants: int = 0
    average_score: float = 0.0
    perfect_rounds: int = 0


class RoundAccuracy(BaseModel):
    round: int
    accuracy: float
    total: int


class PredictionAccuracy(BaseModel):
    overall: float = 0.0
    by_round: list[RoundAccuracy] = []
