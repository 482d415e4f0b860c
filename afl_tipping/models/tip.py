from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from afl_tipping.models.game import Game
from afl_tipping.models.user import UserSummary


class Tip(BaseModel):
    """Prediction of a user for one game inside one competition"""

    id: str  # user_id:game_id:competition_id

    user_id: str
    game_id: str
    competition_id: str

    predicted_winner: int  # team id
    margin: Optional[int] = None
    confidence: Optional[int] = None

    # Computed on every recalculation, never accumulated
    points: int = 0
    is_correct: Optional[bool] = None
    margin_accuracy: Optional[int] = None
    margin_rank: Optional[int] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


def tip_id_for(user_id: str, game_id: str, competition_id: str) -> str:
    return f"{user_id}:{game_id}:{competition_id}"


class TipWithGame(Tip):
    """Tip joined with its game and the minimal user fields for display"""

    game: Game
    user: Optional[UserSummary] = None


class TipCreate(BaseModel):
    """Payload for creating or replacing a tip"""

    game_id: str
    predicted_winner: int
    margin: Optional[int] = None
    confidence: Optional[int] = Field(default=None, ge=0)


class TipScore(BaseModel):
    """Per-tip output of a recalculation, ready to persist"""

    tip_id: str
    points: int
    is_correct: Optional[bool] = None
    margin_accuracy: Optional[int] = None
    margin_rank: Optional[int] = None
