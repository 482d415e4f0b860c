from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class Game(BaseModel):
    """A single AFL fixture. Read-only to the scoring core."""

    id: str
    round: int
    season: int

    home_team: str
    away_team: str
    home_team_id: int
    away_team_id: int

    venue: Optional[str] = None
    date: Optional[datetime] = None

    home_score: Optional[int] = None
    away_score: Optional[int] = None
    winner: Optional[int] = None  # team id, only once is_complete

    is_complete: bool = False
    completed_at: Optional[datetime] = None

    class Config:
        populate_by_name = True

    @property
    def has_scores(self) -> bool:
        return self.home_score is not None and self.away_score is not None


def resolve_winner(game: Game, home_score: int, away_score: int) -> Optional[int]:
    """
    Winner team id for a final score.

    A drawn game has no winner: every tip on it scores as unresolved.
    """
    if home_score > away_score:
        return game.home_team_id
    if away_score > home_score:
        return game.away_team_id
    return None
