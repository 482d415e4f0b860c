"""
Margin ranking - orders the margin predictions for a game by closeness.

Ties keep the order the tips were given in (stable sort), there is no
secondary key.
"""

from typing import Iterable, Optional

from afl_tipping.models.tip import TipWithGame
from afl_tipping.services.scoring_service import margin_difference


def _ranked_margin_tips(game_id: str, tips: Iterable[TipWithGame]) -> list[TipWithGame]:
    game_tips = [tip for tip in tips if tip.game_id == game_id]
    if not game_tips:
        return []

    game = game_tips[0].game
    if not game.is_complete or not game.has_scores:
        return []

    scored = [
        (margin_difference(tip, game), tip)
        for tip in game_tips
        if tip.margin is not None
    ]
    scored.sort(key=lambda item: item[0])
    return [tip for _, tip in scored]


def margin_rank(
    game_id: str,
    tips: Iterable[TipWithGame],
    user_id: str
) -> Optional[int]:
    """
    1-based rank of `user_id`'s margin prediction among every margin
    prediction for the game (closest first).

    None when the game has no final score or the user gave no margin.
    """
    for position, tip in enumerate(_ranked_margin_tips(game_id, tips), start=1):
        if tip.user_id == user_id:
            return position
    return None


def margin_ranks(game_id: str, tips: Iterable[TipWithGame]) -> dict[str, int]:
    """Rank of every margin prediction for the game, keyed by tip id."""
    return {
        tip.id: position
        for position, tip in enumerate(_ranked_margin_tips(game_id, tips), start=1)
    }
