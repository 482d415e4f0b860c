"""
Scoring rules - converts a tip plus the game result into points.

Point system (every value comes from CompetitionSettings):
- correct_tip_points: picking the winner
- x confidence: when confidence scoring is enabled and the tip carries one
- + margin_bonus_points: correct winner and the predicted margin within
  margin_bonus_threshold of the real one (never multiplied by confidence)

Nothing here raises on missing data: a missing score, margin or confidence
just means the matching bonus does not apply. Settings must already be
resolved with CompetitionSettings.with_defaults().
"""

import logging
from typing import Optional

from afl_tipping.models.competition import CompetitionSettings
from afl_tipping.models.game import Game
from afl_tipping.models.tip import Tip

logger = logging.getLogger(__name__)


def is_scorable(game: Game) -> bool:
    """A game can only be scored once it is complete and has a winner."""
    return game.is_complete and game.winner is not None


def is_correct_tip(tip: Tip, game: Game) -> bool:
    if not is_scorable(game):
        return False
    return tip.predicted_winner == game.winner


def actual_margin(game: Game) -> Optional[int]:
    if not game.has_scores:
        return None
    return abs(game.home_score - game.away_score)


def margin_difference(tip: Tip, game: Game) -> Optional[int]:
    """|actual margin - predicted margin|, or None when either side is missing."""
    if tip.margin is None:
        return None
    margin = actual_margin(game)
    if margin is None:
        return None
    return abs(margin - abs(tip.margin))


def compute_points(tip: Tip, game: Game, settings: CompetitionSettings) -> int:
    """
    Points for a single tip.

    Returns:
        0 before a result exists or for a wrong winner, otherwise the
        correct-tip points (times confidence) plus the margin bonus.
    """
    if not is_scorable(game):
        return 0

    if tip.predicted_winner != game.winner:
        return 0

    points = settings.correct_tip_points

    if settings.confidence_enabled and tip.confidence is not None:
        points *= tip.confidence

    if settings.margin_bonus_enabled:
        diff = margin_difference(tip, game)
        if diff is not None and diff <= settings.margin_bonus_threshold:
            points += settings.margin_bonus_points

    logger.debug("Tip %s on game %s scored %s", tip.id, game.id, points)
    return points
