"""
Round aggregation - per user round results, all-correct bonus and round summaries.

All functions take already joined tips (TipWithGame) and return new objects.
"""

from collections import defaultdict
from typing import Iterable

from afl_tipping.models.competition import CompetitionSettings, RoundBonus
from afl_tipping.models.leaderboard import (
    PredictionAccuracy,
    RoundAccuracy,
    RoundResult,
    RoundSummary,
)
from afl_tipping.models.tip import TipWithGame
from afl_tipping.services.scoring_service import (
    compute_points,
    is_correct_tip,
    margin_difference,
)


def group_by_round(tips: Iterable[TipWithGame]) -> dict[int, list[TipWithGame]]:
    """Tips keyed by round, keeping input order inside each round."""
    rounds: dict[int, list[TipWithGame]] = defaultdict(list)
    for tip in tips:
        rounds[tip.game.round].append(tip)
    return dict(rounds)


def completed_tips(tips: Iterable[TipWithGame]) -> list[TipWithGame]:
    return [tip for tip in tips if tip.game.is_complete]


def all_correct_bonus_for_round(
    tips: Iterable[TipWithGame],
    round: int,
    settings: CompetitionSettings
) -> int:
    """
    Bonus for one user's round: awarded once when every completed tip of the
    round picked the winner. No completed tips means no bonus.
    """
    if not settings.all_correct_bonus:
        return 0

    round_tips = [
        tip for tip in tips
        if tip.game.round == round and tip.game.is_complete
    ]
    if not round_tips:
        return 0

    if all(is_correct_tip(tip, tip.game) for tip in round_tips):
        return settings.all_correct_bonus_points
    return 0


def aggregate_round(
    tips: Iterable[TipWithGame],
    round: int,
    settings: CompetitionSettings
) -> RoundResult:
    """
    RoundResult for one user's tips in `round`.

    Only completed games count towards points, correct tips and margin
    difference. The all-correct bonus is added to the round total once.
    """
    round_tips = [tip for tip in tips if tip.game.round == round]
    finished = completed_tips(round_tips)

    points = 0
    correct = 0
    margin_diff = 0
    for tip in finished:
        points += compute_points(tip, tip.game, settings)
        if is_correct_tip(tip, tip.game):
            correct += 1
        diff = margin_difference(tip, tip.game)
        if diff is not None:
            margin_diff += diff

    bonus = all_correct_bonus_for_round(finished, round, settings)

    return RoundResult(
        round=round,
        points=points + bonus,
        correct_tips=correct,
        total_games=len(finished),
        tipped_games=len(round_tips),
        all_correct_bonus=bonus,
        margin_diff=margin_diff,
    )


def round_bonuses(
    tips: Iterable[TipWithGame],
    settings: CompetitionSettings
) -> list[RoundBonus]:
    """
    All-correct bonus ledger for a competition's tips.

    One entry per (user, competition, round) that earned the bonus, instead
    of folding the bonus into an arbitrary tip's points.
    """
    if not settings.all_correct_bonus:
        return []

    by_user: dict[tuple[str, str], list[TipWithGame]] = defaultdict(list)
    for tip in tips:
        by_user[(tip.user_id, tip.competition_id)].append(tip)

    entries = []
    for (user_id, competition_id), user_tips in by_user.items():
        for round in sorted(group_by_round(user_tips)):
            bonus = all_correct_bonus_for_round(user_tips, round, settings)
            if bonus:
                entries.append(RoundBonus(
                    user_id=user_id,
                    competition_id=competition_id,
                    round=round,
                    points=bonus,
                ))
    return entries


def get_round_summary(
    tips: Iterable[TipWithGame],
    round: int,
    settings: CompetitionSettings
) -> RoundSummary:
    """Stats for `round` across every participant of the competition."""
    round_tips = [tip for tip in tips if tip.game.round == round]
    finished = completed_tips(round_tips)

    user_scores: dict[str, int] = {}
    user_counts: dict[str, list[int]] = {}  # user_id -> [total, correct]

    for tip in finished:
        user_scores[tip.user_id] = user_scores.get(tip.user_id, 0) + compute_points(tip, tip.game, settings)
        counts = user_counts.setdefault(tip.user_id, [0, 0])
        counts[0] += 1
        if is_correct_tip(tip, tip.game):
            counts[1] += 1

    for user_id in user_scores:
        user_round_tips = [tip for tip in finished if tip.user_id == user_id]
        user_scores[user_id] += all_correct_bonus_for_round(user_round_tips, round, settings)

    scores = list(user_scores.values())
    average = sum(scores) / len(scores) if scores else 0.0

    perfect = sum(
        1 for total, correct in user_counts.values()
        if total > 0 and correct == total
    )

    return RoundSummary(
        round=round,
        total_games=len({tip.game_id for tip in round_tips}),
        completed_games=len({tip.game_id for tip in finished}),
        participants=len(user_scores),
        average_score=average,
        perfect_rounds=perfect,
    )


def completed_rounds(tips: Iterable[TipWithGame]) -> list[int]:
    """Rounds with at least one completed game, ascending."""
    return sorted({tip.game.round for tip in tips if tip.game.is_complete})


def prediction_accuracy(tips: Iterable[TipWithGame]) -> PredictionAccuracy:
    """Winner accuracy (%) over completed games, overall and per round."""
    finished = completed_tips(tips)
    if not finished:
        return PredictionAccuracy()

    correct_total = 0
    per_round: dict[int, list[int]] = {}  # round -> [correct, total]
    for tip in finished:
        stats = per_round.setdefault(tip.game.round, [0, 0])
        stats[1] += 1
        if is_correct_tip(tip, tip.game):
            stats[0] += 1
            correct_total += 1

    by_round = [
        RoundAccuracy(round=round, accuracy=correct / total * 100, total=total)
        for round, (correct, total) in sorted(per_round.items())
    ]

    return PredictionAccuracy(
        overall=correct_total / len(finished) * 100,
        by_round=by_round,
    )
