"""
Servicio de Puntos - Recalcula y guarda los puntos de cada tip

Los puntos nunca se acumulan: cada recálculo parte de cero a partir de los
tips y resultados actuales, así que repetirlo da siempre lo mismo.

1. Carga tips + partidos de la competición
2. Calcula puntos, acierto y precisión de margen por tip
3. Guarda los tips en paralelo
4. Reemplaza el ledger de bonus por ronda
5. Actualiza el total de cada miembro
"""

import logging
from typing import Any, Iterable

from motor.motor_asyncio import AsyncIOMotorDatabase

from afl_tipping.models.competition import Competition, CompetitionSettings, RoundBonus
from afl_tipping.models.tip import TipScore, TipWithGame
from afl_tipping.repositories.competition_repository import (
    CompetitionRepository,
    RoundBonusRepository,
)
from afl_tipping.repositories.tip_repository import TipRepository
from afl_tipping.services.leaderboard_service import CompetitionNotFoundError
from afl_tipping.services.margin_service import margin_ranks
from afl_tipping.services.round_service import round_bonuses
from afl_tipping.services.scoring_service import (
    compute_points,
    is_correct_tip,
    margin_difference,
)

logger = logging.getLogger(__name__)


def score_tips(
    tips: Iterable[TipWithGame],
    settings: CompetitionSettings
) -> list[TipScore]:
    """
    Per-tip result for persistence.

    is_correct and margin_accuracy stay None until the game is complete.
    """
    tips = list(tips)

    ranks: dict[str, int] = {}
    for game_id in {tip.game_id for tip in tips}:
        ranks.update(margin_ranks(game_id, tips))

    scores = []
    for tip in tips:
        complete = tip.game.is_complete
        scores.append(TipScore(
            tip_id=tip.id,
            points=compute_points(tip, tip.game, settings),
            is_correct=is_correct_tip(tip, tip.game) if complete else None,
            margin_accuracy=margin_difference(tip, tip.game) if complete else None,
            margin_rank=ranks.get(tip.id),
        ))
    return scores


def member_totals(
    member_ids: Iterable[str],
    tip_points: dict[str, int],
    bonuses: Iterable[RoundBonus]
) -> dict[str, int]:
    """Tip points plus round bonuses per user. Members without tips get 0."""
    totals = {user_id: 0 for user_id in member_ids}
    for user_id, points in tip_points.items():
        totals[user_id] = totals.get(user_id, 0) + points
    for bonus in bonuses:
        totals[bonus.user_id] = totals.get(bonus.user_id, 0) + bonus.points
    return totals


class PointsService:
    """
    Servicio para recalcular y guardar los puntos de una competición.

    Triggers: cambio de settings, partido completado, o un recálculo global
    (cron / admin).
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.competition_repo = CompetitionRepository(db)
        self.bonus_repo = RoundBonusRepository(db)
        self.tip_repo = TipRepository(db)

    async def _recalculate(self, competition: Competition) -> dict[str, Any]:
        settings = CompetitionSettings.with_defaults(competition.settings)
        tips = await self.tip_repo.get_with_games(competition.id)

        scores = score_tips(tips, settings)
        bonuses = round_bonuses(tips, settings)

        tips_updated = await self.tip_repo.update_scores(scores)
        await self.bonus_repo.replace_for_competition(competition.id, bonuses)

        tip_points = await self.tip_repo.get_points_by_user(competition.id)
        totals = member_totals(competition.member_ids, tip_points, bonuses)
        await self.competition_repo.update_member_totals(competition.id, totals)

        logger.info(
            "Recalculated competition %s: %s tips, %s round bonuses, %s users",
            competition.id,
            tips_updated,
            len(bonuses),
            len(totals),
        )

        return {
            "competition_id": competition.id,
            "tips_processed": tips_updated,
            "points_distributed": sum(totals.values()),
            "bonuses_awarded": len(bonuses),
            "users_affected": len(totals),
        }

    async def recalculate_competition(self, competition_id: str) -> dict[str, Any]:
        """
        Recalcular todos los tips de una competición.

        Returns:
            Dict con estadísticas del recálculo
        """
        competition = await self.competition_repo.get_by_id(competition_id)
        if not competition:
            raise CompetitionNotFoundError(f"Competition {competition_id} not found")
        return await self._recalculate(competition)

    async def recalculate_all_active(self) -> dict[str, Any]:
        """
        Recalcular todas las competiciones activas.

        Una competición que falla no detiene al resto.
        """
        competitions = await self.competition_repo.get_active()

        processed = 0
        failed = []
        for competition in competitions:
            try:
                await self._recalculate(competition)
                processed += 1
            except Exception:
                logger.exception("Error recalculating competition %s", competition.id)
                failed.append(competition.id)

        return {
            "competitions_processed": processed,
            "failed": failed,
        }

    async def on_game_completed(self, game_id: str) -> dict[str, list[str]]:
        """
        Recalcular cada competición con tips para el partido.

        Igual que recalculate_all_active: una competición que falla se
        registra en `failed` y se sigue con las demás.
        """
        competition_ids = await self.tip_repo.competition_ids_for_game(game_id)

        recalculated = []
        failed = []
        for competition_id in competition_ids:
            try:
                competition = await self.competition_repo.get_by_id(competition_id)
                if not competition:
                    logger.warning("Tips reference missing competition %s", competition_id)
                    continue
                await self._recalculate(competition)
                recalculated.append(competition_id)
            except Exception:
                logger.exception("Error recalculating competition %s after game %s", competition_id, game_id)
                failed.append(competition_id)

        logger.info(
            "Game %s completed, recalculated %s competitions (%s failed)",
            game_id,
            len(recalculated),
            len(failed),
        )
        return {
            "recalculated": recalculated,
            "failed": failed,
        }

    async def update_settings(
        self,
        competition_id: str,
        changes: dict[str, Any]
    ) -> tuple[CompetitionSettings, dict[str, Any]]:
        """
        Aplicar cambios de settings (sobre los actuales) y recalcular.
        """
        competition = await self.competition_repo.get_by_id(competition_id)
        if not competition:
            raise CompetitionNotFoundError(f"Competition {competition_id} not found")

        settings = CompetitionSettings.with_defaults(competition.settings).merged(changes)
        updated = await self.competition_repo.update_settings(competition_id, settings)
        if not updated:
            raise CompetitionNotFoundError(f"Competition {competition_id} not found")

        stats = await self._recalculate(updated)
        return settings, stats
