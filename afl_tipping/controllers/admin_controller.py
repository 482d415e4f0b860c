"""
Controlador de Admin - Recálculo manual de puntos

Pensado para un cron o un disparo manual; la autenticación la resuelve la
capa externa.
"""

from fastapi import APIRouter, HTTPException, status

from afl_tipping.core.dependencies import Points
from afl_tipping.services.leaderboard_service import CompetitionNotFoundError


router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/recalculate")
async def recalculate_all_competitions(points: Points):
    """
    Recalcular los puntos de TODAS las competiciones activas.

    ADVERTENCIA: puede tardar si hay muchas competiciones.
    """
    result = await points.recalculate_all_active()

    return {
        "success": not result["failed"],
        "message": f"Puntos recalculados para {result['competitions_processed']} competiciones",
        **result
    }


@router.post("/competitions/{competition_id}/recalculate")
async def recalculate_competition(competition_id: str, points: Points):
    """Recalcular los puntos de una competición."""
    try:
        stats = await points.recalculate_competition(competition_id)
    except CompetitionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return {
        "success": True,
        "message": f"Competición {competition_id} recalculada",
        "points_assigned": stats
    }
