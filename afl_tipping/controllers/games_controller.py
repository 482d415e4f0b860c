"""
Controlador de partidos - Registro de resultados
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from afl_tipping.core.dependencies import Games
from afl_tipping.models.game import Game
from afl_tipping.services.game_service import GameNotFoundError, InvalidScoreError


router = APIRouter(prefix="/games", tags=["games"])


class CompleteGameRequest(BaseModel):
    """Resultado final del partido"""
    home_score: int = Field(..., ge=0)
    away_score: int = Field(..., ge=0)


class CompleteGameResponse(BaseModel):
    success: bool
    game: Game
    margin: int
    competitions_recalculated: list[str]
    competitions_failed: list[str] = []


@router.post("/{game_id}/complete", response_model=CompleteGameResponse)
async def complete_game(
    game_id: str,
    request: CompleteGameRequest,
    games: Games
):
    """
    Registrar el resultado de un partido y recalcular los puntos.

    Esto:
    1. Guarda el marcador y el ganador (un empate no tiene ganador)
    2. Marca el partido como completado
    3. Recalcula cada competición con tips para el partido
    """
    try:
        result = await games.complete_game(game_id, request.home_score, request.away_score)
    except GameNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InvalidScoreError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return CompleteGameResponse(success=True, **result)
