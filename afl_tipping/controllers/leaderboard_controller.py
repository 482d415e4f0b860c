"""
Controlador de leaderboards - Endpoints de clasificación por competición

Las clasificaciones se calculan en cada request a partir de los tips.
"""

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ValidationError

from afl_tipping.core.dependencies import Leaderboards, Points
from afl_tipping.models.competition import CompetitionSettings
from afl_tipping.models.leaderboard import (
    PredictionAccuracy,
    RoundSummary,
    UserStanding,
)
from afl_tipping.services.leaderboard_service import CompetitionNotFoundError


router = APIRouter(prefix="/competitions", tags=["leaderboard"])


class CompetitionInfo(BaseModel):
    id: str
    name: str
    member_count: int


class LeaderboardResponse(BaseModel):
    """Leaderboard general con resúmenes de cada ronda completada."""
    leaderboard: list[UserStanding]
    round_summaries: list[RoundSummary]
    accuracy: PredictionAccuracy
    settings: CompetitionSettings
    competition: CompetitionInfo


class RoundLeaderboardResponse(BaseModel):
    """Leaderboard y resumen de una sola ronda."""
    round: int
    summary: RoundSummary
    leaderboard: list[UserStanding]
    settings: CompetitionSettings


class MarginRankResponse(BaseModel):
    game_id: str
    user_id: str
    margin_rank: Optional[int] = None


class UpdateSettingsRequest(BaseModel):
    """Cambios parciales; lo que no se envía se mantiene"""
    settings: dict[str, Any]


class UpdateSettingsResponse(BaseModel):
    success: bool
    settings: CompetitionSettings
    recalculation: dict[str, Any]


def _not_found(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "/{competition_id}/leaderboard",
    response_model=LeaderboardResponse | RoundLeaderboardResponse
)
async def get_competition_leaderboard(
    competition_id: str,
    service: Leaderboards,
    round: Optional[int] = Query(None, ge=1, description="Only this round")
):
    """
    Obtener el leaderboard de una competición.

    Con `round` devuelve solo esa ronda y su resumen.
    """
    try:
        data = await service.get_competition_leaderboard(competition_id, round)
    except CompetitionNotFoundError as e:
        raise _not_found(e)

    if round is not None:
        return RoundLeaderboardResponse(**data)
    return LeaderboardResponse(**data)


@router.get("/{competition_id}/leaderboard/changes", response_model=list[UserStanding])
async def get_leaderboard_with_changes(
    competition_id: str,
    service: Leaderboards,
    round: int = Query(..., ge=1, description="Current round")
):
    """
    Leaderboard hasta la ronda indicada con el cambio de posición
    respecto a la ronda anterior.
    """
    try:
        return await service.with_rank_changes(competition_id, round)
    except CompetitionNotFoundError as e:
        raise _not_found(e)


@router.get(
    "/{competition_id}/games/{game_id}/margin-rank",
    response_model=MarginRankResponse
)
async def get_margin_rank(
    competition_id: str,
    game_id: str,
    service: Leaderboards,
    user_id: str = Query(..., description="User to rank")
):
    """Posición de la predicción de margen de un usuario para un partido."""
    try:
        rank = await service.get_margin_rank(competition_id, game_id, user_id)
    except CompetitionNotFoundError as e:
        raise _not_found(e)

    return MarginRankResponse(game_id=game_id, user_id=user_id, margin_rank=rank)


@router.patch("/{competition_id}/settings", response_model=UpdateSettingsResponse)
async def update_competition_settings(
    competition_id: str,
    request: UpdateSettingsRequest,
    points: Points
):
    """
    Actualizar la configuración de puntuación y recalcular todos los tips.
    """
    try:
        settings, stats = await points.update_settings(competition_id, request.settings)
    except CompetitionNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False)
        )

    return UpdateSettingsResponse(
        success=True,
        settings=settings,
        recalculation=stats
    )
