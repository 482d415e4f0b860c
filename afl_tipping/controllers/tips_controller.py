"""
Controlador de tips - Endpoints para guardar y consultar tips de un miembro
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from afl_tipping.core.dependencies import Tips
from afl_tipping.models.tip import Tip, TipCreate
from afl_tipping.services.game_service import GameNotFoundError
from afl_tipping.services.leaderboard_service import CompetitionNotFoundError
from afl_tipping.services.tip_service import (
    InvalidTipError,
    NotAMemberError,
    TipLockedError,
)


router = APIRouter(prefix="/competitions", tags=["tips"])


class SaveTipsRequest(BaseModel):
    """Tips de un usuario; cada uno reemplaza el anterior para ese partido"""
    user_id: str
    tips: list[TipCreate]


class TipResponse(BaseModel):
    id: str
    game_id: str
    predicted_winner: int
    margin: Optional[int] = None
    confidence: Optional[int] = None
    points: int
    is_correct: Optional[bool] = None
    margin_accuracy: Optional[int] = None
    margin_rank: Optional[int] = None
    updated_at: Optional[datetime] = None


class SaveTipsResponse(BaseModel):
    message: str
    tips: list[TipResponse]


def _to_response(tip: Tip) -> TipResponse:
    return TipResponse(**tip.model_dump(include=set(TipResponse.model_fields)))


@router.post(
    "/{competition_id}/tips",
    response_model=SaveTipsResponse,
    status_code=status.HTTP_201_CREATED
)
async def save_tips(
    competition_id: str,
    request: SaveTipsRequest,
    tips: Tips
):
    """
    Crear o actualizar tips de un miembro.

    Los tips se pueden modificar hasta que el partido se completa; los
    puntos se recalculan al registrar el resultado.
    """
    try:
        saved = await tips.save_tips(competition_id, request.user_id, request.tips)
    except (CompetitionNotFoundError, GameNotFoundError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except (NotAMemberError, TipLockedError) as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except InvalidTipError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return SaveTipsResponse(
        message=f"Saved {len(saved)} tips",
        tips=[_to_response(t) for t in saved]
    )


@router.get("/{competition_id}/tips", response_model=list[TipResponse])
async def get_user_tips(
    competition_id: str,
    tips: Tips,
    user_id: str = Query(..., description="Member whose tips to return"),
    game_id: Optional[str] = Query(None, description="Only the tip for this game")
):
    """
    Obtener los tips de un miembro en una competición.
    """
    try:
        found = await tips.get_user_tips(competition_id, user_id, game_id)
    except CompetitionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except NotAMemberError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    return [_to_response(t) for t in found]
