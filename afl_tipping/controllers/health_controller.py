"""
Controlador de salud - estado de la API y de MongoDB
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from afl_tipping.database import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str  # ok | degraded
    database: str  # connected | unreachable | disconnected


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """La API responde siempre; `database` indica si MongoDB contesta al ping."""
    if Database.db is None:
        return HealthResponse(status="degraded", database="disconnected")

    try:
        await Database.db.command("ping")
    except PyMongoError:
        logger.warning("MongoDB ping failed", exc_info=True)
        return HealthResponse(status="degraded", database="unreachable")

    return HealthResponse(status="ok", database="connected")
