"""
Entry point de la API de tipping AFL
"""

import re
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from afl_tipping.core.config import get_settings
from afl_tipping.core.logging_config import configure_logging
from afl_tipping.database import Database, create_indexes

from afl_tipping.controllers.health_controller import router as health_router
from afl_tipping.controllers.leaderboard_controller import router as leaderboard_router
from afl_tipping.controllers.tips_controller import router as tips_router
from afl_tipping.controllers.games_controller import router as games_router
from afl_tipping.controllers.admin_controller import router as admin_router

settings = get_settings()
configure_logging(settings.log_level)

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Methods": "GET, POST, PATCH, OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type, Accept, Origin, X-Requested-With",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Max-Age": "86400",
}


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Responde los preflight OPTIONS antes del routing, así la validación de
    query params (ej. `round` obligatorio) no los convierte en 4xx.
    """

    def __init__(self, app, origins: list[str], origin_regex: Optional[str] = None):
        super().__init__(app)
        self.origins = set(origins)
        self.origin_pattern = re.compile(origin_regex) if origin_regex else None

    def allows(self, origin: str) -> bool:
        if not origin:
            return False
        if origin in self.origins:
            return True
        return bool(self.origin_pattern and self.origin_pattern.fullmatch(origin))

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        if request.method == "OPTIONS":
            if not self.allows(origin):
                return Response(status_code=403, content="Origin not allowed")
            return Response(
                status_code=200,
                headers={"Access-Control-Allow-Origin": origin, **PREFLIGHT_HEADERS}
            )

        response = await call_next(request)
        if self.allows(origin):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    await create_indexes(Database.get_db())
    yield
    await Database.disconnect()


app = FastAPI(
    title="AFL Tipping API",
    description="Puntuación y clasificaciones de competiciones de tips AFL",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    origins=settings.cors_origin_list,
    origin_regex=settings.cors_origin_regex,
)

app.include_router(health_router)
app.include_router(leaderboard_router)
app.include_router(tips_router)
app.include_router(games_router)
app.include_router(admin_router)
