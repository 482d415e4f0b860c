"""
Configuración cargada desde variables de entorno (.env)

Lo que cambia entre desarrollo y producción vive aquí; las reglas de
puntuación no, esas se guardan por competición.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "afl_tipping"

    # App
    app_env: str = "development"  # development | test | production
    debug: bool = False
    log_level: str = "INFO"

    # CORS: lista separada por comas más un regex opcional (previews de deploy)
    cors_origins: str = "http://localhost:3000"
    cors_origin_regex: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Instancia cacheada, se lee el entorno una sola vez"""
    return Settings()
