"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from afl_tipping.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Dueño de la conexión a MongoDB durante la vida de la app"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency para inyectar la DB"""
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Crea los índices necesarios

    El índice único de tips garantiza un tip por (usuario, partido, competición).
    """
    await db.games.create_index("id", unique=True)
    await db.games.create_index([("season", 1), ("round", 1)])

    await db.tips.create_index("id", unique=True)
    await db.tips.create_index(
        [("user_id", 1), ("game_id", 1), ("competition_id", 1)],
        unique=True
    )
    await db.tips.create_index("competition_id")
    await db.tips.create_index("game_id")

    await db.competitions.create_index("is_active")
    await db.competition_users.create_index(
        [("user_id", 1), ("competition_id", 1)],
        unique=True
    )

    await db.round_bonuses.create_index(
        [("user_id", 1), ("competition_id", 1), ("round", 1)],
        unique=True
    )

    logger.info("Indexes created successfully")
