"""
Pytest fixtures and configuration for all tests.
"""

import pytest
from typing import AsyncGenerator
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from datetime import datetime, timezone

from afl_tipping.models.competition import CompetitionSettings

from factories import make_game

# MongoDB test database
TEST_DB_URI = "mongodb://localhost:27017"
TEST_DB_NAME = "afl_tipping_test"



@pytest.fixture(scope="session")
def worker_id(request):
    """
    Return the worker ID when using pytest-xdist, otherwise 'master'.
    This allows each worker to use its own test database.
    """
    if hasattr(request.config, 'workerinput'):
        return request.config.workerinput['workerid']
    return 'master'


@pytest.fixture(scope="function")
async def test_db(worker_id) -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean test database for each test.

    Skips the test when no MongoDB server is reachable.
    """
    client = AsyncIOMotorClient(TEST_DB_URI, serverSelectionTimeoutMS=1000)
    try:
        await client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip("MongoDB not available")

    db_name = f"{TEST_DB_NAME}_{worker_id}" if worker_id != "master" else TEST_DB_NAME
    db = client[db_name]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()

    client.close()


@pytest.fixture
def default_settings():
    return CompetitionSettings.with_defaults()


@pytest.fixture
def sample_competition_data():
    """Sample competition document."""
    return {
        "_id": "comp1",
        "name": "Office Tipping 2025",
        "code": "ABC123",
        "is_active": True,
        "settings": {"correctTipPoints": 1, "allCorrectBonus": True, "allCorrectBonusPoints": 2},
        "member_ids": ["alice", "bob", "carol"],
        "created_at": datetime(2025, 3, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_users_data():
    return [
        {"_id": "alice", "username": "alice", "email": "alice@example.com"},
        {"_id": "bob", "username": "bob", "email": "bob@example.com"},
        {"_id": "carol", "username": "carol", "email": "carol@example.com"},
    ]


@pytest.fixture
def sample_games_data():
    """Two rounds: round 1 complete, round 2 half played."""
    return [
        make_game("r1g1", round=1, home_score=100, away_score=85).model_dump(),
        make_game("r1g2", round=1, home_score=70, away_score=90).model_dump(),
        make_game("r2g1", round=2, home_score=88, away_score=80).model_dump(),
        make_game("r2g2", round=2).model_dump(),
    ]
