"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from afl_tipping.main import app
from afl_tipping.database import Database, create_indexes

from factories import AWAY, HOME, make_game, make_tip


@pytest.fixture
async def client(test_db):
    """
    HTTP client for testing API endpoints.

    Points the Database holder at the test database; the app lifespan is not
    run, so no real connection is opened.
    """
    original_db = Database.db
    Database.db = test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    Database.db = original_db


@pytest.fixture
async def seeded_db(test_db, sample_competition_data, sample_users_data, sample_games_data):
    """
    comp1 with three members and tips from alice and bob.

    Round 1: alice 2/2 (+2 bonus), bob 1/2
    Round 2: alice 0/1, bob 1/1 (+2 bonus), r2g2 still to play
    """
    await create_indexes(test_db)
    await test_db["competitions"].insert_one(sample_competition_data)
    await test_db["users"].insert_many(sample_users_data)
    await test_db["games"].insert_many(sample_games_data)

    games = {g["id"]: make_game(g["id"], round=g["round"], home_score=g["home_score"], away_score=g["away_score"])
             for g in sample_games_data}
    tips = [
        make_tip("alice", games["r1g1"], predicted_winner=HOME, margin=15),
        make_tip("alice", games["r1g2"], predicted_winner=AWAY, margin=10),
        make_tip("alice", games["r2g1"], predicted_winner=AWAY),
        make_tip("alice", games["r2g2"], predicted_winner=HOME),
        make_tip("bob", games["r1g1"], predicted_winner=HOME, margin=30),
        make_tip("bob", games["r1g2"], predicted_winner=HOME),
        make_tip("bob", games["r2g1"], predicted_winner=HOME),
    ]
    await test_db["tips"].insert_many([
        tip.model_dump(exclude={"game", "user"}) for tip in tips
    ])
    return test_db
