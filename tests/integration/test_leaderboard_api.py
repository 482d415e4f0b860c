"""
Integration tests for leaderboard, settings and game completion endpoints
"""

import pytest


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health_with_database(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "connected"}


class TestLeaderboardEndpoints:
    """Test suite for /competitions/{id}/leaderboard endpoints."""

    @pytest.mark.asyncio
    async def test_get_leaderboard(self, client, seeded_db):
        """Test GET /competitions/{id}/leaderboard"""
        response = await client.get("/competitions/comp1/leaderboard")

        assert response.status_code == 200
        data = response.json()

        # alice and bob tie on 4 points, alice is closer on margins
        rows = [(r["user_id"], r["position"], r["total_points"]) for r in data["leaderboard"]]
        assert rows == [("alice", 1, 4), ("bob", 2, 4), ("carol", 3, 0)]
        assert data["leaderboard"][0]["total_margin_diff"] == 10
        assert data["leaderboard"][1]["total_margin_diff"] == 15
        assert [s["round"] for s in data["round_summaries"]] == [1, 2]
        assert data["settings"]["allCorrectBonusPoints"] == 2
        assert data["competition"] == {"id": "comp1", "name": "Office Tipping 2025", "member_count": 3}

    @pytest.mark.asyncio
    async def test_get_round_leaderboard(self, client, seeded_db):
        """Test GET /competitions/{id}/leaderboard?round=2"""
        response = await client.get("/competitions/comp1/leaderboard", params={"round": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["round"] == 2
        assert data["summary"]["completed_games"] == 1
        assert data["summary"]["total_games"] == 2
        assert [r["user_id"] for r in data["leaderboard"]] == ["bob", "alice", "carol"]
        assert data["leaderboard"][0]["total_points"] == 3

    @pytest.mark.asyncio
    async def test_leaderboard_not_found(self, client, test_db):
        response = await client.get("/competitions/missing/leaderboard")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_leaderboard_changes(self, client, seeded_db):
        """Test GET /competitions/{id}/leaderboard/changes?round=2"""
        response = await client.get("/competitions/comp1/leaderboard/changes", params={"round": 2})

        assert response.status_code == 200
        changes = {r["user_id"]: r["change"] for r in response.json()}
        assert changes == {"alice": 0, "bob": 0, "carol": 0}

    @pytest.mark.asyncio
    async def test_leaderboard_changes_first_round(self, client, seeded_db):
        response = await client.get("/competitions/comp1/leaderboard/changes", params={"round": 1})

        assert response.status_code == 200
        assert all(r["change"] is None for r in response.json())

    @pytest.mark.asyncio
    async def test_margin_rank(self, client, seeded_db):
        """Test GET /competitions/{id}/games/{game_id}/margin-rank"""
        response = await client.get(
            "/competitions/comp1/games/r1g1/margin-rank",
            params={"user_id": "bob"}
        )

        assert response.status_code == 200
        assert response.json() == {"game_id": "r1g1", "user_id": "bob", "margin_rank": 2}

    @pytest.mark.asyncio
    async def test_margin_rank_without_margin(self, client, seeded_db):
        response = await client.get(
            "/competitions/comp1/games/r2g1/margin-rank",
            params={"user_id": "alice"}
        )

        assert response.status_code == 200
        assert response.json()["margin_rank"] is None


class TestSettingsEndpoint:
    """Test suite for PATCH /competitions/{id}/settings"""

    @pytest.mark.asyncio
    async def test_update_settings_recalculates(self, client, seeded_db):
        response = await client.patch(
            "/competitions/comp1/settings",
            json={"settings": {"correctTipPoints": 3}}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["settings"]["correctTipPoints"] == 3
        assert data["settings"]["allCorrectBonus"] is True
        assert data["recalculation"]["tips_processed"] == 7

        tip = await seeded_db["tips"].find_one({"id": "alice:r1g1:comp1"})
        assert tip["points"] == 3
        assert tip["is_correct"] is True
        assert tip["margin_rank"] == 1

    @pytest.mark.asyncio
    async def test_update_settings_invalid_value(self, client, seeded_db):
        response = await client.patch(
            "/competitions/comp1/settings",
            json={"settings": {"marginMode": "sometimes"}}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_settings_not_found(self, client, test_db):
        response = await client.patch(
            "/competitions/missing/settings",
            json={"settings": {"correctTipPoints": 3}}
        )

        assert response.status_code == 404


class TestGamesEndpoint:
    """Test suite for POST /games/{id}/complete"""

    @pytest.mark.asyncio
    async def test_complete_game(self, client, seeded_db):
        response = await client.post("/games/r2g2/complete", json={"home_score": 50, "away_score": 60})

        assert response.status_code == 200
        data = response.json()
        assert data["margin"] == 10
        assert data["game"]["is_complete"] is True
        assert data["game"]["winner"] == 2
        assert data["competitions_recalculated"] == ["comp1"]
        assert data["competitions_failed"] == []

        tip = await seeded_db["tips"].find_one({"id": "alice:r2g2:comp1"})
        assert tip["points"] == 0
        assert tip["is_correct"] is False

        totals = {
            doc["user_id"]: doc["total_points"]
            async for doc in seeded_db["competition_users"].find({"competition_id": "comp1"})
        }
        assert totals == {"alice": 4, "bob": 4, "carol": 0}

    @pytest.mark.asyncio
    async def test_complete_game_not_found(self, client, test_db):
        response = await client.post("/games/missing/complete", json={"home_score": 50, "away_score": 60})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_complete_game_negative_score(self, client, test_db):
        response = await client.post("/games/r1g1/complete", json={"home_score": -1, "away_score": 60})

        assert response.status_code == 422


class TestAdminEndpoints:
    @pytest.mark.asyncio
    async def test_recalculate_all(self, client, seeded_db):
        response = await client.post("/admin/recalculate")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["competitions_processed"] == 1
        assert data["failed"] == []

    @pytest.mark.asyncio
    async def test_recalculate_competition(self, client, seeded_db):
        response = await client.post("/admin/competitions/comp1/recalculate")

        assert response.status_code == 200
        stats = response.json()["points_assigned"]
        assert stats["bonuses_awarded"] == 2
        assert stats["points_distributed"] == 8

    @pytest.mark.asyncio
    async def test_recalculate_missing_competition(self, client, test_db):
        response = await client.post("/admin/competitions/missing/recalculate")

        assert response.status_code == 404
