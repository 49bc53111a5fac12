import pytest
from dependency_injector import providers

from bingoo.services.game_service import GameService


@pytest.fixture
def always_win(app):
    app.container.services.game_service.override(
        providers.Factory(GameService, win_rate=1.0)
    )
    yield
    app.container.services.game_service.reset_override()


class TestPlay:
    """Game play router tests"""

    def test_winning_play(self, client, auth_headers, make_user, make_prize, always_win):
        """A winning play charges the regional cost and is recorded"""
        # Given
        user = make_user(points=10)
        prize = make_prize(point_value=30, stock=1)

        # When
        response = client.post(
            "/api/v1/games/play", json={"prize_id": prize.id}, headers=auth_headers(user)
        )

        # Then
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["won"] is True
        assert data["cost"] == 2
        assert data["balance_after"] == 8

        history = client.get("/api/v1/games/history", headers=auth_headers(user))
        assert history.json()["meta"]["total_count"] == 1

        transactions = client.get("/api/v1/transactions", headers=auth_headers(user))
        assert transactions.json()["transactions"][0]["type"] == "GAME_COST"

    def test_play_without_points(self, client, auth_headers, make_user, make_prize):
        """A play without enough points gets POINTS_001"""
        user = make_user(points=0)
        prize = make_prize()

        response = client.post(
            "/api/v1/games/play", json={"prize_id": prize.id}, headers=auth_headers(user)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "POINTS_001"
