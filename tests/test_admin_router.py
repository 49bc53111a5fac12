import pytest

from bingoo.models import UserRole


@pytest.fixture
def admin_headers(auth_headers, make_user):
    return auth_headers(make_user(role=UserRole.ADMIN, email="admin@example.com"))


class TestStatistics:
    """Admin statistics router tests"""

    def test_daily_series_is_zero_filled(self, client, admin_headers):
        """The daily series covers every day of the range"""
        response = client.get(
            "/api/v1/admin/statistics/daily",
            params={"start_date": "2024-01-01", "end_date": "2024-01-07"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        days = response.json()["days"]
        assert len(days) == 7
        assert days[0]["date"] == "2024-01-01"
        assert all(day["transactions"] == 0 for day in days)

    def test_bad_period_rejected(self, client, admin_headers):
        """An unsupported period gets 422"""
        response = client.get(
            "/api/v1/admin/statistics/daily", params={"period": "1y"}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_statistics_forbidden_for_users(self, client, auth_headers, make_user):
        """Statistics require an admin"""
        response = client.get(
            "/api/v1/admin/statistics/overview", headers=auth_headers(make_user())
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTH_002"

    def test_type_statistics_list_every_type(self, client, admin_headers):
        """Per-type statistics list every transaction type"""
        response = client.get("/api/v1/admin/statistics/transactions", headers=admin_headers)

        assert response.status_code == 200
        assert len(response.json()) == 7

    def test_overview(self, client, admin_headers, make_user):
        """The overview counts users and outstanding points"""
        make_user(country="US", points=5)

        response = client.get("/api/v1/admin/statistics/overview", headers=admin_headers)

        body = response.json()
        assert body["total_users"] == 2
        assert body["total_points"] == 5

    def test_user_statistics(self, client, admin_headers, make_user):
        """User statistics report totals and the average balance"""
        make_user(points=10)

        response = client.get("/api/v1/admin/statistics/users", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total_users"] == 2
        assert body["new_users"] == 2
        assert body["total_points"] == 10
        assert body["average_points_per_user"] == 5

    def test_user_report_json(self, client, admin_headers, make_user):
        """The user report is paginated JSON by default"""
        player = make_user(points=4, email="player@example.com")

        response = client.get(
            "/api/v1/admin/statistics/users/report",
            params={"limit": 1},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 2
        assert body["has_next"] is True
        assert body["users"][0]["user_id"] == player.id
        assert body["users"][0]["games_played"] == 0

    def test_user_report_csv(self, client, admin_headers, make_user):
        """format=csv returns every user as a CSV attachment"""
        make_user(points=4, email="player@example.com", name="Ada")

        response = client.get(
            "/api/v1/admin/statistics/users/report",
            params={"format": "csv"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "user_statistics.csv" in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("user_id,name,email,country,region")
        assert len(lines) == 3
        assert "player@example.com" in response.text

    def test_user_report_unknown_format_rejected(self, client, admin_headers):
        """An unsupported report format gets 422"""
        response = client.get(
            "/api/v1/admin/statistics/users/report",
            params={"format": "xml"},
            headers=admin_headers,
        )

        assert response.status_code == 422


class TestPointsAdmin:
    """Admin points adjustment router tests"""

    def test_adjust_balance(self, client, admin_headers, make_user):
        """An admin sets a balance and the delta is audited"""
        # Given
        user = make_user(points=3)

        # When
        response = client.post(
            "/api/v1/points/admin/adjust",
            json={"user_id": user.id, "points": 10, "reason": "Goodwill"},
            headers=admin_headers,
        )

        # Then
        assert response.status_code == 200
        assert response.json()["delta"] == 7
        balance = client.get(f"/api/v1/points/admin/{user.id}", headers=admin_headers)
        assert balance.json()["points"] == 10

    def test_negative_balance_rejected(self, client, admin_headers, make_user):
        """A negative balance is rejected"""
        user = make_user(points=3)

        response = client.post(
            "/api/v1/points/admin/adjust",
            json={"user_id": user.id, "points": -1},
            headers=admin_headers,
        )

        assert response.status_code == 422


class TestListings:
    """Admin listing router tests"""

    def test_user_search(self, client, admin_headers, make_user):
        """Users are searched by name or email"""
        make_user(email="fatou@example.com", name="Fatou")
        make_user(email="marc@example.com", name="Marc")

        response = client.get("/api/v1/admin/users", params={"q": "fatou"}, headers=admin_headers)

        body = response.json()
        assert body["total_count"] == 1
        assert body["users"][0]["email"] == "fatou@example.com"

    def test_fraud_alerts_empty(self, client, admin_headers):
        """No alerts are listed when none were raised"""
        response = client.get("/api/v1/admin/fraud-alerts", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["alerts"] == []
