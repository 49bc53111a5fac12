from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from bingoo.models import UserRole
from bingoo.repositories.game_repository import GameRepository


class TestCatalog:
    """Prize catalog router tests"""

    def test_public_listing_hides_unavailable(self, client, make_prize):
        """Public listing hides inactive and sold-out prizes"""
        make_prize(name="Rice bag", stock=3)
        make_prize(name="Sold out", stock=0, is_active=False)

        response = client.get("/api/v1/prizes")

        assert response.status_code == 200
        names = [p["name"] for p in response.json()["prizes"]]
        assert names == ["Rice bag"]

    def test_regional_listing_uses_caller_region(self, client, auth_headers, make_user, make_prize):
        """The regional catalog follows the caller's region"""
        user = make_user(country="SN")
        make_prize(name="Attieke", region_id="AFRIQUE_NOIRE")
        make_prize(name="Baguette", region_id="EUROPE")

        response = client.get("/api/v1/prizes/regional", headers=auth_headers(user))

        names = {p["name"] for p in response.json()["prizes"]}
        assert "Attieke" in names
        assert "Baguette" not in names


class TestClaim:
    """Prize claim router tests"""

    def test_claim_success(self, client, auth_headers, make_user, make_prize):
        """A claim returns its history entry and spends the points"""
        # Given
        user = make_user(points=10)
        prize = make_prize(point_value=2, stock=1)

        # When
        response = client.post(
            "/api/v1/prizes/claim", json={"prize_id": prize.id}, headers=auth_headers(user)
        )

        # Then
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["kind"] == "CLAIM"
        assert body["data"]["points"] == 2
        balance = client.get("/api/v1/users/me/points", headers=auth_headers(user))
        assert balance.json()["data"]["points"] == 8

    def test_claim_with_insufficient_points(self, client, auth_headers, make_user, make_prize):
        """A claim without enough points gets POINTS_001"""
        user = make_user(points=1)
        prize = make_prize(point_value=2)

        response = client.post(
            "/api/v1/prizes/claim", json={"prize_id": prize.id}, headers=auth_headers(user)
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "POINTS_001"
        assert body["error"]["details"] == {"required": 2, "available": 1}

    def test_claim_sold_out_prize(self, client, auth_headers, make_user, make_prize):
        """A sold-out prize cannot be claimed"""
        prize = make_prize(point_value=2, stock=1)
        first, second = make_user(points=5), make_user(points=5)
        client.post("/api/v1/prizes/claim", json={"prize_id": prize.id}, headers=auth_headers(first))

        response = client.post(
            "/api/v1/prizes/claim", json={"prize_id": prize.id}, headers=auth_headers(second)
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "PRIZE_001"

    def test_claim_unknown_prize(self, client, auth_headers, make_user):
        """Claiming a missing prize gets 404"""
        response = client.post(
            "/api/v1/prizes/claim", json={"prize_id": 999}, headers=auth_headers(make_user(points=5))
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRIZE_404"

    def test_malformed_body(self, client, auth_headers, make_user):
        """A non-integer prize_id gets 422"""
        response = client.post(
            "/api/v1/prizes/claim", json={"prize_id": "abc"}, headers=auth_headers(make_user())
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_001"

    def test_storage_failure_returns_internal_error(
        self, app, auth_headers, make_user, make_prize
    ):
        """A storage error inside the claim answers 500 INTERNAL_001 and changes nothing"""
        # Given
        client = TestClient(app, raise_server_exceptions=False)
        user = make_user(points=10)
        prize = make_prize(point_value=2, stock=1)
        failure = IntegrityError("INSERT INTO game_history", {}, Exception("check failed"))

        # When
        with patch.object(GameRepository, "record", side_effect=failure):
            response = client.post(
                "/api/v1/prizes/claim", json={"prize_id": prize.id}, headers=auth_headers(user)
            )

        # Then
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INTERNAL_001"
        balance = client.get("/api/v1/users/me/points", headers=auth_headers(user))
        assert balance.json()["data"]["points"] == 10
        catalog = client.get("/api/v1/prizes")
        assert [p["stock"] for p in catalog.json()["prizes"]] == [1]
        prizes = client.get("/api/v1/users/me/prizes", headers=auth_headers(user))
        assert prizes.json()["meta"]["total_count"] == 0

    def test_claim_shows_in_my_prizes(self, client, auth_headers, make_user, make_prize):
        """A claim appears in the caller's prizes"""
        user = make_user(points=10)
        prize = make_prize(point_value=3)
        client.post("/api/v1/prizes/claim", json={"prize_id": prize.id}, headers=auth_headers(user))

        response = client.get("/api/v1/users/me/prizes", headers=auth_headers(user))

        body = response.json()
        assert body["meta"]["total_count"] == 1
        assert body["data"]["prizes"][0]["prize_id"] == prize.id


class TestAdminPrizes:
    """Prize administration router tests"""

    def test_non_admin_forbidden(self, client, auth_headers, make_user):
        """Prize administration requires an admin"""
        response = client.post(
            "/api/v1/prizes/admin",
            json={"name": "TV", "category": "SUPER", "point_value": 500},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTH_002"

    def test_create_update_delete(self, client, auth_headers, make_user):
        """An admin can create, update and delete a prize"""
        admin = auth_headers(make_user(role=UserRole.ADMIN))

        created = client.post(
            "/api/v1/prizes/admin",
            json={"name": "TV", "category": "SUPER", "point_value": 500, "stock": 2},
            headers=admin,
        )
        assert created.status_code == 201
        prize_id = created.json()["id"]

        updated = client.put(
            f"/api/v1/prizes/admin/{prize_id}", json={"point_value": 450}, headers=admin
        )
        assert updated.json()["point_value"] == 450

        deleted = client.delete(f"/api/v1/prizes/admin/{prize_id}", headers=admin)
        assert deleted.json() == {"deleted": True, "id": prize_id}
