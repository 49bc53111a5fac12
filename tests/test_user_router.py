from types import SimpleNamespace


class TestAuthentication:
    """Bearer token authentication tests"""

    def test_missing_token_is_rejected(self, client):
        """A request without a token gets 401"""
        response = client.get("/api/v1/users/me")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "AUTH_001"

    def test_invalid_token_is_rejected(self, client):
        """A malformed token gets 401"""
        response = client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_001"

    def test_unknown_user(self, client, auth_headers):
        """A token for a deleted user gets 404"""
        ghost = SimpleNamespace(id=999, email="ghost@example.com", role="USER")

        response = client.get("/api/v1/users/me", headers=auth_headers(ghost))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_404"


class TestProfile:
    """Profile router tests"""

    def test_get_me(self, client, auth_headers, make_user):
        """The caller's profile is returned in the envelope"""
        # Given
        user = make_user(points=7, country="SN", name="Awa")

        # When
        response = client.get("/api/v1/users/me", headers=auth_headers(user))

        # Then
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["name"] == "Awa"
        assert body["data"]["points"] == 7

    def test_points_balance(self, client, auth_headers, make_user):
        """The caller's points balance is returned"""
        user = make_user(points=42)

        response = client.get("/api/v1/users/me/points", headers=auth_headers(user))

        assert response.json()["data"] == {"user_id": user.id, "points": 42}


class TestRegion:
    """Region router tests"""

    def test_country_maps_to_region(self, client, auth_headers, make_user):
        """The caller's country resolves to its region"""
        user = make_user(country="CI")

        response = client.get("/api/v1/users/me/region", headers=auth_headers(user))

        data = response.json()["data"]
        assert data["region"] == "AFRIQUE_NOIRE"
        assert data["currency"] == "XOF"
        assert data["points_per_play"] == 2

    def test_unknown_country_falls_back_to_europe(self, client, auth_headers, make_user):
        """An unlisted country resolves to EUROPE"""
        user = make_user(country="ZZ")

        response = client.get("/api/v1/users/me/region", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["data"]["region"] == "EUROPE"

    def test_public_region_lookup(self, client):
        """Region lookup by id needs no token"""
        response = client.get("/api/v1/regions/ma")

        assert response.status_code == 200
        assert response.json()["region"] == "AFRIQUE_BLANCHE"

    def test_region_list(self, client):
        """All five regions are listed"""
        response = client.get("/api/v1/regions")

        assert response.status_code == 200
        assert len(response.json()) == 5


class TestHealth:
    """Health router tests"""

    def test_health(self, client):
        """The health check reports healthy"""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_is_echoed(self, client):
        """The incoming request id is echoed back"""
        response = client.get("/api/v1/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
