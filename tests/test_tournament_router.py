from bingoo.models import UserRole


class TestJoin:
    """Tournament join router tests"""

    def test_join_then_rejoin(self, client, auth_headers, make_user, make_tournament):
        """A second join gets TOURNAMENT_003"""
        # Given
        user = make_user(points=20)
        tournament = make_tournament(entry_fee=5)
        url = f"/api/v1/tournaments/{tournament.id}/join"

        # When
        first = client.post(url, headers=auth_headers(user))
        second = client.post(url, headers=auth_headers(user))

        # Then
        assert first.status_code == 200
        assert first.json()["data"]["balance_after"] == 15
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "TOURNAMENT_003"
        detail = client.get(f"/api/v1/tournaments/{tournament.id}")
        assert detail.json()["participant_count"] == 1

    def test_join_unknown_tournament(self, client, auth_headers, make_user):
        """Joining a missing tournament gets 404"""
        response = client.post("/api/v1/tournaments/999/join", headers=auth_headers(make_user()))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TOURNAMENT_404"

    def test_join_without_points(self, client, auth_headers, make_user, make_tournament):
        """Joining without enough points gets POINTS_001"""
        tournament = make_tournament(entry_fee=5)

        response = client.post(
            f"/api/v1/tournaments/{tournament.id}/join", headers=auth_headers(make_user(points=1))
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "POINTS_001"


class TestAdminTournaments:
    """Tournament administration router tests"""

    def test_create_and_list(self, client, auth_headers, make_user):
        """An admin creates a tournament that is then listed"""
        admin = auth_headers(make_user(role=UserRole.ADMIN))

        created = client.post(
            "/api/v1/tournaments/admin",
            json={
                "name": "Friday cup",
                "entry_fee": 3,
                "min_players": 2,
                "max_players": 16,
                "prizes": [{"rank": 1, "points": 50}],
            },
            headers=admin,
        )

        assert created.status_code == 201
        listing = client.get("/api/v1/tournaments")
        assert listing.json()["total_count"] == 1
        assert listing.json()["tournaments"][0]["name"] == "Friday cup"

    def test_player_bounds_validated(self, client, auth_headers, make_user):
        """min_players above max_players is rejected"""
        response = client.post(
            "/api/v1/tournaments/admin",
            json={"name": "Bad", "min_players": 5, "max_players": 2},
            headers=auth_headers(make_user(role=UserRole.ADMIN)),
        )

        assert response.status_code == 422

    def test_advance_requires_admin(self, client, auth_headers, make_user):
        """Lifecycle advance requires an admin"""
        response = client.post("/api/v1/tournaments/admin/advance", headers=auth_headers(make_user()))

        assert response.status_code == 403
