"""Tests for /api/user profile and password endpoints."""

from fastapi.testclient import TestClient


class TestProfile:
    """Tests for GET/PUT /api/user/profile."""

    def test_get_profile(self, client: TestClient, auth_headers):
        response = client.get("/api/user/profile", headers=auth_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["name"] == "Ann Lee"
        assert user["email"] == "ann@x.com"
        assert user["avatar"] == ""
        assert "password" not in user

    def test_update_name_and_avatar(self, client: TestClient, auth_headers):
        response = client.put(
            "/api/user/profile",
            json={"name": "  Ann Smith ", "avatar": "https://img.example/ann.png"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile updated successfully."
        assert body["user"]["name"] == "Ann Smith"
        assert body["user"]["avatar"] == "https://img.example/ann.png"

    def test_update_avatar_only(self, client: TestClient, auth_headers):
        response = client.put(
            "/api/user/profile", json={"avatar": "a.png"}, headers=auth_headers
        )

        assert response.json()["user"]["name"] == "Ann Lee"

    def test_email_cannot_be_changed(self, client: TestClient, auth_headers):
        """Unknown fields such as email are ignored."""
        response = client.put(
            "/api/user/profile", json={"email": "evil@x.com"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "ann@x.com"

    def test_short_name_rejected(self, client: TestClient, auth_headers):
        response = client.put("/api/user/profile", json={"name": "A"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

    def test_profile_update_keeps_password(self, client: TestClient, auth_headers):
        """Changing the profile does not disturb the stored password."""
        client.put("/api/user/profile", json={"name": "Ann Smith"}, headers=auth_headers)

        response = client.post(
            "/api/auth/login", json={"email": "ann@x.com", "password": "secret1"}
        )
        assert response.status_code == 200

    def test_requires_auth(self, client: TestClient):
        assert client.get("/api/user/profile").status_code == 401
        assert client.put("/api/user/profile", json={"name": "Nope"}).status_code == 401


class TestChangePassword:
    """Tests for PUT /api/user/change-password."""

    def test_change_password(self, client: TestClient, auth_headers):
        response = client.put(
            "/api/user/change-password",
            json={"currentPassword": "secret1", "newPassword": "brandnew"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Password changed successfully."}

        old = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "secret1"})
        new = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "brandnew"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_wrong_current_password(self, client: TestClient, auth_headers):
        response = client.put(
            "/api/user/change-password",
            json={"currentPassword": "wrong1", "newPassword": "brandnew"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect."

    def test_new_password_too_short(self, client: TestClient, auth_headers):
        response = client.put(
            "/api/user/change-password",
            json={"currentPassword": "secret1", "newPassword": "123"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "newPassword"

    def test_requires_auth(self, client: TestClient):
        response = client.put(
            "/api/user/change-password",
            json={"currentPassword": "secret1", "newPassword": "brandnew"},
        )
        assert response.status_code == 401
