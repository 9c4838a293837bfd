"""Tests for admin-only user and team management."""

from finstatements.models.user import UserModel

BASE = "/api/v1/users"


class TestAccess:
    def test_missing_header(self, client):
        assert client.get(f"{BASE}/").status_code == 401

    def test_non_admin_forbidden(self, client, analyst_headers):
        assert client.get(f"{BASE}/", headers=analyst_headers).status_code == 403
        assert client.get(f"{BASE}/teams", headers=analyst_headers).status_code == 403


class TestTeams:
    def test_create_and_list(self, client, admin_headers):
        created = client.post(f"{BASE}/teams", json={"name": "Credit"}, headers=admin_headers)
        assert created.status_code == 201

        names = [t["name"] for t in client.get(f"{BASE}/teams", headers=admin_headers).json()]
        assert names == ["Credit", "Equity Research"]


class TestUsers:
    def test_list_includes_team_name(self, client, admin_headers):
        [user] = client.get(f"{BASE}/", headers=admin_headers).json()
        assert user["email"] == "analyst@example.com"
        assert user["team_name"] == "Equity Research"

    def test_create_user(self, client, admin_headers, sample_team):
        response = client.post(
            f"{BASE}/",
            json={"email": "New.Hire@Example.com", "role": "manager", "team_id": sample_team.id},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new.hire@example.com"
        assert body["role"] == "manager"
        assert body["team_name"] == "Equity Research"

    def test_duplicate_email_conflicts(self, client, admin_headers):
        response = client.post(f"{BASE}/", json={"email": "ANALYST@example.com"}, headers=admin_headers)
        assert response.status_code == 409

    def test_unknown_team(self, client, admin_headers):
        response = client.post(
            f"{BASE}/", json={"email": "x@example.com", "team_id": 999}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_invalid_email(self, client, admin_headers):
        response = client.post(f"{BASE}/", json={"email": "not-an-email"}, headers=admin_headers)
        assert response.status_code == 422

    def test_update_role(self, client, admin_headers, analyst):
        response = client.put(
            f"{BASE}/{analyst.id}", json={"role": "admin", "team_id": None}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert response.json()["team_name"] is None

    def test_update_missing(self, client, admin_headers):
        response = client.put(f"{BASE}/999", json={"role": "user"}, headers=admin_headers)
        assert response.status_code == 404


class TestDeleteUser:
    def test_delete(self, client, admin_headers, analyst, db):
        response = client.delete(f"{BASE}/{analyst.id}", headers=admin_headers)

        assert response.status_code == 204
        db.expire_all()
        assert db.get(UserModel, analyst.id) is None

    def test_cannot_delete_self(self, client, admin_headers, sample_user):
        response = client.delete(f"{BASE}/{sample_user.id}", headers=admin_headers)
        assert response.status_code == 400

    def test_missing(self, client, admin_headers):
        assert client.delete(f"{BASE}/999", headers=admin_headers).status_code == 404

    def test_owner_of_statements_conflicts(self, client, db, sample_statement, sample_user):
        other_admin = UserModel(email="lead@example.com", role="admin")
        db.add(other_admin)
        db.commit()

        response = client.delete(
            f"{BASE}/{sample_user.id}", headers={"X-User-ID": str(other_admin.id)}
        )

        assert response.status_code == 409
