"""Tests for company endpoints."""

from finstatements.models.company import CompanyModel
from finstatements.models.statement import StatementModel

BASE = "/api/v1/companies"


class TestListCompanies:
    def test_list_with_statement_counts(self, client, sample_statement, other_company):
        response = client.get(f"{BASE}/")

        assert response.status_code == 200
        assert [(c["name"], c["statement_count"]) for c in response.json()] == [
            ("Acme Manufacturing", 1),
            ("Birch Retail", 0),
        ]

    def test_search(self, client, sample_company, other_company):
        response = client.get(f"{BASE}/", params={"search": "consumer"})
        assert [c["name"] for c in response.json()] == ["Birch Retail"]

    def test_empty(self, client):
        assert client.get(f"{BASE}/").json() == []


class TestGetCompany:
    def test_get(self, client, sample_statement):
        response = client.get(f"{BASE}/{sample_statement.company_id}")
        assert response.status_code == 200
        assert response.json()["statement_count"] == 1

    def test_missing(self, client):
        assert client.get(f"{BASE}/999").status_code == 404


class TestWriteCompanies:
    def test_create_uses_caller_team(self, client, admin_headers, sample_user):
        response = client.post(
            f"{BASE}/", json={"name": "  Cedar Energy ", "industry": ""}, headers=admin_headers
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Cedar Energy"
        assert body["industry"] is None
        assert body["team_id"] == sample_user.team_id

    def test_create_requires_user(self, client):
        assert client.post(f"{BASE}/", json={"name": "Cedar Energy"}).status_code == 401

    def test_create_rejects_blank_name(self, client, admin_headers):
        assert client.post(f"{BASE}/", json={"name": "   "}, headers=admin_headers).status_code == 422

    def test_update(self, client, admin_headers, sample_company):
        response = client.put(
            f"{BASE}/{sample_company.id}",
            json={"name": "Acme Holdings", "industry": "Conglomerates"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Acme Holdings"

    def test_update_missing(self, client, admin_headers):
        response = client.put(f"{BASE}/999", json={"name": "Nobody"}, headers=admin_headers)
        assert response.status_code == 404

    def test_delete_removes_statements(self, client, admin_headers, sample_statement, db):
        response = client.delete(f"{BASE}/{sample_statement.company_id}", headers=admin_headers)

        assert response.status_code == 204
        db.expire_all()
        assert db.query(CompanyModel).count() == 0
        assert db.query(StatementModel).count() == 0

    def test_delete_missing(self, client, admin_headers):
        assert client.delete(f"{BASE}/999", headers=admin_headers).status_code == 404
