"""
Tests for routers.referral_codes module.
"""

import pytest


def _create(client, code="alpha1", owner_name="Alice"):
    response = client.post("/referral-codes", json={"code": code, "ownerName": owner_name})
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateAndRead:
    """Tests for create and read endpoints."""

    def test_create_returns_camel_case_record(self, client):
        body = _create(client)

        assert body["id"] == 1
        assert body["code"] == "alpha1"
        assert body["ownerName"] == "Alice"
        assert body["isActive"] is True
        assert body["usageCount"] == 0
        assert "createdAt" in body and "updatedAt" in body

    def test_create_accepts_snake_case(self, client):
        response = client.post("/referral-codes", json={"code": "beta", "owner_name": "Bob"})
        assert response.status_code == 201
        assert response.json()["ownerName"] == "Bob"

    def test_create_duplicate_returns_409(self, client):
        _create(client)
        response = client.post("/referral-codes", json={"code": "alpha1", "ownerName": "Other"})

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "referral_code_already_exists"
        assert error["message"] == "Referral code already exists: alpha1"

    @pytest.mark.parametrize("payload", [
        {"code": "   ", "ownerName": "Alice"},
        {"code": "alpha1", "ownerName": ""},
        {"code": "alpha1"},
        {"ownerName": "Alice"},
    ])
    def test_create_invalid_payload_returns_422(self, client, payload):
        response = client.post("/referral-codes", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"

    def test_get_by_id_and_code(self, client):
        created = _create(client)

        assert client.get(f"/referral-codes/{created['id']}").json() == created
        assert client.get("/referral-codes/code/alpha1").json() == created

    def test_get_missing_returns_404(self, client):
        response = client.get("/referral-codes/99")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "referral_code_not_found"

        assert client.get("/referral-codes/code/missing").status_code == 404

    def test_list_all_and_active(self, client):
        first = _create(client, "a1", "Ann")
        _create(client, "b1", "Ben")
        client.put(f"/referral-codes/{first['id']}/deactivate")

        assert [r["code"] for r in client.get("/referral-codes").json()] == ["a1", "b1"]
        assert [r["code"] for r in client.get("/referral-codes/active").json()] == ["b1"]


class TestModify:
    """Tests for update, delete and status endpoints."""

    def test_update(self, client):
        created = _create(client)
        response = client.put(
            f"/referral-codes/{created['id']}",
            json={"code": "alpha2", "ownerName": "Alicia"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["code"] == "alpha2"
        assert body["ownerName"] == "Alicia"
        assert body["isActive"] is True

    def test_update_conflict_and_missing(self, client):
        _create(client, "a1", "Ann")
        second = _create(client, "b1", "Ben")

        conflict = client.put(f"/referral-codes/{second['id']}", json={"code": "a1", "ownerName": "Ben"})
        assert conflict.status_code == 409

        missing = client.put("/referral-codes/99", json={"code": "z", "ownerName": "Z"})
        assert missing.status_code == 404

    def test_delete(self, client):
        created = _create(client)

        response = client.delete(f"/referral-codes/{created['id']}")
        assert response.status_code == 200
        assert client.get(f"/referral-codes/{created['id']}").status_code == 404
        assert client.delete(f"/referral-codes/{created['id']}").status_code == 404

    def test_activate_and_deactivate(self, client):
        created = _create(client)

        deactivated = client.put(f"/referral-codes/{created['id']}/deactivate")
        assert deactivated.json()["isActive"] is False
        assert client.get("/referral-codes/validate/alpha1").json() == {"code": "alpha1", "valid": False}

        activated = client.put(f"/referral-codes/{created['id']}/activate")
        assert activated.json()["isActive"] is True
        assert client.get("/referral-codes/validate/alpha1").json()["valid"] is True

        assert client.put("/referral-codes/99/activate").status_code == 404


class TestUsageAndReports:
    """Tests for usage tracking and report endpoints."""

    def test_use_increments_and_unknown_is_ok(self, client):
        _create(client)

        client.post("/referral-codes/code/alpha1/use")
        client.post("/referral-codes/code/alpha1/use")
        unknown = client.post("/referral-codes/code/ghost/use")

        assert unknown.status_code == 200
        assert client.get("/referral-codes/code/alpha1").json()["usageCount"] == 2
        assert client.get("/referral-codes/total-usage").json() == {"totalUsage": 2}

    def test_top_min_usage_and_search(self, client):
        _create(client, "a1", "Riddhima")
        _create(client, "b1", "Pawan")
        for _ in range(3):
            client.post("/referral-codes/code/b1/use")

        assert [r["code"] for r in client.get("/referral-codes/top").json()] == ["b1", "a1"]
        assert [r["code"] for r in client.get("/referral-codes/usage/1").json()] == ["b1"]
        assert client.get("/referral-codes/usage/-1").status_code == 422

        search = client.get("/referral-codes/search/owner", params={"ownerName": "pAw"})
        assert [r["code"] for r in search.json()] == ["b1"]

    def test_statistics(self, client):
        first = _create(client, "a1", "Ann")
        _create(client, "b1", "Ben")
        client.put(f"/referral-codes/{first['id']}/deactivate")
        client.post("/referral-codes/code/a1/use")

        assert client.get("/referral-codes/statistics").json() == {
            "totalCodes": 2,
            "activeCodes": 1,
            "inactiveCodes": 1,
            "totalUsage": 1,
        }

    def test_initialize_is_idempotent(self, client):
        first = client.post("/referral-codes/initialize").json()
        second = client.post("/referral-codes/initialize").json()

        assert len(first["created"]) == 7
        assert second["created"] == []
        assert len(client.get("/referral-codes").json()) == 7


def test_startup_seeding(session):
    """Startup hook seeds the default codes once."""
    from src.main import seed_default_referral_codes
    from src.services.referral_code_service import referral_code_service

    assert len(seed_default_referral_codes()) == 7
    assert seed_default_referral_codes() == []
    assert referral_code_service.is_valid(session, "neha226100") is True


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == "healthy"
