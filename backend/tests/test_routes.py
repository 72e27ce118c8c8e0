"""Tests for HTTP routes using FastAPI TestClient."""

import uuid

from contact_intel.config import Settings


def _create(client, **fields):
    payload = {"name": "Jo", "email": "A@B.com", "phone": "123-456-7890", **fields}
    response = client.post("/api/contacts", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestRootAndHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Smart Contact Intelligence API"

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["database"] == "Connected"
        assert "timestamp" in data

    def test_unknown_route(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {"message": "Route not found", "path": "/api/nope"}

    def test_security_headers(self, client):
        response = client.get("/")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestCreateContact:
    def test_creates_and_scores(self, client):
        data = _create(client)
        assert data["email"] == "a@b.com"
        assert data["score"] == 85
        assert data["category"] == "Lead"
        assert data["priority"] == "Medium"
        assert "createdAt" in data
        assert "updatedAt" in data
        uuid.UUID(data["id"])

    def test_client_score_ignored(self, client):
        data = _create(client, score=100)
        assert data["score"] == 85

    def test_validation_errors(self, client):
        response = client.post("/api/contacts", json={"name": "", "email": "bad", "phone": "123"})
        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"] == {
            "name": "Name is required",
            "email": "Invalid email format",
            "phone": "Phone must be at least 10 digits",
        }

    def test_non_object_body_rejected(self, client):
        response = client.post("/api/contacts", json=["Jo"])
        assert response.status_code == 422


class TestReadContacts:
    def test_list_and_get(self, client):
        created = _create(client)
        listed = client.get("/api/contacts").json()
        assert [c["id"] for c in listed] == [created["id"]]

        response = client.get(f"/api/contacts/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Jo"

    def test_filter_and_sort(self, client):
        _create(client, name="Zed", category="Vendor")
        _create(client, name="Amy", category="Vendor")
        _create(client, name="Bea", category="Client")
        response = client.get("/api/contacts", params={"category": "Vendor", "sort": "name"})
        assert [c["name"] for c in response.json()] == ["Amy", "Zed"]

    def test_bad_sort(self, client):
        response = client.get("/api/contacts", params={"sort": "phone"})
        assert response.status_code == 400

    def test_get_missing(self, client):
        response = client.get(f"/api/contacts/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["message"] == "Contact not found"

    def test_get_invalid_id(self, client):
        response = client.get("/api/contacts/not-an-id")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID"

    def test_summary(self, client):
        _create(client)
        _create(client, name="Bo")
        assert client.get("/api/contacts/stats/summary").json() == {"total": 2}


class TestUpdateContact:
    def test_full_update(self, client):
        created = _create(client)
        response = client.put(
            f"/api/contacts/{created['id']}",
            json={
                "name": "Jo",
                "email": "jo@b.com",
                "phone": "123-456-7890",
                "message": "Now a customer",
                "category": "Client",
                "priority": "High",
                "score": 0,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created["id"]
        assert data["category"] == "Client"
        assert data["score"] == 100

    def test_update_validation_error(self, client):
        created = _create(client)
        response = client.put(
            f"/api/contacts/{created['id']}",
            json={"name": "Jo", "email": "jo@b.com", "phone": "123", "priority": "Urgent"},
        )
        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"phone", "priority"}

    def test_update_missing(self, client):
        response = client.put(
            f"/api/contacts/{uuid.uuid4()}",
            json={"name": "Jo", "email": "jo@b.com", "phone": "1234567890"},
        )
        assert response.status_code == 404


class TestDeleteContact:
    def test_delete(self, client):
        created = _create(client)
        response = client.delete(f"/api/contacts/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Contact deleted successfully"}
        assert client.get(f"/api/contacts/{created['id']}").status_code == 404

    def test_delete_missing(self, client):
        assert client.delete(f"/api/contacts/{uuid.uuid4()}").status_code == 404

    def test_delete_invalid_id(self, client):
        assert client.delete("/api/contacts/123").status_code == 400


class TestScorePreview:
    def test_valid_preview(self, client, valid_fields):
        response = client.post("/api/contacts/preview", json=valid_fields)
        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "rubric": "completeness",
            "score": 100,
            "insight": {"label": "Professional Lead", "priority": "High"},
            "errors": {},
        }

    def test_partial_form_preview(self, client):
        response = client.post("/api/contacts/preview", json={"name": "Jo", "email": "jo@"})
        data = response.json()
        assert data["valid"] is False
        assert data["score"] == 35
        assert data["insight"] == {"label": "Casual", "priority": "Low"}
        assert set(data["errors"]) == {"email", "phone"}

    def test_engagement_rubric(self, client, valid_fields):
        response = client.post("/api/contacts/preview", params={"rubric": "engagement"}, json=valid_fields)
        assert response.json()["score"] == 100
        assert response.json()["rubric"] == "engagement"

    def test_unknown_rubric(self, client, valid_fields):
        response = client.post("/api/contacts/preview", params={"rubric": "ml"}, json=valid_fields)
        assert response.status_code == 400

    def test_preview_does_not_persist(self, client, valid_fields):
        client.post("/api/contacts/preview", json=valid_fields)
        assert client.get("/api/contacts/stats/summary").json() == {"total": 0}

    def test_blank_enums_default_on_partial_form(self, client):
        fields = {"name": "Jo", "email": "jo@x.com", "phone": "1234567890", "category": "", "priority": None}
        valid = client.post("/api/contacts/preview", json=fields).json()
        partial = client.post("/api/contacts/preview", json={**fields, "phone": "123"}).json()
        assert valid["valid"] is True
        assert valid["score"] == 85
        assert partial["valid"] is False
        # Only the 25-point phone component is lost
        assert partial["score"] == 60


class TestLengthLimits:
    def test_long_name_rejected_with_field_error(self, client):
        response = client.post(
            "/api/contacts",
            json={"name": "N" * 300, "email": "a@b.com", "phone": "1234567890" + " " * 60},
        )
        assert response.status_code == 422
        assert response.json()["errors"] == {
            "name": "Name must be at most 255 characters",
            "phone": "Phone must be at most 50 characters",
        }
        assert client.get("/api/contacts/stats/summary").json() == {"total": 0}


class TestRateLimiterScope:
    def test_create_app_leaves_limiter_alone(self, tmp_path):
        from contact_intel.main import create_app
        from contact_intel.rate_limit import limiter

        before = limiter.enabled
        create_app(Settings(run_migrations=False, rate_limit_enabled=not before, log_dir=str(tmp_path)))
        assert limiter.enabled is before


class TestConfiguredRubric:
    def test_persisted_score_uses_configured_rubric(self, db_session, tmp_path):
        from fastapi.testclient import TestClient

        from contact_intel.database.base import get_db
        from contact_intel.main import create_app

        app = create_app(
            Settings(run_migrations=False, score_rubric="engagement", log_dir=str(tmp_path))
        )
        app.dependency_overrides[get_db] = lambda: db_session
        with TestClient(app) as client:
            data = _create(client)
        assert data["score"] == 80
