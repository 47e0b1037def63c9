"""HTTP-level tests for the API routers, with the upstream client and DB overridden."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from app.database import get_db
from app.main import app
from app.schemas.pass_request import PassRequest, Visitor
from app.schemas.reference import MainCategory, PassTypeItem
from app.services.pass_api_client import AuthExpiredError, PassApiError, get_pass_api_client


def make_requests(count=25):
    return [
        PassRequest(
            id=f"r-{i}", request_id=f"REQ-{i:03d}", status="routed_for_approval", routed_by="hod-1",
            main_category_id="c-1", purpose="Budget session" if i else "Press coverage",
            valid_from=datetime(2024, 3, 5, 9, 0),
            visitors=[Visitor(id=f"v-{i}", first_name="Guest", last_name=str(i),
                              visitor_status="approved", pass_type_id="pt-1")],
        )
        for i in range(count)
    ]


@pytest.fixture
def upstream():
    client = AsyncMock()
    client.get_main_categories.return_value = [MainCategory(id="c-1", name="Department")]
    client.get_all_pass_types.return_value = [PassTypeItem(id="pt-1", name="Daily Pass")]
    client.get_sessions.return_value = []
    client.get_issuers.return_value = []
    client.get_users_by_role.return_value = []
    client.get_all_pass_requests.return_value = make_requests()
    return client


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def api(upstream, db):
    app.dependency_overrides[get_pass_api_client] = lambda: upstream
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestVisitorList:
    def test_first_page(self, api):
        body = api.get("/api/v1/visitors").json()
        assert len(body["rows"]) == 20
        assert body["total"] == 25
        assert body["has_more"] is True
        assert body["next_displayed"] == 25
        assert body["stats"]["routed"] == 25

    def test_load_more(self, api):
        body = api.get("/api/v1/visitors", params={"displayed": 25}).json()
        assert len(body["rows"]) == 25
        assert body["has_more"] is False

    def test_search_and_stats_cover_all_rows(self, api):
        body = api.get("/api/v1/visitors", params={"search": "press"}).json()
        assert [row["request_id"] for row in body["rows"]] == ["REQ-000"]
        assert body["stats"]["total"] == 25

    def test_unknown_status_is_rejected(self, api):
        assert api.get("/api/v1/visitors", params={"status": "archived"}).status_code == 422

    def test_assigned_to_me_needs_user(self, api):
        resp = api.get("/api/v1/visitors", params={"status": "assigned_to_me"})
        assert resp.status_code == 422

    def test_requests_are_grouped(self, api):
        body = api.get("/api/v1/requests", params={"search": "REQ-001"}).json()
        assert body["total"] == 1
        assert body["requests"][0]["request"]["request_id"] == "REQ-001"

    def test_stats_endpoint(self, api):
        assert api.get("/api/v1/visitors/stats").json()["routed"] == 25


class TestReference:
    def test_failure_returns_empty_list(self, api, upstream):
        upstream.get_all_pass_types.side_effect = PassApiError("down", 503)
        resp = api.get("/api/v1/reference/pass-types")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_categories(self, api):
        assert api.get("/api/v1/reference/categories").json()[0]["name"] == "Department"


class TestActions:
    def test_reject_without_reason_is_422(self, api, upstream):
        resp = api.post("/api/v1/actions/visitors/v-1/decision",
                        json={"status": "rejected", "acting_user_id": "u-1"})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Please provide a reason for rejection."
        upstream.update_visitor_status.assert_not_called()

    def test_approve(self, api, upstream, db):
        upstream.update_visitor_status.return_value = {"ok": True}
        resp = api.post("/api/v1/actions/visitors/v-1/decision",
                        json={"status": "approved", "acting_user_id": "u-1"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "approved"
        db.add.assert_called_once()

    def test_upstream_failure_is_502(self, api, upstream):
        upstream.activate_visitor.side_effect = PassApiError("Visitor is not suspended", 400)
        resp = api.post("/api/v1/actions/visitors/v-1/activate", json={"activated_by": "u-1"})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Visitor is not suspended"

    def test_expired_token_is_401(self, api, upstream):
        upstream.resend_whatsapp.side_effect = AuthExpiredError("Could not validate credentials", 401)
        resp = api.post("/api/v1/actions/requests/r-1/visitors/v-1/resend-whatsapp")
        assert resp.status_code == 401


class TestPassForms:
    def test_empty_draft_is_invalid(self, api):
        body = api.post("/api/v1/pass-requests/validate", json={}).json()
        assert body["valid"] is False
        assert body["errors"]["pass_category"] == "Pass category is required"
        assert body["errors"]["form"] == "At least one visitor is required"


class TestRequestStatusRoute:
    def test_forward_request(self, api, upstream, db):
        resp = api.post("/api/v1/actions/requests/r-1/status",
                        json={"status": "routed_for_approval", "current_user_id": "hod-1", "routed_by": "hod-1"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "routed_for_approval"
        upstream.update_pass_request_status.assert_awaited_once()
        db.add.assert_called_once()

    def test_unknown_status_is_rejected(self, api, upstream):
        resp = api.post("/api/v1/actions/requests/r-1/status",
                        json={"status": "archived", "current_user_id": "hod-1"})
        assert resp.status_code == 422
        upstream.update_pass_request_status.assert_not_called()
