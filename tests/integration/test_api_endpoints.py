"""
Integration tests for FastAPI endpoints.
Validates auth, status codes and response structure against a fake Xano client.
"""
import pytest
from unittest.mock import patch, AsyncMock
from fastapi import Depends
from fastapi.testclient import TestClient

from src.core.config import settings
from src.core.database import get_db
from src.web.app import app
from src.web.dependencies import get_auth_token, get_xano_client

AUTH = {"Authorization": "Bearer user-token"}


@pytest.fixture
def api_client():
    return TestClient(app)


@pytest.fixture
def use_xano(fake_xano):
    """Route every request through a FakeXanoClient; returns the client for assertions."""
    def _install(**overrides):
        client = fake_xano(**overrides)

        async def _override(token: str = Depends(get_auth_token)):
            client.token = token
            yield client

        async def _db():
            yield AsyncMock()

        app.dependency_overrides[get_xano_client] = _override
        app.dependency_overrides[get_db] = _db
        return client

    yield _install
    app.dependency_overrides.clear()


class TestAuth:

    def test_missing_token_is_401(self, api_client, use_xano):
        use_xano()
        response = api_client.get("/api/sectors/12/companies")
        assert response.status_code == 401

    def test_cookie_token(self, api_client, use_xano):
        client = use_xano()
        response = api_client.get(
            "/api/sectors/12/sub-sectors",
            headers={"Cookie": f"{settings.auth_cookie_name}=abc"},
        )
        assert response.status_code == 200
        assert client.token == "abc"

    def test_bearer_token(self, api_client, use_xano):
        client = use_xano()
        response = api_client.get("/api/sectors/12/sub-sectors", headers=AUTH)
        assert response.status_code == 200
        assert client.token == "user-token"


class TestSectorEndpoints:

    @patch("src.web.routers.sectors.set_cached_overview", new_callable=AsyncMock)
    @patch("src.web.routers.sectors.get_cached_overview", new_callable=AsyncMock, return_value=None)
    def test_overview_live(self, mock_get, mock_set, api_client, use_xano):
        use_xano()
        response = api_client.get("/api/sectors/12/overview", headers=AUTH)
        assert response.status_code == 200
        data = response.json()
        assert data["from_cache"] is False
        assert data["summary"]["name"] == "Data & Analytics"
        assert [c["company_type"] for c in data["companies"]] == [
            "public", "private_equity_owned", "venture_capital_backed", "private",
        ]
        assert data["company_counts"]["public"] == 1
        assert {w["name"] for w in data["widgets"]} == {"overview", "sector", "recent"}
        mock_set.assert_awaited_once()

    @patch("src.web.routers.sectors.set_cached_overview", new_callable=AsyncMock)
    @patch("src.web.routers.sectors.get_cached_overview", new_callable=AsyncMock)
    def test_overview_from_cache(self, mock_get, mock_set, api_client, use_xano, payloads):
        mock_get.return_value = {
            "overview": payloads["overview"], "sector": payloads["sector"], "recent": payloads["recent"],
        }
        client = use_xano()
        response = api_client.get("/api/sectors/12/overview", headers=AUTH)
        assert response.status_code == 200
        assert response.json()["from_cache"] is True
        assert client.calls == []
        mock_set.assert_not_awaited()

    @patch("src.web.routers.sectors.set_cached_overview", new_callable=AsyncMock)
    @patch("src.web.routers.sectors.get_cached_overview", new_callable=AsyncMock, return_value=None)
    def test_overview_partial_still_renders(self, mock_get, mock_set, api_client, use_xano, upstream_error):
        use_xano(recent=upstream_error(500))
        response = api_client.get("/api/sectors/12/overview", headers=AUTH)
        assert response.status_code == 200
        data = response.json()
        assert data["recent_transactions"] == []
        failed = [w for w in data["widgets"] if not w["ok"]]
        assert [(w["name"], w["status_code"]) for w in failed] == [("recent", 500)]

    @patch("src.web.routers.sectors.set_cached_overview", new_callable=AsyncMock)
    @patch("src.web.routers.sectors.get_cached_overview", new_callable=AsyncMock, return_value=None)
    def test_overview_rejected_token(self, mock_get, mock_set, api_client, use_xano, upstream_error):
        error = upstream_error(401)
        use_xano(overview=error, sector=error, recent=error)
        response = api_client.get("/api/sectors/12/overview", headers=AUTH)
        assert response.status_code == 401
        mock_set.assert_not_awaited()

    def test_companies_envelope(self, api_client, use_xano):
        use_xano()
        response = api_client.get("/api/sectors/12/companies?page=2&per_page=3", headers=AUTH)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert (data["total"], data["page"], data["per_page"], data["page_total"]) == (42, 2, 3, 14)
        assert [c["name"] for c in data["data"]] == ["Acme", "Beta", "Gamma"]

    def test_companies_type_filter(self, api_client, use_xano):
        client = use_xano()
        response = api_client.get(
            "/api/sectors/12/companies?page=2&per_page=3&company_type=public", headers=AUTH
        )
        assert response.status_code == 200
        data = response.json()
        assert [c["name"] for c in data["data"]] == ["Acme"]
        assert (data["total"], data["page_total"]) == (4, 2)
        assert client.calls == [("filtered_companies", 12, 2, 3, [7])]

    def test_companies_bad_type(self, api_client, use_xano):
        use_xano()
        response = api_client.get("/api/sectors/12/companies?company_type=unicorn", headers=AUTH)
        assert response.status_code == 422

    def test_companies_upstream_failure(self, api_client, use_xano, upstream_error):
        use_xano(companies=upstream_error(500))
        response = api_client.get("/api/sectors/12/companies", headers=AUTH)
        assert response.status_code == 502

    def test_sub_sectors(self, api_client, use_xano):
        use_xano()
        response = api_client.get("/api/sectors/12/sub-sectors", headers=AUTH)
        data = response.json()
        assert data["total"] == 2
        assert data["data"][0] == {"id": 31, "sector_name": "Market Data", "importance": "Secondary"}


class TestWarmTrigger:

    @patch("src.web.routers.sectors.run_sector_warm", new_callable=AsyncMock, return_value=[])
    def test_open_when_no_secret(self, mock_warm, api_client):
        with patch.object(settings, "cron_secret", None):
            response = api_client.post("/api/sectors/warm")
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        mock_warm.assert_awaited_once()

    @patch("src.web.routers.sectors.run_sector_warm", new_callable=AsyncMock, return_value=[])
    def test_secret_enforced(self, mock_warm, api_client):
        with patch.object(settings, "cron_secret", "s3cret"):
            denied = api_client.post("/api/sectors/warm", headers={"Authorization": "Bearer wrong"})
            allowed = api_client.post("/api/sectors/warm", headers={"Authorization": "Bearer s3cret"})
        assert denied.status_code == 401
        assert allowed.status_code == 200
        mock_warm.assert_awaited_once()


class TestCorporateEventEndpoint:

    def test_event_detail(self, api_client, use_xano):
        use_xano()
        response = api_client.get("/api/corporate-events/501", headers=AUTH)
        assert response.status_code == 200
        data = response.json()
        assert data["buyer_label"] == "Buyer(s)"
        assert [p["name"] for p in data["sellers"]] == ["Seller Group"]
        assert [i["id"] for i in data["related_insights"]] == [2]
        assert data["advisors"][0]["advising"]["name"] == "Big Co"

    def test_event_not_found(self, api_client, use_xano, upstream_error):
        use_xano(event=upstream_error(404))
        response = api_client.get("/api/corporate-events/501", headers=AUTH)
        assert response.status_code == 404

    def test_event_rejected_token(self, api_client, use_xano, upstream_error):
        use_xano(event=upstream_error(403))
        response = api_client.get("/api/corporate-events/501", headers=AUTH)
        assert response.status_code == 401


def test_health(api_client):
    assert api_client.get("/health").json() == {"status": "ok"}
