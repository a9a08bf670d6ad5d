import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from pinscope.aspect import build_dimensions
from pinscope.browser.models import PinImage
from pinscope.security import rate_limiter
from pinscope.server import app


def sample_images():
    return [
        PinImage(url="https://i.pinimg.com/736x/1.jpg", alt="one", dimensions=build_dimensions(500, 500)),
        PinImage(url="https://i.pinimg.com/736x/2.jpg", dimensions=build_dimensions(236, 420)),
        PinImage(url="https://i.pinimg.com/736x/3.jpg", dimensions=build_dimensions(236, 400)),
        PinImage(url="https://i.pinimg.com/736x/4.jpg", dimensions=build_dimensions(0, 0)),
    ]


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def mock_scrape():
    with patch("pinscope.api.scrape_pinterest", new=AsyncMock(return_value=sample_images())) as mock:
        yield mock


class TestRoot:
    def test_describes_service(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["endpoints"] == {
            "search": "/api/search?q={query}&limit={number}",
            "health": "/api/health",
        }
        assert data["example"] == "/api/search?q=nature&limit=50"
        assert data["features"]


class TestHealth:
    def test_inactive_browser(self, client):
        with patch("pinscope.api.browser_manager") as manager:
            manager.is_active = False
            resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "OK"
        assert data["browserStatus"] == "Inactive"
        assert data["uptime"] >= 0
        assert data["timestamp"].endswith("Z")

    def test_active_browser(self, client):
        with patch("pinscope.api.browser_manager") as manager:
            manager.is_active = True
            resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["browserStatus"] == "Active"


class TestSearchValidation:
    def test_missing_query(self, client, mock_scrape):
        resp = client.get("/api/search")
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "error": 'Query parameter "q" is required',
            "example": "/api/search?q=nature&limit=50",
        }
        mock_scrape.assert_not_awaited()

    def test_empty_query(self, client, mock_scrape):
        resp = client.get("/api/search", params={"q": ""})
        assert resp.status_code == 400
        assert resp.json()["error"] == 'Query parameter "q" is required'

    def test_limit_over_max(self, client, mock_scrape):
        resp = client.get("/api/search", params={"q": "nature", "limit": 101})
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "error": "Maximum limit is 100 images per request",
        }
        mock_scrape.assert_not_awaited()

    @pytest.mark.parametrize("limit", ["abc", "0", "-5", "2.5"])
    def test_invalid_limit(self, client, mock_scrape, limit):
        resp = client.get("/api/search", params={"q": "nature", "limit": limit})
        assert resp.status_code == 400
        assert resp.json()["error"] == 'Parameter "limit" must be a positive integer'

    def test_long_query_is_allowed(self, client, mock_scrape):
        query = "sunset " * 200
        resp = client.get("/api/search", params={"q": query})
        assert resp.status_code == 200
        mock_scrape.assert_awaited_once_with(query, 50)

    def test_limit_at_max_is_allowed(self, client, mock_scrape):
        resp = client.get("/api/search", params={"q": "nature", "limit": 100})
        assert resp.status_code == 200
        mock_scrape.assert_awaited_once_with("nature", 100)


class TestSearch:
    def test_success_envelope(self, client, mock_scrape):
        resp = client.get("/api/search", params={"q": "nature", "limit": 10})
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["query"] == "nature"
        assert data["limit"] == 10
        assert data["count"] == len(data["data"]) == 4
        assert data["responseTime"].endswith("ms")
        assert data["data"][0] == {
            "url": "https://i.pinimg.com/736x/1.jpg",
            "alt": "one",
            "title": "",
            "dimensions": {
                "width": 500,
                "height": 500,
                "aspectRatio": "1.00",
                "category": "Square (1:1)",
            },
        }
        mock_scrape.assert_awaited_once_with("nature", 10)

    def test_stats_sum_to_count(self, client, mock_scrape):
        data = client.get("/api/search", params={"q": "nature"}).json()
        assert data["aspectRatioStats"] == {"Square (1:1)": 1, "Portrait": 2, "unknown": 1}
        assert sum(data["aspectRatioStats"].values()) == data["count"]

    def test_default_limit(self, client, mock_scrape):
        data = client.get("/api/search", params={"q": "nature"}).json()
        assert data["limit"] == 50
        mock_scrape.assert_awaited_once_with("nature", 50)

    def test_no_results(self, client):
        with patch("pinscope.api.scrape_pinterest", new=AsyncMock(return_value=[])):
            data = client.get("/api/search", params={"q": "zzzz"}).json()
        assert data["count"] == 0
        assert data["data"] == []
        assert data["aspectRatioStats"] == {}

    def test_scrape_failure(self, client):
        error = TimeoutError('Timeout 10000ms exceeded waiting for "[data-test-id=\\"pin\\"]"')
        with patch("pinscope.api.scrape_pinterest", new=AsyncMock(side_effect=error)):
            resp = client.get("/api/search", params={"q": "nature"})
        assert resp.status_code == 500
        data = resp.json()
        assert data["success"] is False
        assert data["error"] == "Failed to fetch data from Pinterest"
        assert "Timeout 10000ms exceeded" in data["message"]
        assert "timestamp" in data


class TestErrorEnvelopes:
    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        data = resp.json()
        assert data["success"] is False
        assert data["error"] == "Endpoint not found"
        assert "GET /api/health" in data["availableEndpoints"]

    def test_wrong_method(self, client):
        resp = client.post("/api/search")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Endpoint not found"

    def test_unhandled_error(self, client):
        with patch("pinscope.api.process_uptime", side_effect=RuntimeError("boom")):
            resp = client.get("/api/health")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Internal Server Error"


class TestRateLimit:
    def test_api_limited_per_ip(self, client):
        with patch.object(rate_limiter, "limit", 3):
            codes = [client.get("/api/health").status_code for _ in range(4)]
        assert codes == [200, 200, 200, 429]

    def test_root_not_limited(self, client):
        with patch.object(rate_limiter, "limit", 1):
            codes = [client.get("/").status_code for _ in range(3)]
        assert codes == [200, 200, 200]

    def test_forwarded_header_does_not_bypass_limit(self, client):
        with patch.object(rate_limiter, "limit", 3):
            codes = [
                client.get("/api/health", headers={"X-Forwarded-For": f"10.9.9.{i}"}).status_code
                for i in range(6)
            ]
        assert codes == [200, 200, 200, 429, 429, 429]
        assert rate_limiter.tracked_ips == 1
