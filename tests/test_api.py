"""
Tests for the HTTP API
"""

import asyncio
import base64

import pytest
from fastapi.testclient import TestClient

from carousel import routes
from carousel.config import Settings
from carousel.main import app

DOCUMENT = "# Hello\n\nWorld\n\n## Point\n\nBody with **bold** text"


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def no_avatar(monkeypatch):
    """Skip avatar downloads."""
    async def fake_load_avatar(url, settings=None, client=None):
        return None
    monkeypatch.setattr(routes, "load_avatar", fake_load_avatar)


class TestHealth:
    """Tests for the health and fallback routes."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["engine"] == "carousel-renderer"
        assert "X-Request-ID" in response.headers

    def test_unknown_route(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"
        assert "POST /api/generate-carousel" in response.json()["availableEndpoints"]


class TestGenerateCarousel:
    """Tests for POST /api/generate-carousel."""

    def test_missing_text(self, client):
        response = client.post("/api/generate-carousel", json={})
        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INVALID_INPUT"
        assert data["details"]["errors"] == ["Text is required and must be a string"]
        assert data["requestId"] == response.headers["X-Request-ID"]

    def test_non_string_text(self, client):
        response = client.post("/api/generate-carousel", json={"text": 42})
        assert response.status_code == 400

    def test_bad_brand_color(self, client):
        response = client.post("/api/generate-carousel", json={"text": DOCUMENT, "settings": {"brandColor": "blue"}})
        assert response.status_code == 400
        assert "brandColor must be in #RRGGBB format" in response.json()["details"]["errors"]

    def test_malformed_body(self, client):
        response = client.post(
            "/api/generate-carousel",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_success(self, client, no_avatar):
        response = client.post("/api/generate-carousel", json={
            "text": DOCUMENT,
            "settings": {"brandColor": "#FF5733", "authorUsername": "@me", "avatarUrl": "https://example.com/a.png"},
        })
        assert response.status_code == 200
        data = response.json()

        assert [s["type"] for s in data["slides"]] == ["intro", "text"]
        assert data["slides"][0] == {"type": "intro", "title": "Hello", "text": "World", "color": "accent"}
        assert len(data["images"]) == 2
        assert base64.b64decode(data["images"][0]).startswith(b"\x89PNG")

        metadata = data["metadata"]
        assert metadata["totalSlides"] == 2
        assert metadata["settings"]["avatarUrl"] == "[PROVIDED]"
        assert metadata["settings"]["brandColor"] == "#FF5733"
        assert set(metadata["performance"]) == {"parseTime", "renderTime", "avgSlideSize", "slidesPerSecond"}

    def test_final_slide(self, client, no_avatar):
        response = client.post("/api/generate-carousel", json={
            "text": "## Only",
            "settings": {"finalSlide": {"enabled": True, "type": "brand"}},
        })
        assert response.status_code == 200
        slides = response.json()["slides"]
        assert len(slides) == 2
        assert slides[-1]["title"] == "Thanks for reading!"

    def test_fallback_slide(self, client, no_avatar):
        response = client.post("/api/generate-carousel", json={"text": "Plain text without headings"})
        assert response.status_code == 200
        slides = response.json()["slides"]
        assert slides == [{
            "type": "text",
            "title": "Your content",
            "text": "Plain text without headings",
            "color": "default",
        }]

    def test_too_many_slides(self, client, no_avatar, monkeypatch):
        monkeypatch.setattr(routes, "get_settings", lambda: Settings(max_slides=1))
        response = client.post("/api/generate-carousel", json={"text": DOCUMENT})
        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "TEXT_TOO_LONG"
        assert data["details"] == {"slidesGenerated": 2, "maxAllowed": 1}

    def test_timeout_counts_from_request_start(self, client, monkeypatch):
        """Time spent loading the avatar counts against the request timeout."""
        async def slow_load_avatar(url, settings=None, client=None):
            await asyncio.sleep(0.2)
            return None

        monkeypatch.setattr(routes, "load_avatar", slow_load_avatar)
        monkeypatch.setattr(routes, "get_settings", lambda: Settings(request_timeout=0.1))
        response = client.post("/api/generate-carousel", json={"text": DOCUMENT})
        assert response.status_code == 408
        assert response.json()["code"] == "TIMEOUT_ERROR"
