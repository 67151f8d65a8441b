"""
Tests for the HTTP routes using FastAPI's TestClient with overridden dependencies.
"""
from __future__ import annotations

import random
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from campaign_scout.api.dependencies import (
    get_campaign_storage,
    get_research_orchestrator,
    get_songstats_service,
    get_tracklists_service,
)
from campaign_scout.core.exceptions import DatabaseError
from campaign_scout.main import app
from campaign_scout.services.fallback_svc import FallbackGenerator
from campaign_scout.services.research_logic import ResearchOrchestrator
from campaign_scout.storage.campaign_storage import CampaignStorage

TRACK_URL = "https://open.spotify.com/track/2Fxmhks0bxGSBdJ92vM42m"


@pytest.fixture
def songstats():
    service = Mock()
    service.is_configured = Mock(return_value=False)
    service.check_configuration = Mock(
        return_value={"configured": False, "valid": False, "message": "API key is not configured"}
    )
    service.call = AsyncMock(return_value={"plays": []})
    return service


@pytest.fixture
def tracklists():
    service = Mock()
    service.search_by_isrc = AsyncMock(return_value=None)
    service.call = AsyncMock(return_value={"error": "API key not configured or invalid", "status": None, "details": ""})
    return service


@pytest.fixture
def storage():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield CampaignStorage(storage_dir=Path(tmpdir))


@pytest.fixture
def client(songstats, tracklists, storage):
    orchestrator = ResearchOrchestrator(songstats, tracklists, FallbackGenerator(rng=random.Random(5)))
    app.dependency_overrides[get_research_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_campaign_storage] = lambda: storage
    app.dependency_overrides[get_songstats_service] = lambda: songstats
    app.dependency_overrides[get_tracklists_service] = lambda: tracklists
    yield TestClient(app)
    app.dependency_overrides.clear()


def research_body(**overrides):
    body = {
        "campaign_name": "Summer Single",
        "reference_inputs": [TRACK_URL, "", "USZ4V2500091"],
        "selected_verticals": ["press", "dj"],
    }
    body.update(overrides)
    return body


def test_root_and_health(client):
    assert client.get("/").status_code == 200

    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert set(data["providers"]) == {"songstats", "tracklists", "google_sheets"}


def test_research_persists_and_returns_results(client):
    response = client.post("/api/research", json=research_body())

    assert response.status_code == 200
    data = response.json()
    assert data["campaign_id"]
    assert [item["input_index"] for item in data["normalized_inputs"]] == [0, 2]
    assert data["results"]["press_results"]
    assert data["results"]["dj_results"]
    assert data["using_mock_data"] is True

    saved = client.get(f"/api/campaigns/{data['campaign_id']}")
    assert saved.status_code == 200
    assert saved.json()["campaign"]["name"] == "Summer Single"
    assert len(saved.json()["results"]["press_results"]) == len(data["results"]["press_results"])


@pytest.mark.parametrize(
    "overrides",
    [
        {"campaign_name": "   "},
        {"reference_inputs": ["", "  "]},
        {"reference_inputs": ["https://www.youtube.com/watch?v=dQw4w9WgXcQ"]},
        {"reference_inputs": ["USZ4V2500091"] * 11},
        {"selected_verticals": []},
        {"selected_verticals": ["television"]},
    ],
)
def test_invalid_submissions_are_rejected(client, overrides):
    response = client.post("/api/research", json=research_body(**overrides))

    assert response.status_code == 422


def test_storage_failure_is_a_warning(client, storage):
    storage.save_campaign = Mock(side_effect=DatabaseError("disk full"))

    response = client.post("/api/research", json=research_body())

    assert response.status_code == 200
    data = response.json()
    assert data["campaign_id"] is None
    assert any("could not be saved" in warning for warning in data["warnings"])


def test_campaign_not_found(client):
    assert client.get("/api/campaigns/does-not-exist").status_code == 404


def test_campaign_listing(client):
    client.post("/api/research", json=research_body())

    response = client.get("/api/campaigns")

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Summer Single"


def test_filter_endpoint(client):
    body = {
        "results": {
            "dsp_results": [
                {"id": "a", "playlist_name": "Small", "follower_count": 10, "last_updated": "2025-01-01",
                 "playlist_url": "u", "matched_inputs": [0], "vertical": "dsp"},
                {"id": "b", "playlist_name": "Big", "follower_count": 5000, "last_updated": "2025-01-01",
                 "playlist_url": "u", "matched_inputs": [0], "vertical": "dsp"},
            ],
            "radio_results": [
                {"id": "r", "station": "KEXP", "last_spin": "2025-01-01", "matched_inputs": [0], "vertical": "radio"}
            ],
        },
        "options": {"min_followers": 1000, "verticals": ["dsp"]},
    }

    response = client.post("/api/filter", json=body)

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data["dsp_results"]] == ["b"]
    assert data["radio_results"] == []


def test_relay_endpoints(client, songstats, tracklists):
    relayed = client.post("/api/relay/songstats", json={"path": "tracks/radio", "params": {"isrc": "USZ4V2500091"}})
    failed = client.post("/api/relay/tracklists", json={"path": "search", "params": {"isrc": "USZ4V2500091"}})
    status = client.get("/api/relay/songstats/status")

    assert relayed.status_code == 200
    assert relayed.json() == {"plays": []}
    songstats.call.assert_awaited_once_with("tracks/radio", {"isrc": "USZ4V2500091"})
    assert failed.status_code == 200
    assert failed.json()["error"] == "API key not configured or invalid"
    assert status.json()["configured"] is False


def test_unhandled_errors_use_global_handler(songstats, tracklists, storage):
    broken = Mock()
    broken.execute_research = AsyncMock(side_effect=RuntimeError("unexpected"))
    app.dependency_overrides[get_research_orchestrator] = lambda: broken
    app.dependency_overrides[get_campaign_storage] = lambda: storage
    try:
        response = TestClient(app, raise_server_exceptions=False).post("/api/research", json=research_body())
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["status"] == "error"
    assert "msg" in response.json()
