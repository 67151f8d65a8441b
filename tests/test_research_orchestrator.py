"""
Tests for ResearchOrchestrator with mocked provider services.
"""
from __future__ import annotations

import random
from unittest.mock import AsyncMock, Mock

import pytest

from campaign_scout.core.exceptions import ValidationError
from campaign_scout.domain.models import Vertical
from campaign_scout.services.fallback_svc import FallbackGenerator
from campaign_scout.services.research_logic import ResearchOrchestrator

TRACK_URL = "https://open.spotify.com/track/2Fxmhks0bxGSBdJ92vM42m"


@pytest.fixture
def mock_services():
    songstats = Mock()
    songstats.is_configured = Mock(return_value=True)
    songstats.check_configuration = Mock(
        return_value={"configured": True, "valid": True, "message": "API key is configured properly"}
    )
    songstats.resolve_songstats_id = AsyncMock(return_value="ss-1")
    songstats.resolve_isrc = AsyncMock(return_value="USABC2400001")
    songstats.get_playlists = AsyncMock(
        return_value={"playlists": [{"spotifyid": "pl1", "name": "Fresh Finds", "followers": 1000}]}
    )
    songstats.get_radio_plays = AsyncMock(
        return_value={"plays": [{"station_id": "kexp", "station": "KEXP", "date": "2024-06-01"}]}
    )

    tracklists = Mock()
    tracklists.search_by_isrc = AsyncMock(return_value=None)

    return {"songstats": songstats, "tracklists": tracklists}


@pytest.fixture
def orchestrator(mock_services):
    return ResearchOrchestrator(
        songstats=mock_services["songstats"],
        tracklists=mock_services["tracklists"],
        fallback=FallbackGenerator(rng=random.Random(11)),
    )


@pytest.mark.asyncio
async def test_dsp_and_radio_scenario(orchestrator, mock_services):
    response = await orchestrator.execute_research([TRACK_URL, "", "USZ4V2500091"], [Vertical.DSP, Vertical.RADIO])

    assert [item.input_index for item in response.normalized_inputs] == [0, 2]
    assert [r.id for r in response.results.dsp_results] == ["pl1"]
    assert response.results.dsp_results[0].matched_inputs == [0]
    assert response.results.radio_results[0].matched_inputs == [0, 2]
    assert response.results.dj_results == []
    assert response.results.press_results == []
    assert response.using_mock_data is False
    assert response.campaign_id is None
    assert mock_services["songstats"].get_radio_plays.await_count == 2


@pytest.mark.asyncio
async def test_press_only_run_uses_demo_data(orchestrator, mock_services):
    mock_services["songstats"].is_configured.return_value = False

    response = await orchestrator.execute_research(["USZ4V2500091"], [Vertical.PRESS])

    assert response.results.press_results
    for entry in response.results.press_results:
        assert entry.vertical == "press"
        assert entry.matched_inputs == [0]
    assert response.using_mock_data is True
    assert response.results.dsp_results == []


@pytest.mark.asyncio
async def test_one_failing_vertical_does_not_block_others(orchestrator, mock_services):
    orchestrator.fetchers[Vertical.DSP].fetch = AsyncMock(side_effect=RuntimeError("provider exploded"))

    response = await orchestrator.execute_research([TRACK_URL], [Vertical.DSP, Vertical.RADIO])

    assert response.results.dsp_results == []
    assert len(response.results.radio_results) == 1
    assert "Playlist sources unavailable" in response.warnings


@pytest.mark.asyncio
async def test_zero_results_with_bad_key_warns_about_configuration(orchestrator, mock_services):
    songstats = mock_services["songstats"]
    songstats.is_configured.return_value = False
    songstats.check_configuration.return_value = {
        "configured": False,
        "valid": False,
        "message": "API key is not configured",
    }

    response = await orchestrator.execute_research([TRACK_URL], [Vertical.DSP, Vertical.RADIO])

    assert response.using_mock_data is True
    assert response.results.dsp_results
    assert response.results.radio_results
    assert any("API key is not configured" in warning for warning in response.warnings)


@pytest.mark.asyncio
async def test_zero_results_with_valid_key_reports_no_matches(orchestrator, mock_services):
    mock_services["songstats"].get_playlists.return_value = {"playlists": []}

    response = await orchestrator.execute_research([TRACK_URL], [Vertical.DSP])

    assert response.using_mock_data is True
    assert any("No matches found" in warning for warning in response.warnings)
    mock_services["songstats"].check_configuration.assert_called_once()


@pytest.mark.asyncio
async def test_configuration_is_not_checked_when_results_exist(orchestrator, mock_services):
    await orchestrator.execute_research([TRACK_URL], [Vertical.DSP])

    mock_services["songstats"].check_configuration.assert_not_called()


@pytest.mark.asyncio
async def test_no_recognisable_inputs_raises(orchestrator):
    with pytest.raises(ValidationError):
        await orchestrator.execute_research(["", "nonsense"], [Vertical.DSP])
