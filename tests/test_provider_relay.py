"""
Tests for the provider relay and Songstats/Tracklists clients with respx HTTP mocking.
"""
from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from campaign_scout.core.config import Settings
from campaign_scout.core.exceptions import ProviderError, ProviderNotConfiguredError, RateLimitError
from campaign_scout.services.provider_relay import NOT_CONFIGURED_ERROR, is_not_configured
from campaign_scout.services.songstats_svc import SongstatsService
from campaign_scout.services.tracklists_svc import TracklistsService

SONGSTATS = "https://api.songstats.com/enterprise/v1"
TRACKLISTS = "https://api.1001tracklists.com/v1"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        SONGSTATS_API_KEY="songstats-test-key",
        TRACKLISTS_API_KEY="tracklists-test-key",
        PROVIDER_RETRY_DELAY_SECONDS=0,
        PROVIDER_MAX_RETRIES=2,
    )


@pytest.fixture
def songstats(settings):
    return SongstatsService(settings)


@pytest.mark.asyncio
@respx.mock
async def test_call_returns_provider_json_and_sends_key(songstats):
    route = respx.get(f"{SONGSTATS}/tracks/radio").mock(return_value=Response(200, json={"plays": []}))

    payload = await songstats.call("tracks/radio", {"isrc": "USZ4V2500091"})

    assert payload == {"plays": []}
    request = route.calls.last.request
    assert request.headers["apikey"] == "songstats-test-key"
    assert request.url.params["isrc"] == "USZ4V2500091"


@pytest.mark.asyncio
@respx.mock
async def test_transient_status_is_retried(songstats):
    route = respx.get(f"{SONGSTATS}/search").mock(
        side_effect=[Response(503), Response(429), Response(200, json={"id": "abc"})]
    )

    payload = await songstats.call("search", {"q": "spotify:track:x"})

    assert payload == {"id": "abc"}
    assert route.call_count == 3


@pytest.mark.asyncio
@respx.mock
async def test_retries_are_bounded(songstats):
    route = respx.get(f"{SONGSTATS}/search").mock(return_value=Response(502, text="bad gateway"))

    payload = await songstats.call("search")

    assert route.call_count == 3
    assert payload["status"] == 502
    assert payload["error"] == "Songstats API responded with status 502"
    assert payload["details"] == "bad gateway"


@pytest.mark.asyncio
@respx.mock
async def test_client_errors_are_not_retried(songstats):
    route = respx.get(f"{SONGSTATS}/tracks/info").mock(return_value=Response(404, json={"error": "not found"}))

    payload = await songstats.call("tracks/info", {"spotify_track_id": "x"})

    assert route.call_count == 1
    assert payload["status"] == 404


@pytest.mark.asyncio
@respx.mock
async def test_connection_errors_surface_as_payload(songstats):
    route = respx.get(f"{SONGSTATS}/search").mock(side_effect=httpx.ConnectError("refused"))

    payload = await songstats.call("search")

    assert route.call_count == 3
    assert payload["error"] == "Error calling Songstats API"
    assert payload["status"] is None


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_is_reported(songstats):
    respx.get(f"{SONGSTATS}/search").mock(return_value=Response(200, text="<html>"))

    payload = await songstats.call("search")

    assert payload["error"] == "Invalid response format"


@pytest.mark.asyncio
@respx.mock
async def test_undecodable_body_is_reported(songstats):
    respx.get(f"{SONGSTATS}/tracks/radio").mock(return_value=Response(200, content=b'{"a": "\xff"}'))

    payload = await songstats.call("tracks/radio", {"isrc": "USZ4V2500091"})

    assert payload["error"] == "Invalid response format"
    assert payload["status"] == 200
    assert payload["details"].startswith('{"a": ')


@pytest.mark.asyncio
@respx.mock
async def test_read_timeout_is_retried_then_reported(songstats):
    route = respx.get(f"{SONGSTATS}/tracks/radio").mock(side_effect=httpx.ReadTimeout("timed out"))

    payload = await songstats.call("tracks/radio", {"isrc": "USZ4V2500091"})

    assert route.call_count == 3
    assert payload["error"] == "Error calling Songstats API"
    assert payload["status"] is None
    assert payload["details"] == "timed out"


@pytest.mark.asyncio
@respx.mock
async def test_requests_carry_the_provider_timeout(songstats):
    route = respx.get(f"{SONGSTATS}/search").mock(return_value=Response(200, json={"id": "abc"}))

    await songstats.call("search")

    timeout = route.calls.last.request.extensions["timeout"]
    assert timeout["read"] == timeout["connect"] == 10.0


@pytest.mark.asyncio
@respx.mock
async def test_unconfigured_key_never_calls_out():
    service = SongstatsService(Settings(_env_file=None, SONGSTATS_API_KEY="short"))
    route = respx.get(f"{SONGSTATS}/search")

    payload = await service.call("search")

    assert is_not_configured(payload)
    assert payload["error"] == NOT_CONFIGURED_ERROR
    assert not route.called


class TestSongstatsLookups:
    @pytest.mark.asyncio
    @respx.mock
    async def test_resolve_songstats_id(self, songstats):
        route = respx.get(f"{SONGSTATS}/search").mock(return_value=Response(200, json={"id": 991}))

        assert await songstats.resolve_songstats_id("abc", "artist") == "991"
        assert route.calls.last.request.url.params["q"] == "spotify:artist:abc"

    @pytest.mark.asyncio
    @respx.mock
    async def test_resolve_isrc_from_links(self, songstats):
        respx.get(f"{SONGSTATS}/tracks/info").mock(
            return_value=Response(200, json={"track_info": {"links": [{"source": "spotify", "isrc": "usz4v2500091"}]}})
        )

        assert await songstats.resolve_isrc("2Fxmhks0bxGSBdJ92vM42m") == "USZ4V2500091"

    @pytest.mark.asyncio
    @respx.mock
    async def test_resolve_isrc_failure_returns_none(self, songstats):
        respx.get(f"{SONGSTATS}/tracks/info").mock(return_value=Response(500))

        assert await songstats.resolve_isrc("x") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_playlists_endpoint_by_kind(self, songstats):
        route = respx.get(f"{SONGSTATS}/artists/ss-9/playlists").mock(return_value=Response(200, json={"playlists": []}))

        assert await songstats.get_playlists("ss-9", "artist") == {"playlists": []}
        assert route.called

    def test_check_configuration(self):
        missing = SongstatsService(Settings(_env_file=None)).check_configuration()
        short = SongstatsService(Settings(_env_file=None, SONGSTATS_API_KEY="abc")).check_configuration()
        valid = SongstatsService(Settings(_env_file=None, SONGSTATS_API_KEY="a-long-enough-key")).check_configuration()

        assert missing == {"configured": False, "valid": False, "message": "API key is not configured"}
        assert short["configured"] and not short["valid"]
        assert valid["valid"] is True


class TestTracklists:
    @pytest.mark.asyncio
    @respx.mock
    async def test_search_by_isrc(self, settings):
        route = respx.get(f"{TRACKLISTS}/search").mock(
            return_value=Response(200, json={"data": {"tracklists": [{"id": "t1"}, "junk"]}})
        )

        result = await TracklistsService(settings).search_by_isrc("USZ4V2500091")

        assert result == [{"id": "t1"}]
        assert route.calls.last.request.headers["Authorization"] == "Bearer tracklists-test-key"

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_search_returns_none(self, settings):
        respx.get(f"{TRACKLISTS}/search").mock(return_value=Response(401, json={"error": "unauthorised"}))

        assert await TracklistsService(settings).search_by_isrc("USZ4V2500091") is None

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self):
        service = TracklistsService(Settings(_env_file=None))

        assert await service.search_by_isrc("USZ4V2500091") is None


class TestFetchJson:
    @pytest.mark.asyncio
    @respx.mock
    async def test_exhausted_rate_limit_raises(self, songstats):
        respx.get(f"{SONGSTATS}/search").mock(return_value=Response(429, headers={"Retry-After": "30"}))

        with pytest.raises(RateLimitError) as exc_info:
            await songstats.relay.fetch_json("search")

        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == 30

    @pytest.mark.asyncio
    async def test_missing_key_raises(self):
        relay = SongstatsService(Settings(_env_file=None)).relay

        with pytest.raises(ProviderNotConfiguredError):
            await relay.fetch_json("search")

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_payload_is_wrapped(self, songstats):
        respx.get(f"{SONGSTATS}/tracks/radio").mock(return_value=Response(200, json=[{"station": "KEXP"}]))

        assert await songstats.relay.fetch_json("tracks/radio") == {"data": [{"station": "KEXP"}]}

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_keeps_status(self, songstats):
        respx.get(f"{SONGSTATS}/search").mock(return_value=Response(500))

        with pytest.raises(ProviderError) as exc_info:
            await songstats.relay.fetch_json("search")

        assert exc_info.value.status_code == 500
        assert exc_info.value.provider == "Songstats"
