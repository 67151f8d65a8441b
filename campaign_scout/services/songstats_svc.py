from __future__ import annotations

import logging
from typing import Any, Literal

from campaign_scout.core.config import MIN_API_KEY_LENGTH, Settings
from campaign_scout.domain.references import ISRC_PATTERN
from campaign_scout.services.provider_relay import ProviderRelay, is_error_payload

logger = logging.getLogger(__name__)


class SongstatsService:
    """
    Songstats client for DSP playlist placements and radio airplay.

    Wraps the relay with the lookup steps the fetchers need: Spotify id to
    Songstats id, Spotify track to ISRC, and the per-entity endpoints.
    """

    def __init__(self, settings: Settings, relay: ProviderRelay | None = None) -> None:
        self.settings = settings
        self.relay = relay or SongstatsRelay(settings)

    async def call(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        return await self.relay.call(path, params)

    def is_configured(self) -> bool:
        return self.settings.songstats_key_valid

    def check_configuration(self) -> dict[str, Any]:
        """Report whether a usable key is present, without calling out."""
        key = self.settings.SONGSTATS_API_KEY
        configured = bool(key)
        valid = configured and len(key or "") >= MIN_API_KEY_LENGTH
        if not configured:
            message = "API key is not configured"
        elif valid:
            message = "API key is configured properly"
        else:
            message = "API key is configured but may be invalid"
        return {"configured": configured, "valid": valid, "message": message}

    async def resolve_songstats_id(self, spotify_id: str, kind: Literal["track", "artist"]) -> str | None:
        payload = await self.call("search", {"q": f"spotify:{kind}:{spotify_id}"})
        if is_error_payload(payload):
            logger.warning("Songstats id lookup failed for %s %s: %s", kind, spotify_id, payload.get("error"))
            return None
        songstats_id = payload.get("id") or (payload.get("track_info") or {}).get("songstats_track_id")
        return str(songstats_id) if songstats_id else None

    async def resolve_isrc(self, spotify_track_id: str) -> str | None:
        """Look up the ISRC for a Spotify track; None when unknown."""
        payload = await self.call("tracks/info", {"spotify_track_id": spotify_track_id})
        if is_error_payload(payload):
            logger.warning("ISRC lookup failed for Spotify track %s: %s", spotify_track_id, payload.get("error"))
            return None

        track_info = payload.get("track_info") if isinstance(payload.get("track_info"), dict) else {}
        candidates: list[Any] = [payload.get("isrc"), track_info.get("isrc")]
        for link in track_info.get("links") or []:
            if isinstance(link, dict):
                candidates.append(link.get("isrc"))

        for candidate in candidates:
            if isinstance(candidate, str) and ISRC_PATTERN.match(candidate.strip().upper()):
                return candidate.strip().upper()
        return None

    async def get_playlists(self, songstats_id: str, kind: Literal["track", "artist"]) -> dict[str, Any]:
        collection = "tracks" if kind == "track" else "artists"
        return await self.call(f"{collection}/{songstats_id}/playlists")

    async def get_radio_plays(self, isrc: str) -> dict[str, Any]:
        return await self.call("tracks/radio", {"isrc": isrc})


class SongstatsRelay(ProviderRelay):
    PROVIDER = "Songstats"

    @property
    def base_url(self) -> str:
        return self.settings.SONGSTATS_BASE_URL

    @property
    def api_key(self) -> str | None:
        return self.settings.SONGSTATS_API_KEY

    def is_configured(self) -> bool:
        return self.settings.songstats_key_valid
