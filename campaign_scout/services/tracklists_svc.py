from __future__ import annotations

import logging
from typing import Any

from campaign_scout.services.provider_relay import ProviderRelay, is_error_payload

logger = logging.getLogger(__name__)


class TracklistsService(ProviderRelay):
    """1001Tracklists client for DJ set placements."""

    PROVIDER = "1001Tracklists"

    @property
    def base_url(self) -> str:
        return self.settings.TRACKLISTS_BASE_URL

    @property
    def api_key(self) -> str | None:
        return self.settings.TRACKLISTS_API_KEY

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "Authorization": f"Bearer {self.api_key or ''}"}

    async def search_by_isrc(self, isrc: str) -> list[dict[str, Any]] | None:
        """
        Search tracklists containing a track.

        Returns the tracklist entries (possibly empty) on success and None when
        the provider call failed, so callers can count successful attempts.
        """
        payload = await self.call("search", {"isrc": isrc})
        if is_error_payload(payload):
            logger.info("No tracklists for ISRC %s: %s", isrc, payload.get("error"))
            return None

        tracklists = payload.get("tracklists")
        if tracklists is None and isinstance(payload.get("data"), dict):
            tracklists = payload["data"].get("tracklists")
        if not isinstance(tracklists, list):
            logger.warning("Unexpected tracklists payload for ISRC %s", isrc)
            return []
        return [entry for entry in tracklists if isinstance(entry, dict)]
