"""Per-vertical fetchers: normalized inputs in, deduplicated results out."""
from __future__ import annotations

import logging
import random
from typing import Any

from campaign_scout.domain.models import (
    DjResult,
    InputType,
    NormalizedInput,
    PlaylistResult,
    PressResult,
    RadioResult,
    Vertical,
)
from campaign_scout.services.aggregation import (
    extract_playlists,
    extract_radio_payload,
    merge_playlists,
    merge_radio_plays,
    merge_radio_summary,
    merge_tracklists,
    results_of,
)
from campaign_scout.services.fallback_svc import FallbackGenerator
from campaign_scout.services.provider_relay import is_error_payload, is_not_configured
from campaign_scout.services.songstats_svc import SongstatsService
from campaign_scout.services.tracklists_svc import TracklistsService

logger = logging.getLogger(__name__)

SPOTIFY_KINDS = {InputType.SPOTIFY_TRACK: "track", InputType.SPOTIFY_ARTIST: "artist"}


def _warn(warnings: list[str] | None, message: str) -> None:
    logger.warning(message)
    if warnings is not None and message not in warnings:
        warnings.append(message)


class VerticalFetcher:
    """
    Base for the four fetchers.

    ``fetch`` never raises. Per-input failures are logged and skipped;
    user-facing notes go into the optional ``warnings`` list.
    """

    vertical: Vertical

    async def fetch(self, inputs: list[NormalizedInput], warnings: list[str] | None = None) -> list[Any]:
        try:
            return await self._fetch(inputs, warnings)
        except Exception as exc:
            logger.exception("%s fetch failed", self.vertical.value)
            _warn(warnings, f"{self.vertical.value.upper()} research failed: {exc}")
            return []

    async def _fetch(self, inputs: list[NormalizedInput], warnings: list[str] | None) -> list[Any]:
        raise NotImplementedError


class PlaylistFetcher(VerticalFetcher):
    vertical = Vertical.DSP

    def __init__(self, songstats: SongstatsService) -> None:
        self.songstats = songstats

    async def _fetch(self, inputs: list[NormalizedInput], warnings: list[str] | None) -> list[PlaylistResult]:
        candidates = [item for item in inputs if item.type in SPOTIFY_KINDS]
        if not candidates:
            return []
        if not self.songstats.is_configured():
            _warn(warnings, "Songstats API key not configured; playlist data unavailable")
            return []

        processed: dict[str, PlaylistResult] = {}
        for item in candidates:
            kind = SPOTIFY_KINDS[item.type]
            try:
                songstats_id = await self.songstats.resolve_songstats_id(item.id, kind)
                if not songstats_id:
                    logger.info("No Songstats id for Spotify %s %s", kind, item.id)
                    continue
                payload = await self.songstats.get_playlists(songstats_id, kind)
                if is_not_configured(payload):
                    _warn(warnings, "Songstats API key not configured; playlist data unavailable")
                    break
                if is_error_payload(payload):
                    logger.warning("Playlist lookup failed for input %s: %s", item.input_index, payload.get("error"))
                    continue
                playlists = extract_playlists(payload)
                if playlists is None:
                    logger.warning("Unexpected playlist payload for input %s", item.input_index)
                    continue
                merge_playlists(processed, playlists, item.input_index)
            except Exception:
                logger.exception("Playlist fetch failed for input %s", item.input_index)

        logger.info("Found %s playlists across %s inputs", len(processed), len(candidates))
        return results_of(processed)


class RadioFetcher(VerticalFetcher):
    vertical = Vertical.RADIO

    def __init__(self, songstats: SongstatsService, rng: random.Random | None = None) -> None:
        self.songstats = songstats
        self.rng = rng

    async def _isrc_for(self, item: NormalizedInput) -> str | None:
        if item.type == InputType.ISRC:
            return item.id
        return await self.songstats.resolve_isrc(item.id)

    async def _fetch(self, inputs: list[NormalizedInput], warnings: list[str] | None) -> list[RadioResult]:
        candidates = [item for item in inputs if item.type in (InputType.ISRC, InputType.SPOTIFY_TRACK)]
        if not candidates:
            return []
        if not self.songstats.is_configured():
            _warn(warnings, "Songstats API key not configured; radio data unavailable")
            return []

        processed: dict[str, RadioResult] = {}
        for item in candidates:
            try:
                isrc = await self._isrc_for(item)
                if not isrc:
                    logger.info("No ISRC for input %s", item.input_index)
                    continue
                payload = await self.songstats.get_radio_plays(isrc)
                if is_not_configured(payload):
                    _warn(warnings, "Songstats API key not configured; radio data unavailable")
                    break
                if is_error_payload(payload):
                    logger.warning("Radio lookup failed for ISRC %s: %s", isrc, payload.get("error"))
                    continue

                shape, data = extract_radio_payload(payload)
                if shape == "events":
                    merge_radio_plays(processed, data, item.input_index, rng=self.rng)
                elif shape == "summary":
                    merge_radio_summary(processed, data, item.input_index)
                else:
                    logger.warning("Unrecognised radio payload for ISRC %s", isrc)
            except Exception:
                logger.exception("Radio fetch failed for input %s", item.input_index)

        logger.info("Found %s radio entries across %s inputs", len(processed), len(candidates))
        return results_of(processed)


class DjFetcher(VerticalFetcher):
    vertical = Vertical.DJ

    def __init__(self, tracklists: TracklistsService, fallback: FallbackGenerator) -> None:
        self.tracklists = tracklists
        self.fallback = fallback

    async def _fetch(self, inputs: list[NormalizedInput], warnings: list[str] | None) -> list[DjResult]:
        processed: dict[str, DjResult] = {}
        attempts = 0
        successes = 0
        for item in inputs:
            if item.type != InputType.ISRC:
                continue
            attempts += 1
            try:
                tracklists = await self.tracklists.search_by_isrc(item.id)
            except Exception:
                logger.exception("Tracklist search failed for input %s", item.input_index)
                continue
            if tracklists is None:
                continue
            successes += 1
            merge_tracklists(processed, tracklists, item.input_index)

        if (attempts > 0 and successes == 0) or not processed:
            logger.info("DJ lookup gave %s/%s successful calls; using demo data", successes, attempts)
            _warn(warnings, "Using demo data for DJ results")
            return self.fallback.dj_events(inputs)
        return results_of(processed)


class PressFetcher(VerticalFetcher):
    """No live press provider exists; coverage is always synthetic."""

    vertical = Vertical.PRESS

    def __init__(self, fallback: FallbackGenerator) -> None:
        self.fallback = fallback

    async def _fetch(self, inputs: list[NormalizedInput], warnings: list[str] | None) -> list[PressResult]:
        _warn(warnings, "Using demo data for press results")
        return self.fallback.press_articles(inputs)
