"""
Merge-by-key helpers used by the vertical fetchers.

Each helper takes the caller's processed map (dedup key -> result), folds one
input's provider entries into it and returns the same map. Maps are created per
fetch call and discarded afterwards; insertion order is the result order.
"""
from __future__ import annotations

import logging
import random
import string
from typing import Any, TypeVar

from campaign_scout.domain.models import (
    VERTICAL_ORDER,
    AnyResult,
    DjResult,
    PlaylistResult,
    RadioResult,
    ResearchResults,
    VerticalResult,
)
from campaign_scout.utils import is_later, utc_now_iso

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=VerticalResult)

RADIO_EVENT_KEYS = ("plays", "data", "stations", "radio")
RADIO_TOTAL_KEYS = ("total_plays", "radio_plays", "total_spins", "plays_total")
RADIO_SATELLITE_KEYS = ("sxm_plays", "satellite_plays", "siriusxm_plays", "sxm_spins")
SUMMARY_STATIONS = {
    "satellite": "SiriusXM (Satellite Radio)",
    "terrestrial": "Terrestrial Radio",
}


def _first(entry: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = entry.get(key)
        if value not in (None, ""):
            return value
    return default


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def results_of(processed: dict[str, T]) -> list[T]:
    return list(processed.values())


# DSP

def merge_playlists(
    processed: dict[str, PlaylistResult],
    playlists: list[Any],
    input_index: int,
) -> dict[str, PlaylistResult]:
    """Fold one input's playlist entries into ``processed``, keyed by playlist id."""
    for playlist in playlists:
        if not isinstance(playlist, dict):
            continue
        key = _first(playlist, "spotifyid", "spotify_id", "id")
        if not key:
            logger.debug("Skipping playlist without identifier: %s", playlist.get("name"))
            continue
        key = str(key)

        existing = processed.get(key)
        if existing:
            existing.add_match(input_index)
            continue

        curator = playlist.get("curator")
        curator_name = _first(playlist, "owner_name", "curator_name") or (
            curator.get("name") if isinstance(curator, dict) else curator
        )
        processed[key] = PlaylistResult(
            id=key,
            playlist_name=str(_first(playlist, "name", "title", default="Untitled Playlist")),
            curator_name=str(curator_name or "Unknown"),
            follower_count=_as_int(_first(playlist, "followers", "followers_count", "follower_count")),
            last_updated=str(_first(playlist, "last_updated", "updated_at", default=utc_now_iso())),
            playlist_url=str(_first(playlist, "url", "external_url", default=f"https://open.spotify.com/playlist/{key}")),
            matched_inputs=[input_index],
        )
    return processed


def extract_playlists(payload: dict[str, Any]) -> list[Any] | None:
    """Pull the playlist array out of either the playlists or the stats response shape."""
    playlists = payload.get("playlists")
    if isinstance(playlists, list):
        return playlists
    for stat in payload.get("stats") or []:
        if isinstance(stat, dict) and stat.get("source") == "spotify":
            nested = (stat.get("data") or {}).get("playlists")
            if isinstance(nested, list):
                return nested
    return None


# Radio

def extract_radio_payload(payload: dict[str, Any]) -> tuple[str, Any]:
    """
    Classify a radio response.

    Returns ``("events", list)`` for per-play data, ``("summary", dict)`` for
    aggregate counts, or ``("unknown", None)``.
    """
    candidates: list[dict[str, Any]] = [payload]
    for stat in payload.get("stats") or []:
        if isinstance(stat, dict) and stat.get("source") == "radio" and isinstance(stat.get("data"), dict):
            candidates.append(stat["data"])

    for candidate in candidates:
        for key in RADIO_EVENT_KEYS:
            events = candidate.get(key)
            if isinstance(events, list):
                return "events", events
        tracks = candidate.get("tracks")
        if isinstance(tracks, list) and tracks and isinstance(tracks[0], dict):
            nested = tracks[0].get("radio")
            if isinstance(nested, list):
                return "events", nested

    for candidate in candidates:
        if any(key in candidate for key in RADIO_TOTAL_KEYS):
            return "summary", candidate

    return "unknown", None


def _random_station_key(rng: random.Random | None) -> str:
    picker = rng or random
    suffix = "".join(picker.choice(string.ascii_lowercase + string.digits) for _ in range(8))
    return f"station-{suffix}"


def merge_radio_plays(
    processed: dict[str, RadioResult],
    plays: list[Any],
    input_index: int,
    *,
    rng: random.Random | None = None,
) -> dict[str, RadioResult]:
    """
    Fold play events into ``processed``, keyed by station identifier.

    Repeat sightings add to the play counter, widen ``matched_inputs`` and
    only move ``last_spin`` forward.
    """
    for play in plays:
        if not isinstance(play, dict):
            continue
        station_name = _first(play, "station", "station_name", "name")
        key = _first(play, "station_id", "station", "station_name", "name")
        key = str(key) if key else _random_station_key(rng)
        count = max(1, _as_int(_first(play, "spins", "plays", "count"), default=1))
        spin_date = _first(play, "date", "last_spin_date", "last_spin", "last_play", "played_at")

        existing = processed.get(key)
        if existing:
            existing.add_match(input_index)
            existing.plays_count += count
            if is_later(spin_date, existing.last_spin):
                existing.last_spin = str(spin_date)
            continue

        processed[key] = RadioResult(
            id=key,
            station=str(station_name or "Unknown Station"),
            show=str(_first(play, "show", "program", default="")),
            dj=str(_first(play, "dj", "host", default="")),
            country=str(_first(play, "country", "region", default="Unknown")),
            plays_count=count,
            last_spin=str(spin_date or utc_now_iso()),
            airplay_link=str(_first(play, "link", "url", default="")),
            matched_inputs=[input_index],
        )
    return processed


def merge_radio_summary(
    processed: dict[str, RadioResult],
    summary: dict[str, Any],
    input_index: int,
) -> dict[str, RadioResult]:
    """
    Synthesize at most two entries (satellite, terrestrial) for one input.

    Keys carry the input index, so repeats for the same input accumulate and
    different inputs never merge.
    """
    total = _as_int(_first(summary, *RADIO_TOTAL_KEYS))
    satellite = min(total, _as_int(_first(summary, *RADIO_SATELLITE_KEYS))) if total else 0
    counts = {"satellite": satellite, "terrestrial": max(0, total - satellite)}
    last_spin = _first(summary, "last_spin", "last_play", "date", "updated_at")

    for category, count in counts.items():
        if count <= 0:
            continue
        key = f"{category}-{input_index}"
        existing = processed.get(key)
        if existing:
            existing.plays_count += count
            if is_later(last_spin, existing.last_spin):
                existing.last_spin = str(last_spin)
            continue
        processed[key] = RadioResult(
            id=key,
            station=SUMMARY_STATIONS[category],
            show="",
            dj="",
            country=str(_first(summary, "country", default="Unknown")),
            plays_count=count,
            last_spin=str(last_spin or utc_now_iso()),
            airplay_link="",
            matched_inputs=[input_index],
        )
    return processed


# DJ

def merge_tracklists(
    processed: dict[str, DjResult],
    tracklists: list[dict[str, Any]],
    input_index: int,
) -> dict[str, DjResult]:
    """Fold tracklist hits into ``processed``, keyed by ``<dj>-<event>-<date>``."""
    for tracklist in tracklists:
        key = f"{tracklist.get('dj')}-{tracklist.get('name')}-{tracklist.get('date')}"
        existing = processed.get(key)
        if existing:
            existing.add_match(input_index)
            continue
        processed[key] = DjResult(
            id=str(tracklist.get("id") or f"dj-{input_index}-{len(processed)}"),
            dj=str(tracklist.get("dj") or "Unknown DJ"),
            event=str(tracklist.get("name") or "Unknown Event"),
            location=str(tracklist.get("venue") or "Unknown Venue"),
            date=str(tracklist.get("date") or utc_now_iso()),
            tracklist_url=str(tracklist.get("url") or ""),
            matched_inputs=[input_index],
        )
    return processed


# Cross-vertical

def flatten_results(results: ResearchResults) -> list[AnyResult]:
    """Concatenate every vertical in fixed priority order; no cross-vertical dedup."""
    flattened: list[AnyResult] = []
    for vertical in VERTICAL_ORDER:
        flattened.extend(results.for_vertical(vertical))
    return flattened
