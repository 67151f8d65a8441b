from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from datetime import datetime, timedelta

from campaign_scout.domain import catalogs
from campaign_scout.domain.models import (
    DjResult,
    NormalizedInput,
    PlaylistResult,
    PressResult,
    RadioResult,
    ResearchResults,
    Vertical,
)
from campaign_scout.services.aggregation import merge_tracklists, results_of
from campaign_scout.utils import utc_now

logger = logging.getLogger(__name__)


def is_mock_result(result_id: str) -> bool:
    return catalogs.MOCK_MARKER in result_id


class FallbackGenerator:
    """
    Builds plausible demo results from the seed catalogs.

    Every entity is attributed to one or two of the supplied inputs, dated
    inside the vertical's window and given an id carrying the mock marker.
    Pass a seeded ``random.Random`` (and ``now``) for reproducible output.
    """

    def __init__(self, rng: random.Random | None = None, now: datetime | None = None) -> None:
        self.rng = rng or random.Random()
        self._now = now

    @property
    def now(self) -> datetime:
        return self._now or utc_now()

    def _recent_date(self, vertical: str) -> str:
        window = catalogs.DATE_WINDOW_DAYS[vertical]
        offset = timedelta(days=self.rng.randrange(window), seconds=self.rng.randrange(86_400))
        return (self.now - offset).isoformat()

    def _pick_matches(self, inputs: list[NormalizedInput]) -> list[int]:
        count = self.rng.randint(1, min(2, len(inputs)))
        return [item.input_index for item in self.rng.sample(inputs, count)]

    def playlists(self, inputs: list[NormalizedInput]) -> list[PlaylistResult]:
        if not inputs:
            return []
        return [
            PlaylistResult(
                id=f"{catalogs.MOCK_MARKER}-playlist-{position}",
                playlist_name=name,
                curator_name=curator,
                follower_count=followers,
                last_updated=self._recent_date("dsp"),
                playlist_url=f"https://open.spotify.com/playlist/{playlist_id}",
                matched_inputs=self._pick_matches(inputs),
            )
            for position, (name, curator, followers, playlist_id) in enumerate(catalogs.PLAYLISTS)
        ]

    def radio_stations(self, inputs: list[NormalizedInput]) -> list[RadioResult]:
        if not inputs:
            return []
        return [
            RadioResult(
                id=f"{catalogs.MOCK_MARKER}-station-{position}",
                station=station,
                show=show,
                dj=host,
                country=country,
                plays_count=self.rng.randint(1, 25),
                last_spin=self._recent_date("radio"),
                matched_inputs=self._pick_matches(inputs),
            )
            for position, (station, show, host, country) in enumerate(catalogs.RADIO_STATIONS)
        ]

    def dj_events(self, inputs: list[NormalizedInput]) -> list[DjResult]:
        """Four synthetic sets per input, merged the same way live tracklists are."""
        processed: dict[str, DjResult] = {}
        for item in inputs:
            idx = item.input_index
            tracklists = [
                {
                    "id": f"{catalogs.MOCK_MARKER}-dj-{idx}-{i}",
                    "dj": catalogs.DJS[i % len(catalogs.DJS)],
                    "name": catalogs.EVENTS[i % len(catalogs.EVENTS)],
                    "venue": catalogs.VENUES[i % len(catalogs.VENUES)],
                    "date": self._recent_date("dj"),
                    "url": f"https://www.1001tracklists.com/tracklist/{catalogs.MOCK_MARKER}-{idx}-{i}",
                }
                for i in range(catalogs.DJ_EVENTS_PER_INPUT)
            ]
            merge_tracklists(processed, tracklists, idx)
        return results_of(processed)

    def press_articles(self, inputs: list[NormalizedInput]) -> list[PressResult]:
        if not inputs:
            return []
        articles: list[PressResult] = []
        for i in range(self.rng.randint(5, 8)):
            outlet, writer = self.rng.choice(catalogs.PRESS_OUTLETS)
            matched = self._pick_matches(inputs)
            title = self.rng.choice(catalogs.ARTICLE_TITLES).format(artist=f"Artist {matched[0]}")
            slug = outlet.lower().replace(" ", "-")
            articles.append(
                PressResult(
                    id=f"{catalogs.MOCK_MARKER}-press-{i}",
                    outlet=outlet,
                    writer=writer,
                    article_title=title,
                    date=self._recent_date("press"),
                    link=f"https://example.com/press/{slug}/article-{i}",
                    matched_inputs=matched,
                )
            )
        return articles

    def generate(self, inputs: list[NormalizedInput], verticals: Iterable[Vertical]) -> ResearchResults:
        """Synthetic results for the requested verticals only."""
        requested = {Vertical(v) for v in verticals}
        results = ResearchResults()
        if Vertical.DSP in requested:
            results.dsp_results = self.playlists(inputs)
        if Vertical.RADIO in requested:
            results.radio_results = self.radio_stations(inputs)
        if Vertical.DJ in requested:
            results.dj_results = self.dj_events(inputs)
        if Vertical.PRESS in requested:
            results.press_results = self.press_articles(inputs)
        logger.info("Generated %s mock results for %s inputs", results.total(), len(inputs))
        return results
