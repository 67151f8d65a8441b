from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from campaign_scout.core.exceptions import ValidationError
from campaign_scout.domain.models import (
    VERTICAL_ORDER,
    NormalizedInput,
    ResearchResponse,
    ResearchResults,
    Vertical,
)
from campaign_scout.services.aggregation import flatten_results
from campaign_scout.services.fallback_svc import FallbackGenerator, is_mock_result
from campaign_scout.services.fetchers import (
    DjFetcher,
    PlaylistFetcher,
    PressFetcher,
    RadioFetcher,
    VerticalFetcher,
)
from campaign_scout.services.input_normalizer import normalize_inputs
from campaign_scout.services.songstats_svc import SongstatsService
from campaign_scout.services.tracklists_svc import TracklistsService

logger = logging.getLogger(__name__)

VERTICAL_LABELS = {
    Vertical.DSP: "Playlist",
    Vertical.RADIO: "Radio",
    Vertical.DJ: "DJ",
    Vertical.PRESS: "Press",
}


class ResearchOrchestrator:
    """
    Runs one campaign's research across the selected verticals.

    Each vertical is fetched concurrently and settled independently, so a
    failing provider costs only its own vertical. When every vertical comes
    back empty the Songstats configuration decides which warning is shown,
    and the run falls back to demo data.
    """

    def __init__(
        self,
        songstats: SongstatsService,
        tracklists: TracklistsService,
        fallback: FallbackGenerator | None = None,
    ) -> None:
        self.songstats = songstats
        self.fallback = fallback or FallbackGenerator()
        self.fetchers: dict[Vertical, VerticalFetcher] = {
            Vertical.DSP: PlaylistFetcher(songstats),
            Vertical.RADIO: RadioFetcher(songstats, rng=self.fallback.rng),
            Vertical.DJ: DjFetcher(tracklists, self.fallback),
            Vertical.PRESS: PressFetcher(self.fallback),
        }

    async def gather_results(
        self,
        inputs: list[NormalizedInput],
        verticals: Sequence[Vertical],
        warnings: list[str],
    ) -> ResearchResults:
        requested = {Vertical(vertical) for vertical in verticals}
        selected = [vertical for vertical in VERTICAL_ORDER if vertical in requested]
        outcomes = await asyncio.gather(
            *(self.fetchers[vertical].fetch(inputs, warnings) for vertical in selected),
            return_exceptions=True,
        )

        results = ResearchResults()
        for vertical, outcome in zip(selected, outcomes):
            if isinstance(outcome, BaseException):
                warnings.append(f"{VERTICAL_LABELS[vertical]} sources unavailable")
                logger.warning("%s research failed: %s", vertical.value, outcome)
                continue
            setattr(results, f"{vertical.value}_results", outcome)
            logger.info("%s results: %s", VERTICAL_LABELS[vertical], len(outcome))
        return results

    def _zero_results_warning(self) -> str:
        check = self.songstats.check_configuration()
        if not check["valid"]:
            return f"Songstats API not available ({check['message']}); showing demo data"
        return "No matches found for these inputs; showing demo data"

    async def execute_research(
        self,
        raw_inputs: Sequence[str],
        verticals: Sequence[Vertical],
    ) -> ResearchResponse:
        """Normalize, fan out, and fall back to demo data when nothing was found."""
        normalized = normalize_inputs(raw_inputs)
        if not normalized:
            raise ValidationError("No recognisable reference inputs were supplied.")
        if not verticals:
            raise ValidationError("At least one vertical must be selected.")

        warnings: list[str] = []
        results = await self.gather_results(normalized, verticals, warnings)

        if results.is_empty():
            message = self._zero_results_warning()
            logger.warning(message)
            warnings.append(message)
            results = self.fallback.generate(normalized, verticals)

        using_mock_data = any(is_mock_result(result.id) for result in flatten_results(results))
        return ResearchResponse(
            campaign_id=None,
            normalized_inputs=normalized,
            results=results,
            using_mock_data=using_mock_data,
            warnings=warnings,
        )
