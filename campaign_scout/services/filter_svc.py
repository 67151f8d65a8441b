from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from campaign_scout.core.config import RECENT_WINDOW_DAYS
from campaign_scout.domain.models import (
    AnyResult,
    FilterOptions,
    PlaylistResult,
    RadioResult,
    ResearchResults,
    Vertical,
)
from campaign_scout.utils import parse_date, utc_now


def result_date(result: AnyResult) -> str | None:
    if isinstance(result, PlaylistResult):
        return result.last_updated
    if isinstance(result, RadioResult):
        return result.last_spin
    return getattr(result, "date", None)


def _is_recent(result: AnyResult, cutoff: datetime) -> bool:
    parsed = parse_date(result_date(result))
    return parsed is not None and parsed > cutoff


def _passes(result: AnyResult, options: FilterOptions, cutoff: datetime) -> bool:
    if options.verticals and Vertical(result.vertical) not in options.verticals:
        return False
    if options.recent_only and not _is_recent(result, cutoff):
        return False
    if isinstance(result, PlaylistResult) and result.follower_count < options.min_followers:
        return False
    return True


def filter_results(
    results: Iterable[AnyResult],
    options: FilterOptions,
    now: datetime | None = None,
) -> list[AnyResult]:
    """
    Return the results satisfying every active option, in input order.

    ``recent_only`` keeps entries dated strictly within the last
    ``RECENT_WINDOW_DAYS``; undated or unparsable entries are dropped.
    ``min_followers`` applies to playlists only. An empty ``verticals`` set
    means no vertical restriction. Inputs are never mutated.
    """
    cutoff = (parse_date(now) or utc_now()) - timedelta(days=RECENT_WINDOW_DAYS)
    return [result for result in results if _passes(result, options, cutoff)]


def filter_research_results(
    results: ResearchResults,
    options: FilterOptions,
    now: datetime | None = None,
) -> ResearchResults:
    return ResearchResults(
        dsp_results=filter_results(results.dsp_results, options, now),
        radio_results=filter_results(results.radio_results, options, now),
        dj_results=filter_results(results.dj_results, options, now),
        press_results=filter_results(results.press_results, options, now),
    )
