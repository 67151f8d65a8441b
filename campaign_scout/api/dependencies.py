from __future__ import annotations

from functools import lru_cache

from campaign_scout.core.config import Settings, get_settings
from campaign_scout.services.fallback_svc import FallbackGenerator
from campaign_scout.services.research_logic import ResearchOrchestrator
from campaign_scout.services.songstats_svc import SongstatsService
from campaign_scout.services.tracklists_svc import TracklistsService
from campaign_scout.storage.campaign_storage import CampaignStorage, get_campaign_storage

__all__ = [
    "get_settings",
    "get_songstats_service",
    "get_tracklists_service",
    "get_fallback_generator",
    "get_research_orchestrator",
    "get_campaign_storage",
    "CampaignStorage",
    "Settings",
]


@lru_cache(maxsize=1)
def get_songstats_service() -> SongstatsService:
    return SongstatsService(get_settings())


@lru_cache(maxsize=1)
def get_tracklists_service() -> TracklistsService:
    return TracklistsService(get_settings())


@lru_cache(maxsize=1)
def get_fallback_generator() -> FallbackGenerator:
    return FallbackGenerator()


@lru_cache(maxsize=1)
def get_research_orchestrator() -> ResearchOrchestrator:
    return ResearchOrchestrator(
        songstats=get_songstats_service(),
        tracklists=get_tracklists_service(),
        fallback=get_fallback_generator(),
    )
